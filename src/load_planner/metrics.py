from __future__ import annotations

from load_planner.models import Container, PackedPackage, PackingMetrics


def packed_volume(p: PackedPackage) -> float:
    return p.dimensions.volume


def compute_metrics(container: Container, packed: list[PackedPackage]) -> PackingMetrics:
    used_volume = sum(packed_volume(p) for p in packed)
    container_volume = container.dimensions.volume
    utilization = 0.0 if container_volume == 0 else used_volume / container_volume * 100
    return PackingMetrics(
        volume_utilization_pct=utilization,
        total_weight_kg=sum(float(p.weight_kg) for p in packed),
        package_count=len(packed),
        # cm3 -> m3
        free_volume_m3=(container_volume - used_volume) / 1_000_000,
    )
