"""
Per-client container assignment and fleet-wide loading.

Every client is evaluated against exactly one active container. The packer
itself knows nothing about clients; it receives the package list already
filtered for one container.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel, Field

from load_planner.catalog import active_containers
from load_planner.config import PlannerSettings
from load_planner.expansion import expand_items
from load_planner.models import BoxType, Container, Item, PackingResult
from load_planner.packing.shelf import pack_container

logger = logging.getLogger(__name__)


class ContainerLoad(BaseModel):
    container_id: str
    client_ids: list[str] = Field(default_factory=list)
    item_ids: list[str] = Field(default_factory=list)
    result: PackingResult
    unresolved_item_ids: list[str] = Field(default_factory=list, description="Items with no usable box")

    @property
    def overflow(self) -> bool:
        return len(self.result.unpacked) > 0


class FleetStats(BaseModel):
    container_count: int = 0
    packed_count: int = 0
    unpacked_count: int = 0
    total_weight_kg: float = 0.0
    volume_utilization_pct: float = 0.0
    overflow_container_ids: list[str] = Field(default_factory=list)


class FleetPlan(BaseModel):
    assignments: dict[str, str] = Field(default_factory=dict)
    loads: list[ContainerLoad] = Field(default_factory=list)
    stats: FleetStats = Field(default_factory=FleetStats)

    def load_for(self, container_id: str) -> Optional[ContainerLoad]:
        return next((load for load in self.loads if load.container_id == container_id), None)


def client_ids(items: Iterable[Item]) -> list[str]:
    return sorted({item.client_id for item in items})


def resolve_assignments(
    items: Iterable[Item],
    containers: Iterable[Container],
    assignments: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Map every client in `items` to one active container.

    New clients go to the first active container; a client whose container
    is no longer active is moved there too. Assignments of clients without
    items are kept as given. Returns {} when no container is active.
    """
    active = active_containers(containers)
    if not active:
        return {}

    active_ids = {c.id for c in active}
    resolved = dict(assignments or {})
    for client_id in client_ids(items):
        current = resolved.get(client_id)
        if current is None or current not in active_ids:
            resolved[client_id] = active[0].id
    return resolved


def plan_shipment(
    items: list[Item],
    boxes: Iterable[BoxType],
    containers: Iterable[Container],
    assignments: Mapping[str, str] | None = None,
    settings: PlannerSettings | None = None,
) -> FleetPlan:
    """
    Load every active container with the items of its assigned clients.

    Each container is packed independently from the same read-only inputs,
    so the result for one container does not depend on the others.
    """
    settings = settings or PlannerSettings()
    boxes = list(boxes)
    containers = list(containers)
    active = active_containers(containers)

    if not active:
        logger.warning(f"no active container, {len(items)} items not loaded")
        return FleetPlan()

    resolved = resolve_assignments(items, containers, assignments)

    loads: list[ContainerLoad] = []
    for container in active:
        assigned = [item for item in items if resolved.get(item.client_id) == container.id]
        packages, unresolved = expand_items(assigned, boxes)
        result = pack_container(packages, container, settings=settings)
        loads.append(
            ContainerLoad(
                container_id=container.id,
                client_ids=client_ids(assigned),
                item_ids=[item.id for item in assigned],
                result=result,
                unresolved_item_ids=[item.id for item in unresolved],
            )
        )

    stats = fleet_stats(active, loads)
    logger.info(
        f"plan containers={stats.container_count} packed={stats.packed_count} "
        f"unpacked={stats.unpacked_count} overflow={stats.overflow_container_ids}"
    )
    return FleetPlan(assignments=resolved, loads=loads, stats=stats)


def fleet_stats(containers: list[Container], loads: list[ContainerLoad]) -> FleetStats:
    fleet_volume = sum(c.dimensions.volume for c in containers)
    used_volume = sum(p.dimensions.volume for load in loads for p in load.result.packed)
    return FleetStats(
        container_count=len(loads),
        packed_count=sum(len(load.result.packed) for load in loads),
        unpacked_count=sum(len(load.result.unpacked) for load in loads),
        total_weight_kg=sum(load.result.metrics.total_weight_kg for load in loads),
        volume_utilization_pct=0.0 if fleet_volume == 0 else used_volume / fleet_volume * 100,
        overflow_container_ids=[load.container_id for load in loads if load.overflow],
    )


def container_stats(plan: FleetPlan) -> dict[str, dict[str, object]]:
    """Per-container item count, utilization and overflow flag."""
    return {
        load.container_id: {
            "count": len(load.item_ids),
            "utilization": load.result.metrics.volume_utilization_pct,
            "overflow": load.overflow,
        }
        for load in plan.loads
    }


def confirmable_item_ids(plan: FleetPlan, container_id: str) -> list[str]:
    """Ids of the working-set items currently resolved into `container_id`."""
    load = plan.load_for(container_id)
    if load is None:
        raise KeyError(f"Container '{container_id}' is not active in this plan")
    return list(load.item_ids)


def remove_shipped(items: Iterable[Item], shipped_ids: Iterable[str]) -> list[Item]:
    shipped = set(shipped_ids)
    return [item for item in items if item.id not in shipped]
