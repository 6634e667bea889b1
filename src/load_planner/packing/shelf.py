# src/load_planner/packing/shelf.py

from __future__ import annotations

import logging
from typing import Iterable

from load_planner.config import PlannerSettings
from load_planner.metrics import compute_metrics
from load_planner.models import Container, Package, PackedPackage, PackingResult, Position
from load_planner.packing.constraints import Constraint, default_constraints

logger = logging.getLogger(__name__)


def shelf_order(packages: Iterable[Package]) -> list[Package]:
    """Tallest first, then largest base area; equal keys keep input order."""
    return sorted(
        packages,
        key=lambda p: (-float(p.dimensions.height), -float(p.dimensions.length) * float(p.dimensions.width)),
    )


def pack_container(
    packages: list[Package],
    container: Container,
    constraints: list[Constraint] | None = None,
    settings: PlannerSettings | None = None,
) -> PackingResult:
    """
    Shelf packer: fill rows along x (length), wrap rows along z (width),
    stack layers along y (height).
    - Single pass in shelf_order, no backtracking, no rotation
    - A package that does not fit at the cursor goes to `unpacked` and is never retried
    - Positions are envelope centers
    - Deterministic: same input, same output

    `constraints` defaults to the set built from `settings`; weight is
    advisory unless `settings.enforce_container_payload` is on.
    """
    if constraints is None:
        constraints = default_constraints(container, settings)

    length = float(container.dimensions.length)
    width = float(container.dimensions.width)
    height = float(container.dimensions.height)

    packed: list[PackedPackage] = []
    unpacked: list[Package] = []
    placed_weight = 0.0

    x = z = y = 0.0
    max_shelf_depth = 0.0
    max_row_height = 0.0

    for package in shelf_order(packages):
        rejected_by = next((c.name for c in constraints if not c.allows(package, placed_weight)), None)
        if rejected_by is not None:
            logger.debug(f"package={package.package_id} rejected by {rejected_by}")
            unpacked.append(package)
            continue

        pl = float(package.dimensions.length)
        pw = float(package.dimensions.width)
        ph = float(package.dimensions.height)

        # Wider or longer than the container: no row can hold it
        if pl > length or pw > width:
            logger.debug(f"package={package.package_id} larger than container={container.id} floor")
            unpacked.append(package)
            continue

        # Row full: move back along z
        if x + pl > length:
            x = 0.0
            z += max_shelf_depth
            max_shelf_depth = 0.0

        # Floor of this layer full: move up along y
        if z + pw > width:
            x = 0.0
            z = 0.0
            y += max_row_height
            max_row_height = 0.0

        if y + ph > height:
            logger.debug(f"package={package.package_id} overflows container={container.id} at y={y}")
            unpacked.append(package)
            continue

        packed.append(
            PackedPackage(
                package_id=package.package_id,
                item_id=package.item_id,
                box_id=package.box_id,
                position=Position(x=x + pl / 2, y=y + ph / 2, z=z + pw / 2),
                dimensions=package.dimensions,
                weight_kg=float(package.weight_kg),
                client_id=package.client_id,
                color=package.color,
            )
        )
        placed_weight += float(package.weight_kg)

        x += pl
        max_shelf_depth = max(max_shelf_depth, pw)
        max_row_height = max(max_row_height, ph)

    metrics = compute_metrics(container, packed)
    logger.info(
        f"container={container.id} packed={len(packed)} unpacked={len(unpacked)} "
        f"utilization={metrics.volume_utilization_pct:.1f}%"
    )

    return PackingResult(
        container_id=container.id,
        packed=packed,
        unpacked=unpacked,
        metrics=metrics,
    )
