"""
Item to package expansion.

Pricing and packing both consume the packages produced here, so the two
never disagree on package count, envelope or weight for the same item.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from load_planner.catalog import CUSTOM_BOX_COLOR, find_box
from load_planner.models import (
    CUSTOM_BOX_ID,
    BoxType,
    CustomBox,
    Dimensions,
    Item,
    Package,
)

logger = logging.getLogger(__name__)


def resolve_envelope(item: Item, boxes: Iterable[BoxType]) -> Optional[tuple[str, Dimensions, str]]:
    """
    Outer dimensions of one package of `item`.

    Returns (box_id, dimensions, color), or None when the item has no box
    or references a box that is not in the catalog.
    """
    if item.box is None:
        return None
    if isinstance(item.box, CustomBox):
        return CUSTOM_BOX_ID, item.box.dimensions, CUSTOM_BOX_COLOR

    box = find_box(boxes, item.box.box_id)
    if box is None:
        logger.warning(f"item={item.id} references unknown box_id={item.box.box_id}")
        return None
    return box.id, box.dimensions, box.color


def expand_item(item: Item, boxes: Iterable[BoxType]) -> Optional[list[Package]]:
    """
    Expand an item into the packages the packer will place.

    - pack_together with quantity N > 1: one package holding N units, weight N x unit weight
    - otherwise: N packages of one unit each
    """
    envelope = resolve_envelope(item, boxes)
    if envelope is None:
        return None
    box_id, dims, color = envelope

    if item.pack_together and item.quantity > 1:
        return [
            Package(
                package_id=f"{item.id}-consolidated",
                item_id=item.id,
                client_id=item.client_id,
                box_id=box_id,
                dimensions=dims,
                weight_kg=item.total_weight_kg,
                unit_count=item.quantity,
                color=color,
            )
        ]

    return [
        Package(
            package_id=f"{item.id}-{i}",
            item_id=item.id,
            client_id=item.client_id,
            box_id=box_id,
            dimensions=dims,
            weight_kg=float(item.weight_kg),
            unit_count=1,
            color=color,
        )
        for i in range(item.quantity)
    ]


def expand_items(items: Iterable[Item], boxes: Iterable[BoxType]) -> tuple[list[Package], list[Item]]:
    """Expand many items; returns (packages, unresolved items) in input order."""
    boxes = list(boxes)
    packages: list[Package] = []
    unresolved: list[Item] = []
    for item in items:
        expanded = expand_item(item, boxes)
        if expanded is None:
            unresolved.append(item)
        else:
            packages.extend(expanded)
    return packages, unresolved
