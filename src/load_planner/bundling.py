"""Merge several items into one synthetic package."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from pydantic import BaseModel

from load_planner.config import PlannerSettings
from load_planner.geometry import volume
from load_planner.ids import IdSource, SequentialIds
from load_planner.models import BoxType, CatalogBox, Dimensions, Item
from load_planner.recommender import Recommendation, recommend_box

logger = logging.getLogger(__name__)


class BundleResult(BaseModel):
    item: Item
    recommendation: Optional[Recommendation] = None


def bundle_side(total_volume_cm3: float, air_gap: float) -> int:
    """Edge of the cube envelope, rounded half up to whole centimeters."""
    side = math.floor((total_volume_cm3 * air_gap) ** (1.0 / 3.0) + 0.5)
    return max(side, 1)


def bundle_items(
    items: Iterable[Item],
    boxes: Iterable[BoxType],
    settings: PlannerSettings | None = None,
    ids: IdSource | None = None,
) -> BundleResult:
    """
    Build one cube-shaped item holding every unit of `items`.

    All items must belong to the same client; the bundle takes the first
    item's client id without checking the others.
    """
    items = list(items)
    if len(items) < 2:
        raise ValueError(f"Bundling needs at least 2 items, got {len(items)}")

    settings = settings or PlannerSettings()
    ids = ids or SequentialIds()

    total_weight = sum(float(i.weight_kg) * i.quantity for i in items)
    total_volume = sum(volume(i.dimensions) * i.quantity for i in items)
    side = bundle_side(total_volume, settings.bundle_air_gap)

    bundle = Item(
        id=ids.next_id("bundle"),
        name=f"Bundle: {len(items)} Items",
        weight_kg=total_weight,
        dimensions=Dimensions(length=side, width=side, height=side),
        shape="box",
        is_fragile=any(i.is_fragile for i in items),
        is_stackable=all(i.is_stackable for i in items),
        quantity=1,
        pack_together=False,
        client_id=items[0].client_id,
    )

    recommendation = recommend_box(bundle, boxes, settings)
    if recommendation is not None:
        bundle.box = CatalogBox(box_id=recommendation.box.id)

    logger.info(
        f"bundled items={[i.id for i in items]} into {bundle.id} side={side}cm "
        f"weight={total_weight:.2f}kg box={bundle.box_id}"
    )
    return BundleResult(item=bundle, recommendation=recommendation)


def apply_bundle(
    working_set: list[Item],
    selected_ids: Iterable[str],
    boxes: Iterable[BoxType],
    settings: PlannerSettings | None = None,
    ids: IdSource | None = None,
) -> tuple[list[Item], BundleResult]:
    """Replace the selected items in `working_set` with their bundle (appended last)."""
    selected = set(selected_ids)
    chosen = [i for i in working_set if i.id in selected]
    result = bundle_items(chosen, boxes, settings, ids)
    remaining = [i for i in working_set if i.id not in selected]
    return remaining + [result.item], result
