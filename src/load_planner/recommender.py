"""Box selection for a single item."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pydantic import BaseModel

from load_planner.config import PlannerSettings
from load_planner.geometry import fits_axis_aligned, volume
from load_planner.models import CUSTOM_BOX_PADDING_CM, BoxType, CustomBox, Item
from load_planner.pricing import PricingCalculator

logger = logging.getLogger(__name__)

ECO_PICK_EFFICIENCY = 85


class Recommendation(BaseModel):
    box: BoxType
    efficiency: float
    price: float


class BoxOption(BaseModel):
    """One catalog box evaluated for an item, as shown in a packaging picker."""

    box: BoxType
    fits: bool
    efficiency: int
    price: float
    eco_pick: bool


def recommend_box(
    item: Item,
    boxes: Iterable[BoxType],
    settings: PlannerSettings | None = None,
) -> Optional[Recommendation]:
    """
    Smallest catalog box that holds one unit of `item`.

    A box qualifies when the unit fits without rotation and the box's
    max_weight_kg covers the unit weight. Ties in volume go to the box that
    comes first in the catalog. Returns None when nothing qualifies; the
    caller should fall back to a custom box.
    """
    boxes = list(boxes)
    candidates = [
        box for box in boxes
        if fits_axis_aligned(item.dimensions, box.dimensions) and box.max_weight_kg >= item.weight_kg
    ]
    if not candidates:
        logger.info(f"item={item.id} no catalog box fits, custom packaging required")
        return None

    # min() keeps the first of equal keys, so catalog order breaks ties
    best = min(candidates, key=lambda b: volume(b.dimensions))
    efficiency = volume(item.dimensions) / volume(best.dimensions) * 100

    pricing = PricingCalculator(settings, boxes)
    price = pricing.volume_charge(volume(best.dimensions)) + float(item.weight_kg) * pricing.settings.rate_per_kg

    return Recommendation(box=best, efficiency=efficiency, price=price)


def box_options(
    item: Item,
    boxes: Iterable[BoxType],
    settings: PlannerSettings | None = None,
) -> list[BoxOption]:
    """
    Evaluate every catalog box for `item`, priced for its full quantity.

    For pack_together items the geometric check is relaxed to a volume
    check: all units together must not exceed the box volume.
    """
    boxes = list(boxes)
    pricing = PricingCalculator(settings, boxes)
    unit_volume = volume(item.dimensions)
    contents_volume = unit_volume * (item.quantity if item.pack_together else 1)
    contents_weight = item.total_weight_kg if item.pack_together else float(item.weight_kg)

    options: list[BoxOption] = []
    for box in boxes:
        box_volume = volume(box.dimensions)
        if item.pack_together:
            fits = contents_volume <= box_volume
        else:
            fits = fits_axis_aligned(item.dimensions, box.dimensions)
        fits = fits and box.max_weight_kg >= contents_weight

        efficiency = round(contents_volume / box_volume * 100) if fits else 0
        options.append(
            BoxOption(
                box=box,
                fits=fits,
                efficiency=efficiency,
                price=pricing.price_for_box(item, box),
                eco_pick=fits and efficiency > ECO_PICK_EFFICIENCY,
            )
        )
    return options


def custom_option_price(item: Item, settings: PlannerSettings | None = None) -> float:
    """Price of packing `item` in a custom box (its current one, or a padded default)."""
    if isinstance(item.box, CustomBox):
        dims = item.box.dimensions
    else:
        dims = item.dimensions.padded(CUSTOM_BOX_PADDING_CM)
    return PricingCalculator(settings, []).price_for_custom(item, dims)
