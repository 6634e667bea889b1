"""Packaging and shipping charges."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from load_planner.catalog import DEFAULT_BOXES
from load_planner.config import PlannerSettings
from load_planner.expansion import expand_item
from load_planner.models import CUSTOM_BOX_ID, BoxType, Dimensions, Item

logger = logging.getLogger(__name__)


class ItemQuote(BaseModel):
    item_id: str
    client_id: str
    box_id: str
    packaging: float = Field(description="Packaging charge")
    shipping: float = Field(description="Weight-based shipping charge")
    total: float
    package_count: int
    packaging_volume_cm3: float


class ClientQuote(BaseModel):
    client_ids: list[str] = Field(default_factory=list)
    items: list[ItemQuote] = Field(default_factory=list)
    total: float = 0.0
    total_volume_liters: float = 0.0
    package_count: int = 0


class PricingCalculator:
    """
    Two charge components, summed:

    - shipping: unit weight x quantity x rate_per_kg, charged per physical unit
    - packaging: box volume x effective quantity x price per cm3, charged per
      package, with the custom surcharge applied to custom boxes
    """

    def __init__(self, settings: PlannerSettings | None = None, boxes: Iterable[BoxType] | None = None) -> None:
        self.settings = settings or PlannerSettings()
        self.boxes = list(DEFAULT_BOXES if boxes is None else boxes)

    def shipping_charge(self, item: Item) -> float:
        return item.total_weight_kg * self.settings.rate_per_kg

    def volume_charge(self, volume_cm3: float, custom: bool = False) -> float:
        base = volume_cm3 * self.settings.price_per_cm3
        return base * self.settings.custom_surcharge if custom else base

    def price_for_box(self, item: Item, box: BoxType) -> float:
        """Total price of `item` if it were packed in catalog `box`."""
        packaging = self.volume_charge(box.dimensions.volume * item.effective_quantity)
        return packaging + self.shipping_charge(item)

    def price_for_custom(self, item: Item, dims: Dimensions) -> float:
        """Total price of `item` if it were packed in a custom box of `dims`."""
        packaging = self.volume_charge(dims.volume * item.effective_quantity, custom=True)
        return packaging + self.shipping_charge(item)

    def packaging_charge(self, item: Item) -> Optional[float]:
        quote = self.quote_item(item)
        return None if quote is None else quote.packaging

    def quote_item(self, item: Item) -> Optional[ItemQuote]:
        """
        Price one item as it is currently configured.

        Returns None when the item has no box, or its catalog box is unknown.
        """
        packages = expand_item(item, self.boxes)
        if packages is None:
            return None

        volume_cm3 = sum(p.dimensions.volume for p in packages)
        box_id = packages[0].box_id
        packaging = self.volume_charge(volume_cm3, custom=box_id == CUSTOM_BOX_ID)
        shipping = self.shipping_charge(item)

        return ItemQuote(
            item_id=item.id,
            client_id=item.client_id,
            box_id=box_id,
            packaging=packaging,
            shipping=shipping,
            total=packaging + shipping,
            package_count=len(packages),
            packaging_volume_cm3=volume_cm3,
        )

    def quote_client(self, items: Iterable[Item]) -> ClientQuote:
        """Aggregate charges over all priced items; unpriced items are skipped."""
        quotes: list[ItemQuote] = []
        client_ids: list[str] = []
        for item in items:
            quote = self.quote_item(item)
            if quote is None:
                logger.debug(f"item={item.id} has no packaging selected, not priced")
                continue
            quotes.append(quote)
            if item.client_id not in client_ids:
                client_ids.append(item.client_id)

        return ClientQuote(
            client_ids=client_ids,
            items=quotes,
            total=sum(q.total for q in quotes),
            total_volume_liters=sum(q.packaging_volume_cm3 for q in quotes) / 1000.0,
            package_count=sum(q.package_count for q in quotes),
        )
