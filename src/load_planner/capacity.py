"""Spare capacity analysis: turn free container volume into a space-sharing offer."""

from __future__ import annotations

import math

from pydantic import BaseModel

from load_planner.models import PackingResult

# Reference sizes for estimating what else fits in the free volume (m3)
MEDIUM_BOX_M3 = 0.08
STACKED_PALLET_M3 = 1.2
DEFAULT_MARKET_RATE_PER_M3 = 50.0


class SpaceOffer(BaseModel):
    container_id: str
    free_volume_m3: float
    percent_free: float
    approx_medium_boxes: int
    approx_pallets: int
    market_rate_per_m3: float
    potential_revenue: float
    message: str


def space_offer(
    result: PackingResult,
    container_name: str,
    market_rate_per_m3: float = DEFAULT_MARKET_RATE_PER_M3,
) -> SpaceOffer:
    """
    Estimate how much third-party cargo the unused volume could take.

    The counts are theoretical volume bounds (floor(free / unit volume)),
    not packed placements.
    """
    free_m3 = max(0.0, result.metrics.free_volume_m3)
    percent_free = max(0.0, 100.0 - result.metrics.volume_utilization_pct)
    boxes = math.floor(free_m3 / MEDIUM_BOX_M3)
    pallets = math.floor(free_m3 / STACKED_PALLET_M3)
    revenue = free_m3 * market_rate_per_m3

    message = (
        f"Space Available Alert: We have approx {free_m3:.2f} m³ free in our {container_name}. "
        f"Capacity for ~{boxes} med boxes or ~{pallets} pallets. "
        f"Rate: ${market_rate_per_m3:g}/m³ (neg). Route departing soon."
    )

    return SpaceOffer(
        container_id=result.container_id,
        free_volume_m3=free_m3,
        percent_free=percent_free,
        approx_medium_boxes=boxes,
        approx_pallets=pallets,
        market_rate_per_m3=market_rate_per_m3,
        potential_revenue=revenue,
        message=message,
    )
