"""FastAPI endpoints for the load planner."""

from __future__ import annotations

import logging
import os
import random
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from load_planner.bundling import bundle_items
from load_planner.capacity import DEFAULT_MARKET_RATE_PER_M3, space_offer
from load_planner.config import PlannerSettings
from load_planner.coordinator import (
    confirmable_item_ids,
    container_stats,
    plan_shipment,
    remove_shipped,
)
from load_planner.estimation import ItemEstimator
from load_planner.ids import RandomIds, new_client_id
from load_planner.io.schemas import (
    EstimateImageSchema,
    EstimateTextSchema,
    IntakeRequestSchema,
    ItemRequestSchema,
    ItemsRequestSchema,
    PackRequestSchema,
    PlanRequestSchema,
)
from load_planner.models import Container, PackedPackage
from load_planner.packing.shelf import pack_container
from load_planner.pricing import PricingCalculator
from load_planner.recommender import box_options, custom_option_price, recommend_box

logger = logging.getLogger(__name__)

settings = PlannerSettings.from_env()

app = FastAPI(
    title="Load Planner API",
    description="Box recommendation, pricing and container loading",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o for o in os.getenv("LOAD_PLANNER_CORS_ORIGINS", "").split(",") if o],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)


def build_placements_render(packed: list[PackedPackage]) -> list[dict[str, Any]]:
    """
    Lightweight placement data for a renderer (JSON primitives only).

    x, y, z is the envelope center; dims is [length, width, height].
    """
    return [
        {
            "x": float(p.position.x),
            "y": float(p.position.y),
            "z": float(p.position.z),
            "dims": [float(p.dimensions.length), float(p.dimensions.width), float(p.dimensions.height)],
            "color": p.color,
        }
        for p in packed
    ]


def build_container_render(container: Container) -> dict[str, float]:
    return {
        "L": float(container.dimensions.length),
        "W": float(container.dimensions.width),
        "H": float(container.dimensions.height),
    }


@app.post("/recommend")
async def recommend(request: ItemRequestSchema) -> dict[str, Any]:
    """Smallest fitting catalog box for one item, or null when a custom box is needed."""
    recommendation = recommend_box(request.item, request.boxes, settings)
    return {
        "recommendation": recommendation.model_dump() if recommendation else None,
        "custom_price": custom_option_price(request.item, settings),
    }


@app.post("/box-options")
async def options(request: ItemRequestSchema) -> dict[str, Any]:
    return {"options": [o.model_dump() for o in box_options(request.item, request.boxes, settings)]}


@app.post("/intake")
async def intake(request: IntakeRequestSchema) -> dict[str, Any]:
    """Tag one client's items with its client id and hand out the next client tag."""
    rng = random.Random()
    client_id = request.client_id or new_client_id(rng)
    items = [item.model_copy(update={"client_id": client_id}) for item in request.items]
    logger.info(f"intake client={client_id} items={len(items)}")
    return {
        "client_id": client_id,
        "items": [item.model_dump() for item in items],
        "next_client_id": new_client_id(rng),
    }


@app.post("/bundle")
async def bundle(request: ItemsRequestSchema) -> dict[str, Any]:
    try:
        result = bundle_items(request.items, request.boxes, settings, RandomIds())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.model_dump()


@app.post("/quote")
async def quote(request: ItemsRequestSchema) -> dict[str, Any]:
    return PricingCalculator(settings, request.boxes).quote_client(request.items).model_dump()


@app.post("/pack")
async def pack(
    request: PackRequestSchema,
    render: int = Query(0, description="Include rendering data (1) or not (0)"),
) -> dict[str, Any]:
    """Pack already-resolved packages into one container."""
    try:
        result = pack_container(request.packages, request.container, settings=settings)
    except Exception as e:
        logger.error(f"ERROR in /pack endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    response: dict[str, Any] = {"result": result.model_dump()}
    if render == 1:
        response["placements_render"] = build_placements_render(result.packed)
        response["container_render"] = build_container_render(request.container)
    return response


@app.post("/plan")
async def plan(request: PlanRequestSchema) -> dict[str, Any]:
    """Assign clients to active containers and load each one."""
    try:
        fleet_plan = plan_shipment(
            request.items,
            request.boxes,
            request.containers,
            request.assignments,
            settings,
        )
    except Exception as e:
        logger.error(f"ERROR in /plan endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "plan": fleet_plan.model_dump(),
        "container_stats": container_stats(fleet_plan),
    }


@app.post("/confirm")
async def confirm(request: PlanRequestSchema) -> dict[str, Any]:
    """Ids shipped with one container and the working set that remains."""
    if not request.container_id:
        raise HTTPException(status_code=422, detail="container_id is required")

    fleet_plan = plan_shipment(request.items, request.boxes, request.containers, request.assignments, settings)
    try:
        shipped = confirmable_item_ids(fleet_plan, request.container_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))

    remaining = remove_shipped(request.items, shipped)
    logger.info(f"confirm container={request.container_id} shipped={len(shipped)} remaining={len(remaining)}")
    return {
        "shipped_item_ids": shipped,
        "remaining": [item.model_dump() for item in remaining],
    }


@app.post("/space-offer")
async def offer(request: PackRequestSchema) -> dict[str, Any]:
    result = pack_container(request.packages, request.container, settings=settings)
    rate = request.market_rate if request.market_rate is not None else DEFAULT_MARKET_RATE_PER_M3
    return space_offer(result, request.container.name, rate).model_dump()


@app.post("/estimate/text")
async def estimate_text(request: EstimateTextSchema) -> dict[str, Any]:
    return ItemEstimator().estimate_text(request.text).model_dump()


@app.post("/estimate/image")
async def estimate_image(request: EstimateImageSchema) -> dict[str, Any]:
    return ItemEstimator().estimate_image(request.image_b64, request.mime_type).model_dump()


@app.get("/health")
async def health() -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "ok": True,
        "has_openai_key": bool(os.getenv("OPENAI_API_KEY")),
    }
