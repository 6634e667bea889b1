from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from load_planner.config import PlannerSettings
from load_planner.coordinator import container_stats, plan_shipment
from load_planner.io.schemas import PlanRequestSchema
from load_planner.pricing import PricingCalculator
from load_planner.recommender import recommend_box

logger = logging.getLogger(__name__)


def load_input(path: Path) -> PlanRequestSchema:
    """
    Read a shipment JSON file.

    Expected keys: items (required), boxes, containers, assignments (optional;
    the default catalog and fleet are used when omitted).
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if "items" not in data:
        raise ValueError("Input must include 'items'")
    return PlanRequestSchema.model_validate(data)


def run_plan(request: PlanRequestSchema, settings: PlannerSettings) -> dict[str, Any]:
    fleet_plan = plan_shipment(request.items, request.boxes, request.containers, request.assignments, settings)
    for load in fleet_plan.loads:
        print(
            f"📦 {load.container_id}: packed={len(load.result.packed)} "
            f"unpacked={len(load.result.unpacked)} "
            f"utilization={load.result.metrics.volume_utilization_pct:.2f}% "
            f"free={load.result.metrics.free_volume_m3:.2f} m3"
        )
    return {"plan": fleet_plan.model_dump(), "container_stats": container_stats(fleet_plan)}


def run_quote(request: PlanRequestSchema, settings: PlannerSettings) -> dict[str, Any]:
    client_quote = PricingCalculator(settings, request.boxes).quote_client(request.items)
    print(f"💰 Total: ${client_quote.total:.2f} for {client_quote.package_count} packages")
    return client_quote.model_dump()


def run_recommend(request: PlanRequestSchema, settings: PlannerSettings) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for item in request.items:
        rec = recommend_box(item, request.boxes, settings)
        out[item.id] = rec.model_dump() if rec else None
        print(f"{item.id}: {rec.box.name if rec else 'custom packaging required'}")
    return {"recommendations": out}


MODES = {
    "plan": run_plan,
    "quote": run_quote,
    "recommend": run_recommend,
}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Load Planner CLI")
    parser.add_argument("--input", required=True, help="Input shipment JSON file")
    parser.add_argument("--output", required=True, help="Output JSON file")
    parser.add_argument(
        "--mode",
        choices=sorted(MODES),
        default="plan",
        help="plan = load active containers, quote = price items, recommend = pick a box per item",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    request = load_input(Path(args.input))
    settings = PlannerSettings.from_env()
    output = MODES[args.mode](request, settings)

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(output, indent=2, sort_keys=True), encoding="utf-8")
    print(f"✅ Wrote {out_path}")


if __name__ == "__main__":
    main()
