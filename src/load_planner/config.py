"""Planner policy settings; loads .env locally via python-dotenv."""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from load_planner.models import Dimensions

ENV_PREFIX = "LOAD_PLANNER_"


class PlannerSettings(BaseModel):
    """Pricing and packing policy parameters."""

    reference_box: Dimensions = Field(
        default_factory=lambda: Dimensions(length=30, width=30, height=30),
        description="Box whose packaging price calibrates the per-volume rate",
    )
    reference_price: float = Field(default=5.00, gt=0, description="Packaging price of the reference box")
    rate_per_kg: float = Field(default=2.00, ge=0, description="Shipping charge per kg")
    custom_surcharge: float = Field(default=1.20, ge=1, description="Multiplier for custom packaging")
    bundle_air_gap: float = Field(default=1.3, ge=1, description="Volume allowance when bundling items")
    enforce_container_payload: bool = Field(
        default=False,
        description="Reject packages that would exceed the container max_weight_kg (advisory when off)",
    )

    @property
    def price_per_cm3(self) -> float:
        return self.reference_price / self.reference_box.volume

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> "PlannerSettings":
        """
        Build settings from LOAD_PLANNER_* variables.

        Does not override variables already set in the process environment.
        """
        if env is None:
            load_dotenv()
            env = dict(os.environ)

        overrides: dict[str, Any] = {}
        for name in ("reference_price", "rate_per_kg", "custom_surcharge", "bundle_air_gap"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip():
                overrides[name] = float(raw)

        raw_enforce = env.get(ENV_PREFIX + "ENFORCE_CONTAINER_PAYLOAD")
        if raw_enforce is not None and raw_enforce.strip():
            overrides["enforce_container_payload"] = raw_enforce.strip().lower() in ("1", "true", "yes", "on")

        return cls(**overrides)
