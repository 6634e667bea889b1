"""Placement constraints checked by the container packer."""

from __future__ import annotations

from load_planner.config import PlannerSettings
from load_planner.models import Container, Package


class Constraint:
    """Base class for placement preconditions."""

    name = "constraint"

    def allows(self, package: Package, placed_weight_kg: float) -> bool:
        """
        Check whether `package` may be added to what is already placed.

        Args:
            package: Package about to be placed
            placed_weight_kg: Total weight of the packages placed so far

        Returns:
            True if the placement is allowed, False otherwise
        """
        raise NotImplementedError


class PayloadConstraint(Constraint):
    """Total placed weight must not exceed the container payload."""

    name = "payload"

    def __init__(self, max_weight_kg: float):
        self.max_weight_kg = float(max_weight_kg)

    def allows(self, package: Package, placed_weight_kg: float) -> bool:
        return placed_weight_kg + float(package.weight_kg) <= self.max_weight_kg


def default_constraints(container: Container, settings: PlannerSettings | None = None) -> list[Constraint]:
    settings = settings or PlannerSettings()
    if settings.enforce_container_payload:
        return [PayloadConstraint(container.max_weight_kg)]
    return []
