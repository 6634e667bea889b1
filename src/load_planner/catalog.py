# src/load_planner/catalog.py
from __future__ import annotations

from typing import Any, Iterable, Optional

from load_planner.models import BoxType, Container, Dimensions

# Standard packaging boxes (cm / kg). Order matters: ties in volume go to the earlier entry.
DEFAULT_BOXES: list[BoxType] = [
    BoxType(id="b1", name="Small Cube", dimensions=Dimensions(length=30, width=30, height=30), max_weight_kg=10, color="#60a5fa"),
    BoxType(id="b2", name="Medium Standard", dimensions=Dimensions(length=50, width=40, height=40), max_weight_kg=20, color="#34d399"),
    BoxType(id="b3", name="Large Mover", dimensions=Dimensions(length=60, width=60, height=60), max_weight_kg=30, color="#f87171"),
    BoxType(id="b4", name="Long Box", dimensions=Dimensions(length=100, width=30, height=30), max_weight_kg=15, color="#a78bfa"),
]

DEFAULT_CONTAINERS: list[Container] = [
    Container(id="c1", name="Standard Van (Small)", dimensions=Dimensions(length=240, width=140, height=140), max_weight_kg=800, is_active=True),
    Container(id="c2", name="20ft Container", dimensions=Dimensions(length=590, width=235, height=239), max_weight_kg=20000, is_active=True),
]

CUSTOM_BOX_COLOR = "#a78bfa"


def find_box(boxes: Iterable[BoxType], box_id: str) -> Optional[BoxType]:
    for box in boxes:
        if box.id == box_id:
            return box
    return None


def active_containers(containers: Iterable[Container]) -> list[Container]:
    """Active containers in fleet order."""
    return [c for c in containers if c.is_active]


def check_unique_ids(entries: Iterable[Any]) -> None:
    seen: set[str] = set()
    for entry in entries:
        if entry.id in seen:
            raise ValueError(f"Duplicate catalog id '{entry.id}'")
        seen.add(entry.id)
