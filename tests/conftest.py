from __future__ import annotations

import pytest

from load_planner.models import BoxType, Container, Dimensions, Item


def dims(length: float, width: float, height: float) -> Dimensions:
    return Dimensions(length=length, width=width, height=height)


@pytest.fixture
def catalog() -> list[BoxType]:
    return [
        BoxType(id="small", name="Small", dimensions=dims(30, 30, 30), max_weight_kg=10),
        BoxType(id="medium", name="Medium", dimensions=dims(50, 40, 40), max_weight_kg=20),
        BoxType(id="large", name="Large", dimensions=dims(60, 60, 60), max_weight_kg=30),
    ]


@pytest.fixture
def van() -> Container:
    return Container(id="van", name="Van", dimensions=dims(240, 140, 140), max_weight_kg=800, is_active=True)


@pytest.fixture
def truck() -> Container:
    return Container(id="truck", name="Truck", dimensions=dims(590, 235, 239), max_weight_kg=20000, is_active=True)


def make_item(item_id: str, **overrides) -> Item:
    data = {
        "id": item_id,
        "name": item_id,
        "weight_kg": 1.0,
        "dimensions": {"length": 20, "width": 20, "height": 20},
    }
    data.update(overrides)
    return Item.model_validate(data)
