from __future__ import annotations

import pytest

from conftest import dims, make_item
from load_planner.config import PlannerSettings
from load_planner.models import CatalogBox, CustomBox
from load_planner.pricing import PricingCalculator

SMALL_PRICE = 5.0  # reference box 30x30x30
MEDIUM_PRICE = 80000 * 5.0 / 27000


def test_reference_box_price(catalog) -> None:
    calc = PricingCalculator(boxes=catalog)
    item = make_item("i", weight_kg=0, box=CatalogBox(box_id="small"))

    assert calc.settings.price_per_cm3 == pytest.approx(5.0 / 27000)
    assert calc.packaging_charge(item) == pytest.approx(SMALL_PRICE)


def test_custom_box_surcharge(catalog) -> None:
    """32x32x32 custom box: 32768 x 5/27000 x 1.20 = 7.28."""
    item = make_item("i", weight_kg=0, box=CustomBox(dimensions=dims(32, 32, 32)))

    quote = PricingCalculator(boxes=catalog).quote_item(item)

    assert quote.box_id == "custom"
    assert quote.packaging == pytest.approx(7.28, abs=0.005)
    assert quote.total == pytest.approx(quote.packaging)


def test_unit_packages_priced_per_unit(catalog) -> None:
    calc = PricingCalculator(boxes=catalog)
    single = make_item("one", weight_kg=2, box=CatalogBox(box_id="small"))
    triple = make_item("three", weight_kg=2, quantity=3, box=CatalogBox(box_id="small"))

    assert calc.packaging_charge(triple) == pytest.approx(3 * calc.packaging_charge(single))
    assert calc.quote_item(triple).package_count == 3


def test_pack_together_uses_one_envelope(catalog) -> None:
    """Packaging once, shipping still per physical unit."""
    item = make_item("i", weight_kg=2, quantity=3, pack_together=True, box=CatalogBox(box_id="medium"))

    quote = PricingCalculator(boxes=catalog).quote_item(item)

    assert quote.package_count == 1
    assert quote.packaging == pytest.approx(MEDIUM_PRICE)
    assert quote.shipping == pytest.approx(3 * 2 * 2.0)
    assert quote.total == pytest.approx(MEDIUM_PRICE + 12.0)


def test_no_box_is_not_priced(catalog) -> None:
    calc = PricingCalculator(boxes=catalog)

    assert calc.quote_item(make_item("bare")) is None
    assert calc.quote_item(make_item("ghost", box=CatalogBox(box_id="missing"))) is None
    assert calc.packaging_charge(make_item("bare")) is None


def test_client_quote_aggregates(catalog) -> None:
    calc = PricingCalculator(boxes=catalog)
    items = [
        make_item("a", weight_kg=1, quantity=2, box=CatalogBox(box_id="small"), client_id="#1"),
        make_item("b", weight_kg=4, quantity=5, pack_together=True, box=CatalogBox(box_id="medium"), client_id="#1"),
        make_item("c", weight_kg=1, client_id="#1"),
    ]

    quote = calc.quote_client(items)

    assert [q.item_id for q in quote.items] == ["a", "b"]
    assert quote.client_ids == ["#1"]
    assert quote.package_count == 3
    assert quote.total_volume_liters == pytest.approx((2 * 27000 + 80000) / 1000)
    assert quote.total == pytest.approx(2 * SMALL_PRICE + 2 * 2.0 + MEDIUM_PRICE + 20 * 2.0)


def test_settings_change_rates(catalog) -> None:
    settings = PlannerSettings(reference_price=10.0, rate_per_kg=1.0, custom_surcharge=1.5)
    calc = PricingCalculator(settings, catalog)
    item = make_item("i", weight_kg=3, box=CustomBox(dimensions=dims(30, 30, 30)))

    assert calc.quote_item(item).total == pytest.approx(10.0 * 1.5 + 3.0)
