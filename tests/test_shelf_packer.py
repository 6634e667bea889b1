from __future__ import annotations

import pytest

from conftest import dims
from load_planner.config import PlannerSettings
from load_planner.geometry import boxes_overlap, envelope_bounds, within_container
from load_planner.models import Container, Package
from load_planner.packing.constraints import PayloadConstraint
from load_planner.packing.shelf import pack_container, shelf_order


def pkg(package_id: str, length: float, width: float, height: float, weight: float = 1.0) -> Package:
    return Package(
        package_id=package_id,
        item_id=package_id.split("-")[0],
        box_id="custom",
        dimensions=dims(length, width, height),
        weight_kg=weight,
    )


def assert_within_container(container, packed):
    for p in packed:
        assert within_container(p, container), p


def assert_no_overlaps(packed):
    bounds = [envelope_bounds(p) for p in packed]
    for i in range(len(bounds)):
        for j in range(i + 1, len(bounds)):
            assert not boxes_overlap(bounds[i], bounds[j])


def mixed_packages() -> list[Package]:
    return [
        pkg("a-0", 60, 40, 40),
        pkg("b-0", 30, 30, 30),
        pkg("b-1", 30, 30, 30),
        pkg("c-0", 100, 30, 30),
        pkg("d-0", 50, 40, 40),
        pkg("e-0", 120, 70, 90),
        pkg("f-0", 80, 60, 20),
        pkg("g-0", 200, 100, 60),
        pkg("h-0", 45, 45, 45),
    ]


def test_three_cubes_overflow_the_van(van) -> None:
    """Two 100 cm cubes fill the floor row; the third wraps to y=100 and has only 40 cm left."""
    packages = [pkg(f"cube-{i}", 100, 100, 100) for i in range(3)]

    result = pack_container(packages, van)

    assert [p.package_id for p in result.packed] == ["cube-0", "cube-1"]
    assert [p.package_id for p in result.unpacked] == ["cube-2"]
    assert [(p.position.x, p.position.y, p.position.z) for p in result.packed] == [
        (50.0, 50.0, 50.0),
        (150.0, 50.0, 50.0),
    ]
    assert result.container_id == "van"
    assert result.metrics.package_count == 2
    assert result.metrics.volume_utilization_pct == pytest.approx(2_000_000 / 4_704_000 * 100)
    assert result.metrics.free_volume_m3 == pytest.approx(2.704)
    assert result.metrics.total_weight_kg == pytest.approx(2.0)


def test_rows_then_layers() -> None:
    """Fill x, wrap along z, then start a new layer on y."""
    container = Container(id="c", name="c", dimensions=dims(100, 100, 100), max_weight_kg=100)
    packages = [pkg(f"p-{i}", 60, 50, 40) for i in range(3)]

    result = pack_container(packages, container)

    positions = [(p.position.x, p.position.y, p.position.z) for p in result.packed]
    assert positions == [(30.0, 20.0, 25.0), (30.0, 20.0, 75.0), (30.0, 60.0, 25.0)]
    assert result.unpacked == []


def test_sort_tallest_then_widest_base() -> None:
    packages = [
        pkg("low-0", 10, 10, 5),
        pkg("tall-0", 10, 10, 50),
        pkg("flat-0", 10, 10, 20),
        pkg("wide-0", 40, 40, 20),
    ]

    assert [p.package_id for p in shelf_order(packages)] == ["tall-0", "wide-0", "flat-0", "low-0"]


def test_fit_soundness_and_conservation(truck) -> None:
    packages = mixed_packages()
    result = pack_container(packages, truck)

    assert len(result.packed) + len(result.unpacked) == len(packages)
    assert_within_container(truck, result.packed)
    assert_no_overlaps(result.packed)


def test_conservation_with_overflow(van) -> None:
    packages = mixed_packages() + [pkg(f"x-{i}", 80, 70, 70) for i in range(6)]
    result = pack_container(packages, van)

    assert len(result.unpacked) > 0
    assert len(result.packed) + len(result.unpacked) == len(packages)
    assert_within_container(van, result.packed)
    assert_no_overlaps(result.packed)


def test_idempotent(van) -> None:
    packages = mixed_packages()

    first = pack_container(packages, van)
    second = pack_container(packages, van)

    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_scaling_container_up_keeps_fits(van) -> None:
    packages = [pkg(f"cube-{i}", 100, 100, 100) for i in range(3)]
    bigger = van.model_copy(update={"dimensions": dims(480, 280, 280)})

    small_run = pack_container(packages, van)
    big_run = pack_container(packages, bigger)

    small_unpacked = {p.package_id for p in small_run.unpacked}
    big_unpacked = {p.package_id for p in big_run.unpacked}
    assert big_unpacked <= small_unpacked
    assert big_unpacked == set()


def test_payload_limit_blocks_second_package(van) -> None:
    packages = [pkg("a-0", 10, 10, 10, weight=600), pkg("b-0", 10, 10, 10, weight=600)]

    result = pack_container(packages, van, settings=PlannerSettings(enforce_container_payload=True))

    assert [p.package_id for p in result.packed] == ["a-0"]
    assert [p.package_id for p in result.unpacked] == ["b-0"]


def test_weight_is_advisory_by_default(van) -> None:
    packages = [pkg("a-0", 10, 10, 10, weight=600), pkg("b-0", 10, 10, 10, weight=600)]

    result = pack_container(packages, van)

    assert len(result.packed) == 2
    assert result.unpacked == []


def _heavy_then_light(side: float) -> tuple[Container, list[Package]]:
    container = Container(id="box", name="Box", dimensions=dims(side, side, side), max_weight_kg=800)
    packages = [pkg("heavy-0", 200, 100, 100, weight=700), pkg("light-0", 10, 10, 10, weight=200)]
    return container, packages


def test_scaling_container_up_keeps_fits_with_advisory_weight() -> None:
    small, packages = _heavy_then_light(150)
    big, _ = _heavy_then_light(300)

    small_unpacked = {p.package_id for p in pack_container(packages, small).unpacked}
    big_unpacked = {p.package_id for p in pack_container(packages, big).unpacked}

    assert small_unpacked == {"heavy-0"}
    assert big_unpacked <= small_unpacked


def test_enforced_payload_can_displace_a_lighter_package_in_a_bigger_container() -> None:
    enforced = PlannerSettings(enforce_container_payload=True)
    small, packages = _heavy_then_light(150)
    big, _ = _heavy_then_light(300)

    small_unpacked = {p.package_id for p in pack_container(packages, small, settings=enforced).unpacked}
    big_unpacked = {p.package_id for p in pack_container(packages, big, settings=enforced).unpacked}

    assert small_unpacked == {"heavy-0"}
    assert big_unpacked == {"light-0"}


def test_payload_rejection_does_not_move_cursor(van) -> None:
    packages = [
        pkg("a-0", 100, 100, 100, weight=700),
        pkg("b-0", 100, 100, 100, weight=200),
        pkg("c-0", 100, 100, 100, weight=50),
    ]

    result = pack_container(packages, van, [PayloadConstraint(van.max_weight_kg)])

    assert [p.package_id for p in result.packed] == ["a-0", "c-0"]
    assert result.packed[1].position.x == 150.0


def test_payload_advisory_without_constraints(van) -> None:
    packages = [pkg("a-0", 10, 10, 10, weight=600), pkg("b-0", 10, 10, 10, weight=600)]

    result = pack_container(packages, van, constraints=[])

    assert len(result.packed) == 2
    assert result.metrics.total_weight_kg > van.max_weight_kg


def test_empty_input(van) -> None:
    result = pack_container([], van)

    assert result.packed == []
    assert result.unpacked == []
    assert result.metrics.volume_utilization_pct == 0.0
    assert result.metrics.free_volume_m3 == pytest.approx(4.704)


def test_package_longer_than_container_is_unpacked(van) -> None:
    packages = [pkg("long-0", 300, 20, 20), pkg("wide-0", 20, 150, 20), pkg("ok-0", 20, 20, 20)]

    result = pack_container(packages, van)

    assert [p.package_id for p in result.packed] == ["ok-0"]
    assert {p.package_id for p in result.unpacked} == {"long-0", "wide-0"}
    assert result.packed[0].position.x == 10.0
