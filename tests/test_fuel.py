from __future__ import annotations

import pytest

from fleet_analyze.fuel import FuelModel, efficiency_factor, estimate_fuel


@pytest.mark.parametrize(
    ("distance", "speed"),
    [(0, 50), (100, 0), (-10, 50), (100, -5), (None, 50), (100, None), (float("nan"), 50), (100, float("nan")), (float("inf"), 50)],
)
def test_invalid_inputs_give_zero(distance, speed) -> None:
    assert estimate_fuel(distance, speed) == 0


def test_optimal_speed_is_cheapest() -> None:
    optimal = estimate_fuel(100, 60)
    assert optimal == pytest.approx(7.2)
    assert estimate_fuel(100, 30) > optimal
    assert estimate_fuel(100, 120) > optimal


def test_known_values() -> None:
    assert estimate_fuel(100, 30) == pytest.approx(10.4)
    assert estimate_fuel(100, 120) == pytest.approx(11.2)
    assert estimate_fuel(100, 80) == pytest.approx(8.0)
    assert estimate_fuel(12.345, 60) == pytest.approx(0.89)


@pytest.mark.parametrize(
    ("speed", "factor"),
    [
        (39.9, 1.3),
        (40, 1.0),
        (45, 1.0),
        (50, 0.9),
        (70, 0.9),
        (70.1, 1.0),
        (100, 1.0),
        (110, 1.3),
    ],
)
def test_band_boundaries(speed, factor) -> None:
    assert efficiency_factor(speed) == pytest.approx(factor)


def test_custom_model() -> None:
    truck = FuelModel(base_l_per_100km=30.0)
    assert estimate_fuel(100, 60, truck) == pytest.approx(27.0)
