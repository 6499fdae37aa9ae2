"""Speed-banded fuel consumption estimate.

Consumption is a reference rate (L/100km at the reference speed) scaled by a
factor for the speed band the trip's average speed falls into:

    avg speed (km/h)     factor
    < 40                 1.3          city driving
    50 .. 70 inclusive   0.9          optimal band
    > 100                1.2 + (v - 100) * 0.01
    otherwise            1.0          40..50 and 70..100
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from fleet_analyze.formatting import round_half_up


@dataclass(frozen=True, slots=True)
class FuelModel:
    """Constants of the fuel estimate.

    ``reference_speed_kph`` is not used in the arithmetic; it records the
    speed at which ``base_l_per_100km`` was measured.
    """

    base_l_per_100km: float = 8.0
    reference_speed_kph: float = 60.0
    city_below_kph: float = 40.0
    city_factor: float = 1.3
    optimal_min_kph: float = 50.0
    optimal_max_kph: float = 70.0
    optimal_factor: float = 0.9
    highway_above_kph: float = 100.0
    highway_factor: float = 1.2
    highway_factor_per_kph: float = 0.01


DEFAULT_FUEL_MODEL = FuelModel()


def efficiency_factor(avg_speed_kph: float, model: FuelModel = DEFAULT_FUEL_MODEL) -> float:
    """Consumption multiplier for an average speed."""

    if avg_speed_kph < model.city_below_kph:
        return model.city_factor
    if avg_speed_kph > model.highway_above_kph:
        return model.highway_factor + (avg_speed_kph - model.highway_above_kph) * model.highway_factor_per_kph
    if model.optimal_min_kph <= avg_speed_kph <= model.optimal_max_kph:
        return model.optimal_factor
    return 1.0


def estimate_fuel(
    distance_km: float | None,
    avg_speed_kph: float | None,
    model: FuelModel = DEFAULT_FUEL_MODEL,
) -> float:
    """Estimate liters burned over a distance at an average speed.

    Args:
        distance_km: Distance driven.
        avg_speed_kph: Average moving speed.
        model: Consumption constants.

    Returns:
        Liters rounded to 2 decimals; 0.0 if either input is missing or <= 0.
    """

    if not distance_km or not math.isfinite(distance_km) or distance_km <= 0:
        return 0.0
    if not avg_speed_kph or not math.isfinite(avg_speed_kph) or avg_speed_kph <= 0:
        return 0.0

    l_per_100km = model.base_l_per_100km * efficiency_factor(avg_speed_kph, model)
    return round_half_up((distance_km / 100.0) * l_per_100km, 2)
