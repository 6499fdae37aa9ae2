"""Fleet-wide statistics over a set of trips."""

from __future__ import annotations

from typing import Sequence

from fleet_analyze.formatting import round_half_up
from fleet_analyze.fuel import DEFAULT_FUEL_MODEL, FuelModel, estimate_fuel
from fleet_analyze.models import FleetTripStatistics, Trip

EMPTY_STATISTICS = FleetTripStatistics(
    total_trips=0,
    total_distance_km=0.0,
    total_duration_seconds=0,
    avg_distance_km=0.0,
    avg_duration_seconds=0,
    avg_speed_kph=0.0,
    max_speed_kph=0.0,
    total_fuel_liters=0.0,
)


def aggregate_trips(
    trips: Sequence[Trip] | None,
    fuel_model: FuelModel = DEFAULT_FUEL_MODEL,
) -> FleetTripStatistics:
    """Reduce trips to fleet statistics.

    Fuel is re-estimated from each trip's distance and average speed rather
    than read from ``Trip.fuel_liters``, so a different ``fuel_model`` can be
    applied to already detected trips.

    Args:
        trips: Trips from any number of devices.
        fuel_model: Fuel constants.

    Returns:
        FleetTripStatistics; all zeros for no trips.
    """

    if not trips:
        return EMPTY_STATISTICS

    n = len(trips)
    total_km = sum(t.distance_km for t in trips)
    total_s = sum(t.duration_seconds for t in trips)
    speeds = [t.avg_speed_kph for t in trips if t.avg_speed_kph > 0]
    avg_kph = sum(speeds) / len(speeds) if speeds else 0.0
    total_fuel = sum(estimate_fuel(t.distance_km, t.avg_speed_kph, fuel_model) for t in trips)

    return FleetTripStatistics(
        total_trips=n,
        total_distance_km=round_half_up(total_km, 2),
        total_duration_seconds=int(round_half_up(total_s)),
        avg_distance_km=round_half_up(total_km / n, 2),
        avg_duration_seconds=int(round_half_up(total_s / n)),
        avg_speed_kph=round_half_up(avg_kph, 2),
        max_speed_kph=round_half_up(max(t.max_speed_kph for t in trips), 2),
        total_fuel_liters=round_half_up(total_fuel, 2),
    )
