"""Trip detection: segmentation plus per-trip metrics."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from fleet_analyze.fuel import DEFAULT_FUEL_MODEL, FuelModel, estimate_fuel
from fleet_analyze.geo import haversine_km, is_coordinate
from fleet_analyze.ingest import group_by_device, ingest
from fleet_analyze.models import Location, TelemetrySample, Trip
from fleet_analyze.segmenter import DEFAULT_PARAMS, TripParams, iter_candidates

logger = logging.getLogger(__name__)


def calculate_trip_distance(points: Sequence[TelemetrySample]) -> float:
    """Sum Haversine distance (km) over consecutive point pairs.

    A pair with a non-numeric coordinate contributes nothing; the next pair is
    still (i, i+1), so one bad point drops both of its adjacent legs.
    """

    if len(points) < 2:
        return 0.0

    total = 0.0
    for i in range(1, len(points)):
        prev = points[i - 1]
        cur = points[i]
        coords = (prev.latitude, prev.longitude, cur.latitude, cur.longitude)
        if not all(is_coordinate(c) for c in coords):
            continue
        total += haversine_km(prev.latitude, prev.longitude, cur.latitude, cur.longitude)
    return total


def calculate_trip_duration(start_ms: int, end_ms: int) -> int:
    """Whole seconds between two timestamps, floored, never negative."""

    return max(0, (end_ms - start_ms) // 1000)


def average_speed(points: Iterable[TelemetrySample]) -> float:
    """Mean of the strictly positive speeds; 0.0 if there are none."""

    speeds = [p.speed_kph for p in points if p.speed_kph > 0]
    if not speeds:
        return 0.0
    return sum(speeds) / len(speeds)


def max_speed(points: Iterable[TelemetrySample]) -> float:
    """Highest speed over all points, zero speeds included."""

    return max((p.speed_kph for p in points), default=0.0)


def finalize_trip(points: Sequence[TelemetrySample], fuel_model: FuelModel = DEFAULT_FUEL_MODEL) -> Trip:
    """Build a Trip from a closed candidate.

    Args:
        points: Candidate points in chronological order (non-empty).
        fuel_model: Constants for the per-trip fuel estimate.

    Returns:
        The finalized trip.
    """

    first = points[0]
    last = points[-1]
    distance_km = calculate_trip_distance(points)
    avg_kph = average_speed(points)
    return Trip(
        trip_id=f"trip_{first.time_ms}",
        device_id=first.device_id,
        start_ms=first.time_ms,
        end_ms=last.time_ms,
        start_location=Location(lat=first.latitude, lng=first.longitude),
        end_location=Location(lat=last.latitude, lng=last.longitude),
        points=tuple(points),
        distance_km=distance_km,
        duration_seconds=calculate_trip_duration(first.time_ms, last.time_ms),
        avg_speed_kph=avg_kph,
        max_speed_kph=max_speed(points),
        fuel_liters=estimate_fuel(distance_km, avg_kph, fuel_model),
    )


def _trips_from_samples(samples: Sequence[TelemetrySample], params: TripParams) -> list[Trip]:
    trips: list[Trip] = []
    for candidate in iter_candidates(samples, params):
        trip = finalize_trip(candidate, params.fuel_model)
        if trip.distance_km < params.min_trip_distance_km:
            logger.debug(
                "Discarded %s: %.3f km is below the %.3f km minimum",
                trip.trip_id,
                trip.distance_km,
                params.min_trip_distance_km,
            )
            continue
        trips.append(trip)
    return trips


def detect_trips(
    records: Iterable[Mapping[str, Any] | TelemetrySample] | None,
    params: TripParams | None = None,
) -> list[Trip]:
    """Detect trips in a telemetry stream.

    The input is treated as a single stream regardless of device ids; use
    :func:`detect_fleet_trips` for mixed-device input.

    Args:
        records: Raw records or samples in any order. None yields [].
        params: Thresholds; defaults to :data:`DEFAULT_PARAMS`.

    Returns:
        Trips in chronological order.
    """

    return _trips_from_samples(ingest(records), params or DEFAULT_PARAMS)


def detect_fleet_trips(
    records: Iterable[Mapping[str, Any] | TelemetrySample] | None,
    params: TripParams | None = None,
) -> dict[str, list[Trip]]:
    """Detect trips separately for every device in the input.

    Returns:
        device_id -> trips, devices in order of first appearance in time.
        Devices without any trip are included with an empty list.
    """

    p = params or DEFAULT_PARAMS
    groups = group_by_device(ingest(records))
    return {device_id: _trips_from_samples(samples, p) for device_id, samples in groups.items()}
