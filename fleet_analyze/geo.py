"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math
from typing import Final

EARTH_RADIUS_M: Final[float] = 6_371_000.0  # mean Earth radius in meters

# |lat| / |lon| at or below this are treated as "no GPS fix" (devices report 0,0)
MIN_FIX_ABS_DEG: Final[float] = 0.0001


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters.
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometers."""

    return haversine_m(lat1, lon1, lat2, lon2) / 1000.0


def is_coordinate(value: object) -> bool:
    """True for a finite int/float (bool excluded)."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def has_valid_fix(lat: float | None, lon: float | None) -> bool:
    """Check whether a coordinate pair looks like a real GPS fix."""

    if not (is_coordinate(lat) and is_coordinate(lon)):
        return False
    return abs(lat) > MIN_FIX_ABS_DEG and abs(lon) > MIN_FIX_ABS_DEG
