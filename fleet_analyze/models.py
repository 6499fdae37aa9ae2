"""Data models for telemetry samples, trips and derived summaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from fleet_analyze.geo import has_valid_fix


@dataclass(frozen=True, slots=True)
class TelemetrySample:
    """A single telemetry report from a tracked device.

    Attributes:
        device_id: Device identifier (IMEI or app-side id). May be "".
        time_ms: Effective timestamp, Unix epoch milliseconds (UTC).
        latitude: Latitude in decimal degrees, None if missing/non-numeric.
        longitude: Longitude in decimal degrees, None if missing/non-numeric.
        speed_kph: Reported speed in km/h. Missing values are stored as 0.0.
    """

    device_id: str
    time_ms: int
    latitude: float | None
    longitude: float | None
    speed_kph: float

    @property
    def time_s(self) -> float:
        """Unix epoch seconds as float."""

        return self.time_ms / 1000.0

    @property
    def has_valid_fix(self) -> bool:
        """True when both coordinates are numeric and not the (0, 0) "no fix" placeholder."""

        return has_valid_fix(self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class Location:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class Trip:
    """A finalized trip.

    Note:
        Distance and speeds are kept unrounded; rounding happens in
        fleet aggregates and display formatting only.
    """

    trip_id: str
    device_id: str
    start_ms: int
    end_ms: int
    start_location: Location
    end_location: Location
    points: tuple[TelemetrySample, ...]
    distance_km: float
    duration_seconds: int
    avg_speed_kph: float
    max_speed_kph: float
    fuel_liters: float


@dataclass(frozen=True, slots=True)
class IdleTimeSummary:
    """Idle vs moving time budget (whole seconds, integer percentages)."""

    idle_seconds: int
    moving_seconds: int
    total_seconds: int
    idle_percentage: int
    moving_percentage: int


@dataclass(frozen=True, slots=True)
class FleetTripStatistics:
    """Summary statistics over a collection of trips."""

    total_trips: int
    total_distance_km: float
    total_duration_seconds: int
    avg_distance_km: float
    avg_duration_seconds: int
    avg_speed_kph: float
    max_speed_kph: float
    total_fuel_liters: float


DEFAULT_TZ: Final[str] = "UTC"
