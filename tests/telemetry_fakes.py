from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from fleet_analyze.models import Location, TelemetrySample, Trip

T0 = datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC)
T0_MS = 1_704_103_200_000

# Lower Manhattan; 0.001 deg steps are ~140 m legs.
BASE_LAT = 40.7128
BASE_LON = -74.0060


def iso(offset_s: float) -> str:
    return (T0 + timedelta(seconds=offset_s)).isoformat().replace("+00:00", "Z")


def record(
    offset_s: float,
    speed: float,
    step: int = 0,
    *,
    imei: str = "123",
    lat: Any = None,
    lon: Any = None,
) -> dict[str, Any]:
    """Raw API-style record ``step`` grid steps away from the base point."""

    return {
        "imei": imei,
        "speed": speed,
        "latitude": BASE_LAT + step * 0.001 if lat is None else lat,
        "longitude": BASE_LON - step * 0.001 if lon is None else lon,
        "timestamp": iso(offset_s),
    }


def moving_run(start_s: float, count: int, *, first_step: int = 0, interval_s: float = 60.0, imei: str = "123") -> list[dict[str, Any]]:
    return [
        record(start_s + i * interval_s, 10.0 + i, first_step + i, imei=imei)
        for i in range(count)
    ]


def sample(
    offset_s: float,
    speed: float = 20.0,
    lat: float | None = BASE_LAT,
    lon: float | None = BASE_LON,
    device_id: str = "dev",
) -> TelemetrySample:
    return TelemetrySample(
        device_id=device_id,
        time_ms=T0_MS + int(offset_s * 1000),
        latitude=lat,
        longitude=lon,
        speed_kph=speed,
    )


def make_trip(distance_km: float, duration_s: int, avg_kph: float, max_kph: float, n: int = 0) -> Trip:
    loc = Location(lat=BASE_LAT, lng=BASE_LON)
    return Trip(
        trip_id=f"trip_{n}",
        device_id="dev",
        start_ms=T0_MS,
        end_ms=T0_MS + duration_s * 1000,
        start_location=loc,
        end_location=loc,
        points=(),
        distance_km=distance_km,
        duration_seconds=duration_s,
        avg_speed_kph=avg_kph,
        max_speed_kph=max_kph,
        fuel_liters=0.0,
    )
