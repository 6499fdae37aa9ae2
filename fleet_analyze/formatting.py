"""Display formatting for durations and distances."""

from __future__ import annotations

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round like a dashboard would: halves go up, not to even.

    >>> round_half_up(2.5)
    3.0
    >>> round_half_up(10.567, 2)
    10.57
    """

    factor = 10.0**ndigits
    return math.floor(value * factor + 0.5) / factor


def _plain_number(value: float) -> str:
    # 1.0 -> "1", 1.5 -> "1.5"
    if value == int(value):
        return str(int(value))
    return repr(value)


def format_duration(seconds: float | None) -> str:
    """Format seconds as e.g. "2h 5m", "1m 30s" or "45s".

    Seconds are only shown for durations under an hour.
    """

    if not seconds or not math.isfinite(seconds) or seconds <= 0:
        return "0m"

    s = int(seconds)
    hours = s // 3600
    minutes = (s % 3600) // 60
    secs = s % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 and hours == 0:
        parts.append(f"{secs}s")
    return " ".join(parts) or "0m"


def format_distance(km: float | None) -> str:
    """Format kilometers: metres below 1 km, otherwise km with up to 2 decimals."""

    if not km or not math.isfinite(km) or km <= 0:
        return "0 km"
    if km < 1:
        return f"{int(round_half_up(km * 1000))} m"
    return f"{_plain_number(round_half_up(km, 2))} km"
