"""Idle vs moving time budget.

Independent of trip segmentation: every consecutive pair of time-ordered
samples is looked at, with or without a GPS fix. The interval between them
is charged to the state of the later sample.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from fleet_analyze.formatting import round_half_up
from fleet_analyze.ingest import ingest
from fleet_analyze.models import IdleTimeSummary, TelemetrySample
from fleet_analyze.segmenter import DEFAULT_PARAMS, TripParams

_EMPTY = IdleTimeSummary(idle_seconds=0, moving_seconds=0, total_seconds=0, idle_percentage=0, moving_percentage=0)


def calculate_idle_time(
    records: Iterable[Mapping[str, Any] | TelemetrySample] | None,
    params: TripParams | None = None,
) -> IdleTimeSummary:
    """Split elapsed time into idle and moving seconds.

    Args:
        records: Raw records or samples in any order.
        params: Uses ``idle_threshold_kph`` and ``max_interval_seconds``.

    Returns:
        IdleTimeSummary; all zeros for fewer than two samples.
    """

    p = params or DEFAULT_PARAMS
    samples = ingest(records)
    if len(samples) < 2:
        return _EMPTY

    idle_s = 0.0
    moving_s = 0.0
    for prev, cur in zip(samples, samples[1:]):
        dt_s = (cur.time_ms - prev.time_ms) / 1000.0
        # 超过阈值视为设备离线，不计入任何一类
        if dt_s > p.max_interval_seconds:
            continue
        if cur.speed_kph <= p.idle_threshold_kph:
            idle_s += dt_s
        else:
            moving_s += dt_s

    total_s = idle_s + moving_s
    return IdleTimeSummary(
        idle_seconds=int(round_half_up(idle_s)),
        moving_seconds=int(round_half_up(moving_s)),
        total_seconds=int(round_half_up(total_s)),
        idle_percentage=int(round_half_up(idle_s / total_s * 100)) if total_s > 0 else 0,
        moving_percentage=int(round_half_up(moving_s / total_s * 100)) if total_s > 0 else 0,
    )
