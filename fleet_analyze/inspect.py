"""Inspect loaded telemetry: devices, time range, sampling and GPS quality."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from fleet_analyze.models import TelemetrySample
from fleet_analyze.timeutils import DeltaStats, delta_stats


@dataclass(frozen=True, slots=True)
class InspectResult:
    """High-level telemetry inspection result."""

    samples: int
    devices: int
    min_time_ms: int | None
    max_time_ms: int | None
    delta: DeltaStats | None
    without_fix: int
    min_speed_kph: float | None
    max_speed_kph: float | None
    duplicates_time: int


def inspect_samples(samples: Sequence[TelemetrySample]) -> InspectResult:
    """Inspect already-loaded samples.

    Sampling intervals and duplicate timestamps are computed per device, so a
    fleet export does not look denser than each tracker really reports.
    """

    if not samples:
        return InspectResult(
            samples=0,
            devices=0,
            min_time_ms=None,
            max_time_ms=None,
            delta=None,
            without_fix=0,
            min_speed_kph=None,
            max_speed_kph=None,
            duplicates_time=0,
        )

    by_device: dict[str, list[int]] = {}
    for s in samples:
        by_device.setdefault(s.device_id, []).append(s.time_ms)

    dupe = 0
    device_stats: list[DeltaStats] = []
    for times in by_device.values():
        times.sort()
        for i in range(1, len(times)):
            if times[i] == times[i - 1]:
                dupe += 1
        stats = delta_stats(times)
        if stats is not None:
            device_stats.append(stats)

    # 单设备时直接用它的统计；多设备时取样本最多的那台作为代表
    delta = max(device_stats, key=lambda d: d.count) if device_stats else None

    speeds = [s.speed_kph for s in samples]
    all_times = [s.time_ms for s in samples]
    return InspectResult(
        samples=len(samples),
        devices=len(by_device),
        min_time_ms=min(all_times),
        max_time_ms=max(all_times),
        delta=delta,
        without_fix=sum(1 for s in samples if not s.has_valid_fix),
        min_speed_kph=min(speeds),
        max_speed_kph=max(speeds),
        duplicates_time=dupe,
    )
