"""Trip segmentation state machine.

A trip candidate is a run of GPS-valid samples moving faster than the idle
threshold. The machine has two phases:

    NO_ACTIVE_TRIP --moving--> IN_TRIP
    IN_TRIP --moving, gap <= threshold--> IN_TRIP (append)
    IN_TRIP --moving, gap > threshold--> IN_TRIP (close, start new candidate)
    IN_TRIP --idle--> NO_ACTIVE_TRIP (close)

A closed candidate is emitted only if it has at least ``min_trip_points``
points, shorter runs are dropped as noise. Samples without a GPS fix are
ignored entirely: they do not extend, break, or re-anchor the gap timer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from fleet_analyze.fuel import DEFAULT_FUEL_MODEL, FuelModel
from fleet_analyze.models import TelemetrySample

logger = logging.getLogger(__name__)

Candidate = list[TelemetrySample]


@dataclass(frozen=True, slots=True)
class TripParams:
    """Parameters controlling trip detection and time classification."""

    # At or below this speed (km/h) a device is considered stationary.
    idle_threshold_kph: float = 5.0
    # Two moving samples further apart than this belong to different trips.
    time_gap_threshold_seconds: float = 300.0
    min_trip_points: int = 3
    min_trip_distance_km: float = 0.1
    # Idle/moving classification ignores intervals longer than this (device offline).
    max_interval_seconds: float = 3600.0
    fuel_model: FuelModel = field(default=DEFAULT_FUEL_MODEL)

    def __post_init__(self) -> None:
        if self.idle_threshold_kph < 0:
            raise ValueError(f"idle_threshold_kph 不能为负数：{self.idle_threshold_kph}")
        if self.time_gap_threshold_seconds < 0:
            raise ValueError(f"time_gap_threshold_seconds 不能为负数：{self.time_gap_threshold_seconds}")
        if self.min_trip_points < 1:
            raise ValueError(f"min_trip_points 至少为 1：{self.min_trip_points}")
        if self.min_trip_distance_km < 0:
            raise ValueError(f"min_trip_distance_km 不能为负数：{self.min_trip_distance_km}")
        if self.max_interval_seconds < 0:
            raise ValueError(f"max_interval_seconds 不能为负数：{self.max_interval_seconds}")


DEFAULT_PARAMS = TripParams()


class Phase(Enum):
    NO_ACTIVE_TRIP = "no_active_trip"
    IN_TRIP = "in_trip"


@dataclass(frozen=True, slots=True)
class SegmenterState:
    """Segmenter state: the phase plus the open candidate's points.

    States along one run share an append-only buffer; each state only sees
    its first ``length`` entries. Advancing an older state again copies its
    prefix, so earlier states never change.
    """

    phase: Phase = Phase.NO_ACTIVE_TRIP
    buffer: Candidate = field(default_factory=list, repr=False, compare=False)
    length: int = 0

    @property
    def candidate(self) -> tuple[TelemetrySample, ...]:
        return tuple(self.buffer[: self.length])

    def last_point(self) -> TelemetrySample:
        return self.buffer[self.length - 1]

    def points(self) -> Candidate:
        """Copy of the candidate points."""

        return self.buffer[: self.length]

    def extended(self, sample: TelemetrySample) -> SegmenterState:
        buffer = self.buffer
        if len(buffer) != self.length:
            # 从较早的状态分叉：复制前缀，不影响后续状态
            buffer = buffer[: self.length]
        buffer.append(sample)
        return SegmenterState(Phase.IN_TRIP, buffer, self.length + 1)


def _started(sample: TelemetrySample) -> SegmenterState:
    return SegmenterState(Phase.IN_TRIP, [sample], 1)


def _close(candidate: Candidate, params: TripParams, reason: str) -> Candidate | None:
    if len(candidate) >= params.min_trip_points:
        return candidate
    logger.debug(
        "Discarded trip candidate with %s point(s) at %s ms (%s)",
        len(candidate),
        candidate[0].time_ms if candidate else None,
        reason,
    )
    return None


def advance(
    state: SegmenterState,
    sample: TelemetrySample,
    params: TripParams = DEFAULT_PARAMS,
) -> tuple[SegmenterState, Candidate | None]:
    """Apply one sample to the state machine.

    Args:
        state: Current state.
        sample: Next sample in chronological order.
        params: Thresholds.

    Returns:
        (new_state, closed candidate or None)
    """

    if not sample.has_valid_fix:
        return state, None

    if sample.speed_kph > params.idle_threshold_kph:
        if state.phase is Phase.NO_ACTIVE_TRIP:
            return _started(sample), None

        last = state.last_point()
        gap_s = (sample.time_ms - last.time_ms) / 1000.0
        if gap_s > params.time_gap_threshold_seconds:
            emitted = _close(state.points(), params, "time gap")
            return _started(sample), emitted

        return state.extended(sample), None

    if state.phase is Phase.IN_TRIP:
        return SegmenterState(), _close(state.points(), params, "stopped")
    return state, None


def finish(state: SegmenterState, params: TripParams = DEFAULT_PARAMS) -> Candidate | None:
    """Close the open candidate at end of input."""

    if state.phase is not Phase.IN_TRIP:
        return None
    return _close(state.points(), params, "end of input")


def iter_candidates(
    samples: Iterable[TelemetrySample],
    params: TripParams = DEFAULT_PARAMS,
) -> Iterator[Candidate]:
    """Yield trip candidates from time-ordered samples in a single pass."""

    state = SegmenterState()
    for sample in samples:
        state, emitted = advance(state, sample, params)
        if emitted is not None:
            yield emitted
    tail = finish(state, params)
    if tail is not None:
        yield tail


class TripSegmenter:
    """Incremental wrapper around :func:`advance` for streaming consumers."""

    def __init__(self, params: TripParams = DEFAULT_PARAMS) -> None:
        self.params = params
        self.state = SegmenterState()

    def feed(self, sample: TelemetrySample) -> Candidate | None:
        self.state, emitted = advance(self.state, sample, self.params)
        return emitted

    def close(self) -> Candidate | None:
        tail = finish(self.state, self.params)
        self.state = SegmenterState()
        return tail
