from __future__ import annotations

from fleet_analyze.idle import calculate_idle_time
from fleet_analyze.models import IdleTimeSummary
from fleet_analyze.segmenter import TripParams
from telemetry_fakes import iso, record


def _pt(offset_s: float, speed: float) -> dict:
    return {"speed": speed, "timestamp": iso(offset_s)}


def test_empty_or_single_sample() -> None:
    zero = IdleTimeSummary(0, 0, 0, 0, 0)
    assert calculate_idle_time(None) == zero
    assert calculate_idle_time([]) == zero
    assert calculate_idle_time([_pt(0, 10)]) == zero


def test_idle_and_moving_split() -> None:
    data = [_pt(0, 0), _pt(300, 2), _pt(600, 50), _pt(1200, 60)]
    res = calculate_idle_time(data)
    assert res.idle_seconds == 300
    assert res.moving_seconds == 900
    assert res.total_seconds == 1200
    assert res.idle_percentage == 25
    assert res.moving_percentage == 75


def test_percentages() -> None:
    res = calculate_idle_time([_pt(0, 0), _pt(1800, 2), _pt(3600, 50)])
    assert res.idle_percentage == 50
    assert res.moving_percentage == 50


def test_outage_interval_is_excluded() -> None:
    data = [_pt(0, 0), _pt(60, 0), _pt(60 + 3601, 40), _pt(60 + 3601 + 120, 40)]
    res = calculate_idle_time(data)
    assert res.idle_seconds == 60
    assert res.moving_seconds == 120
    assert res.total_seconds == 180


def test_interval_of_exactly_one_hour_counts() -> None:
    res = calculate_idle_time([_pt(0, 0), _pt(3600, 0)])
    assert res.idle_seconds == 3600


def test_samples_without_fix_still_count() -> None:
    data = [record(0, 0, lat=0, lon=0), record(120, 30, lat=0, lon=0)]
    res = calculate_idle_time(data)
    assert res.moving_seconds == 120
    assert res.moving_percentage == 100


def test_input_order_does_not_matter() -> None:
    data = [_pt(0, 0), _pt(300, 2), _pt(600, 50), _pt(1200, 60)]
    assert calculate_idle_time(list(reversed(data))) == calculate_idle_time(data)


def test_custom_thresholds() -> None:
    data = [_pt(0, 0), _pt(60, 20), _pt(120, 40)]
    res = calculate_idle_time(data, TripParams(idle_threshold_kph=30, max_interval_seconds=100))
    assert res.idle_seconds == 60
    assert res.moving_seconds == 60
