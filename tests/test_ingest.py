from __future__ import annotations

from datetime import UTC, datetime

from fleet_analyze.ingest import group_by_device, ingest, normalize_records, sample_from_record
from fleet_analyze.trips import detect_trips
from telemetry_fakes import T0_MS, iso, moving_run, record, sample


def test_ingest_handles_missing_input() -> None:
    assert ingest(None) == []
    assert ingest([]) == []
    assert ingest({"timestamp": iso(0)}) == []
    assert ingest(42) == []


def test_ingest_sorts_chronologically() -> None:
    out = ingest([record(120, 10), record(0, 10), record(60, 10)])
    assert [s.time_ms for s in out] == [T0_MS, T0_MS + 60_000, T0_MS + 120_000]


def test_ingest_sort_is_stable_for_equal_timestamps() -> None:
    recs = [record(0, 1, imei="a"), record(0, 2, imei="b"), record(-10, 3, imei="c"), record(0, 4, imei="d")]
    out = ingest(recs)
    assert [s.device_id for s in out] == ["c", "a", "b", "d"]


def test_device_timestamp_preferred_over_timestamp() -> None:
    s = sample_from_record({"imei": "1", "timestamp": iso(100), "deviceTimestamp": iso(5), "latitude": 1, "longitude": 1})
    assert s is not None
    assert s.time_ms == T0_MS + 5_000


def test_falls_back_to_timestamp_when_device_timestamp_blank() -> None:
    s = sample_from_record({"timestamp": iso(100), "deviceTimestamp": ""})
    assert s is not None
    assert s.time_ms == T0_MS + 100_000


def test_falls_back_to_timestamp_when_device_timestamp_unreadable() -> None:
    for bad in ("garbage", "N/A", float("nan")):
        s = sample_from_record({"deviceTimestamp": bad, "timestamp": iso(30), "latitude": 1, "longitude": 1})
        assert s is not None
        assert s.time_ms == T0_MS + 30_000


def test_unreadable_device_timestamps_do_not_lose_trips() -> None:
    recs = [r | {"deviceTimestamp": "N/A"} for r in moving_run(0, 3)]
    assert len(detect_trips(recs)) == 1


def test_record_without_timestamp_is_skipped() -> None:
    out = normalize_records([{"imei": "1", "speed": 10}, record(0, 10), {"timestamp": "not a date"}])
    assert len(out) == 1


def test_field_coercion() -> None:
    s = sample_from_record(
        {"deviceId": 77, "lat": "40.5", "lng": "-73.9", "speed": "12.5", "timestamp": T0_MS}
    )
    assert s is not None
    assert s.device_id == "77"
    assert s.latitude == 40.5
    assert s.longitude == -73.9
    assert s.speed_kph == 12.5
    assert s.time_ms == T0_MS


def test_bad_values_become_none_or_zero() -> None:
    s = sample_from_record({"latitude": "abc", "longitude": float("nan"), "speed": None, "timestamp": iso(0)})
    assert s is not None
    assert s.latitude is None
    assert s.longitude is None
    assert s.speed_kph == 0.0
    assert s.device_id == ""
    assert not s.has_valid_fix


def test_epoch_seconds_and_datetimes_are_accepted() -> None:
    a = sample_from_record({"timestamp": T0_MS / 1000})
    b = sample_from_record({"timestamp": datetime(2024, 1, 1, 10, 0, tzinfo=UTC)})
    assert a is not None and b is not None
    assert a.time_ms == b.time_ms == T0_MS


def test_samples_pass_through_unchanged() -> None:
    s = sample(0)
    assert sample_from_record(s) is s


def test_ingest_keeps_records_without_fix() -> None:
    out = ingest([record(0, 10, lat=0, lon=0), record(60, 10)])
    assert len(out) == 2
    assert [s.has_valid_fix for s in out] == [False, True]


def test_group_by_device_preserves_order() -> None:
    samples = [sample(0, device_id="b"), sample(1, device_id="a"), sample(2, device_id="b")]
    groups = group_by_device(samples)
    assert list(groups) == ["b", "a"]
    assert [s.time_ms for s in groups["b"]] == [T0_MS, T0_MS + 2000]
