from __future__ import annotations

import csv
from pathlib import Path

import pytest

from fleet_analyze.csv_io import iter_telemetry, load_telemetry
from telemetry_fakes import moving_run, record

FIELDS = ["imei", "latitude", "longitude", "speed", "timestamp", "deviceTimestamp"]


def write_csv(path: Path, rows: list[dict], fieldnames: list[str] = FIELDS) -> Path:
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        w.writeheader()
        w.writerows(rows)
    return path


def test_load_telemetry_parses_rows(tmp_path: Path) -> None:
    path = write_csv(tmp_path / "t.csv", moving_run(0, 3))
    samples, summary = load_telemetry(path)
    assert summary.rows_total == 3
    assert summary.rows_parsed == 3
    assert summary.rows_skipped == 0
    assert list(summary.fieldnames) == FIELDS
    assert samples[0].device_id == "123"
    assert samples[2].speed_kph == 12.0


def test_rows_without_timestamp_are_counted_as_skipped(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    rows = moving_run(0, 2) + [{"imei": "123", "latitude": "1", "longitude": "1", "speed": "3", "timestamp": ""}]
    path = write_csv(tmp_path / "t.csv", rows)
    with caplog.at_level("WARNING"):
        samples, summary = load_telemetry(path)
    assert len(samples) == 2
    assert summary.rows_skipped == 1
    assert "1" in caplog.text


def test_device_timestamp_column_wins(tmp_path: Path) -> None:
    row = record(0, 10) | {"deviceTimestamp": "2024-01-01T09:59:00Z"}
    path = write_csv(tmp_path / "t.csv", [row])
    (s,) = list(iter_telemetry(path))
    assert s.time_ms == 1_704_103_200_000 - 60_000


def test_missing_columns_raise_key_error(tmp_path: Path) -> None:
    path = write_csv(tmp_path / "t.csv", [{"imei": "1", "speed": "10"}], fieldnames=["imei", "speed"])
    with pytest.raises(KeyError):
        load_telemetry(path)
    with pytest.raises(KeyError):
        list(iter_telemetry(path))


def test_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    samples, summary = load_telemetry(path)
    assert samples == []
    assert summary.rows_total == 0
    assert list(iter_telemetry(path)) == []
