"""CSV input utilities for exported device telemetry."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

from fleet_analyze.ingest import (
    LATITUDE_KEYS,
    LONGITUDE_KEYS,
    TIMESTAMP_KEYS,
    sample_from_record,
)
from fleet_analyze.models import TelemetrySample

logger = logging.getLogger(__name__)

_REQUIRED_COLUMN_GROUPS = (TIMESTAMP_KEYS, LATITUDE_KEYS, LONGITUDE_KEYS)


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


def _check_columns(fieldnames: Sequence[str]) -> None:
    missing = [keys[0] for keys in _REQUIRED_COLUMN_GROUPS if not any(k in fieldnames for k in keys)]
    if missing:
        raise KeyError(f"CSV缺少必要字段：{missing}. 实际字段：{list(fieldnames)}")


def iter_telemetry(csv_path: str | Path) -> Iterator[TelemetrySample]:
    """Yield samples from a telemetry CSV in file order.

    Args:
        csv_path: Path to the exported CSV.

    Yields:
        Samples for rows with a readable timestamp.

    Raises:
        KeyError: If timestamp or coordinate columns are missing.

    Notes:
        Expected columns (observed in tracker exports):
          - imei or deviceId
          - latitude/longitude: decimal degrees
          - speed: km/h
          - timestamp, optionally deviceTimestamp (preferred when set)
    """

    p = Path(csv_path)
    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            return
        _check_columns(reader.fieldnames)

        for row in reader:
            sample = sample_from_record(row)
            if sample is None:
                # 时间戳缺失或损坏的行直接跳过
                continue
            yield sample


def load_telemetry(csv_path: str | Path) -> tuple[list[TelemetrySample], CsvSummary]:
    """Load all samples into memory.

    Args:
        csv_path: Path to the exported CSV.

    Returns:
        (samples in file order, summary)
    """

    p = Path(csv_path)
    rows_total = 0
    parsed: list[TelemetrySample] = []
    fieldnames: Sequence[str] = ()

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or ()
        if fieldnames:
            _check_columns(fieldnames)
        for row in reader:
            rows_total += 1
            sample = sample_from_record(row)
            if sample is not None:
                parsed.append(sample)

    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=len(parsed),
        rows_skipped=rows_total - len(parsed),
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("CSV中有 %s 行解析失败已跳过", summary.rows_skipped)
    return parsed, summary
