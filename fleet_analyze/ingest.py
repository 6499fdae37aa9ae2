"""Normalize raw telemetry records and put them in chronological order.

Records come from the surrounding application as plain mappings (API JSON,
CSV rows) and use a handful of field spellings. Nothing here checks GPS
validity: trip segmentation filters on coordinates, the idle classifier does
not, so both get the same ordered list.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping

from fleet_analyze.models import TelemetrySample
from fleet_analyze.timeutils import parse_timestamp

logger = logging.getLogger(__name__)

# First key present wins; for timestamps, the first readable one.
# deviceTimestamp is what the tracker itself reported.
DEVICE_ID_KEYS = ("deviceId", "device_id", "imei")
LATITUDE_KEYS = ("latitude", "lat")
LONGITUDE_KEYS = ("longitude", "lng", "lon")
SPEED_KEYS = ("speed", "speed_kph", "speedKph")
TIMESTAMP_KEYS = ("deviceTimestamp", "device_timestamp", "timestamp")


def _first(record: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _effective_time_ms(record: Mapping[str, Any]) -> int | None:
    # deviceTimestamp 无法解析时回退到 timestamp
    for key in TIMESTAMP_KEYS:
        time_ms = parse_timestamp(record.get(key))
        if time_ms is not None:
            return time_ms
    return None


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def sample_from_record(record: Mapping[str, Any] | TelemetrySample) -> TelemetrySample | None:
    """Convert one raw record to a TelemetrySample.

    Args:
        record: Mapping with telemetry fields, or an existing sample.

    Returns:
        The sample, or None if the record has no usable timestamp.
    """

    if isinstance(record, TelemetrySample):
        return record
    if not isinstance(record, Mapping):
        return None

    time_ms = _effective_time_ms(record)
    if time_ms is None:
        return None

    device_id = _first(record, DEVICE_ID_KEYS)
    speed = _to_float(_first(record, SPEED_KEYS))
    return TelemetrySample(
        device_id="" if device_id is None else str(device_id),
        time_ms=time_ms,
        latitude=_to_float(_first(record, LATITUDE_KEYS)),
        longitude=_to_float(_first(record, LONGITUDE_KEYS)),
        speed_kph=0.0 if speed is None else speed,
    )


def normalize_records(records: Iterable[Mapping[str, Any] | TelemetrySample] | None) -> list[TelemetrySample]:
    """Convert records to samples, keeping input order and skipping unreadable ones."""

    if records is None or isinstance(records, (str, bytes, Mapping)):
        return []
    try:
        items = list(records)
    except TypeError:
        return []

    samples: list[TelemetrySample] = []
    dropped = 0
    for record in items:
        sample = sample_from_record(record)
        if sample is None:
            dropped += 1
            continue
        samples.append(sample)
    if dropped:
        logger.debug("Dropped %s telemetry records without a readable timestamp", dropped)
    return samples


def order_samples(samples: Iterable[TelemetrySample]) -> list[TelemetrySample]:
    """Sort samples by time. Stable: equal timestamps keep their input order."""

    return sorted(samples, key=lambda s: s.time_ms)


def ingest(records: Iterable[Mapping[str, Any] | TelemetrySample] | None) -> list[TelemetrySample]:
    """Normalize and chronologically order raw records.

    Args:
        records: Raw records in any order. None or a non-iterable yields [].

    Returns:
        Time-sorted samples.
    """

    return order_samples(normalize_records(records))


def group_by_device(samples: Iterable[TelemetrySample]) -> dict[str, list[TelemetrySample]]:
    """Split samples per device, preserving order within each device."""

    groups: dict[str, list[TelemetrySample]] = {}
    for s in samples:
        groups.setdefault(s.device_id, []).append(s)
    return groups
