"""Command-line interface for fleet_analyze.

Run:
    python -m fleet_analyze trips --csv telemetry.csv
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Any

from fleet_analyze.csv_io import load_telemetry
from fleet_analyze.fleet import aggregate_trips
from fleet_analyze.formatting import format_distance, format_duration
from fleet_analyze.idle import calculate_idle_time
from fleet_analyze.ingest import group_by_device, order_samples
from fleet_analyze.inspect import inspect_samples
from fleet_analyze.models import DEFAULT_TZ, TelemetrySample, Trip
from fleet_analyze.segmenter import DEFAULT_PARAMS, TripParams
from fleet_analyze.timeutils import dt_from_epoch_ms, parse_dt
from fleet_analyze.trips import detect_fleet_trips

logger = logging.getLogger(__name__)


def _load(args: argparse.Namespace) -> list[TelemetrySample]:
    samples, _ = load_telemetry(args.csv)
    if args.device is not None:
        samples = [s for s in samples if s.device_id == args.device]

    if args.range_start is not None:
        start_ms = int(parse_dt(args.range_start, args.tz).timestamp() * 1000)
        samples = [s for s in samples if s.time_ms >= start_ms]
    if args.range_end is not None:
        end_ms = int(parse_dt(args.range_end, args.tz).timestamp() * 1000)
        samples = [s for s in samples if s.time_ms <= end_ms]
    return order_samples(samples)


def _params(args: argparse.Namespace) -> TripParams:
    return TripParams(
        idle_threshold_kph=args.idle_threshold_kph,
        time_gap_threshold_seconds=args.gap_seconds,
        min_trip_points=args.min_points,
        min_trip_distance_km=args.min_distance_km,
        max_interval_seconds=args.max_interval_seconds,
    )


def _local(epoch_ms: int, tz_name: str) -> str:
    return dt_from_epoch_ms(epoch_ms, tz_name).isoformat(sep=" ", timespec="seconds")


def _trip_payload(trip: Trip, tz_name: str) -> dict[str, Any]:
    return {
        "trip_id": trip.trip_id,
        "device_id": trip.device_id,
        "start_time": _local(trip.start_ms, tz_name),
        "end_time": _local(trip.end_ms, tz_name),
        "start_location": asdict(trip.start_location),
        "end_location": asdict(trip.end_location),
        "points": len(trip.points),
        "distance_km": trip.distance_km,
        "duration_seconds": trip.duration_seconds,
        "avg_speed_kph": trip.avg_speed_kph,
        "max_speed_kph": trip.max_speed_kph,
        "fuel_liters": trip.fuel_liters,
    }


def _cmd_inspect(args: argparse.Namespace) -> int:
    samples, summary = load_telemetry(args.csv)
    res = inspect_samples(samples)

    if args.json:
        payload = asdict(res) | {
            "rows_total": summary.rows_total,
            "rows_parsed": summary.rows_parsed,
            "rows_skipped": summary.rows_skipped,
            "fieldnames": list(summary.fieldnames),
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print("### CSV字段")
    print(", ".join(summary.fieldnames))
    print()

    print("### 行数")
    print(f"total_rows={summary.rows_total}, parsed={summary.rows_parsed}, skipped={summary.rows_skipped}")
    print(f"devices={res.devices}, without_gps_fix={res.without_fix}")
    print()

    if res.min_time_ms is not None and res.max_time_ms is not None:
        print("### 时间范围")
        print(f"start={_local(res.min_time_ms, args.tz)}, end={_local(res.max_time_ms, args.tz)}")
        print()

    if res.delta is not None:
        print("### 采样间隔（秒）")
        print(
            f"count={res.delta.count}, min={res.delta.min_s:.3f}, median={res.delta.median_s:.3f}, "
            f"p95={res.delta.p95_s:.3f}, max={res.delta.max_s:.3f}"
        )
        print()

    print("### 速度范围（km/h）")
    print(f"speed=[{res.min_speed_kph}, {res.max_speed_kph}]")
    print()

    print("### 重复时间戳（同一设备）")
    print(res.duplicates_time)
    return 0


def _cmd_trips(args: argparse.Namespace) -> int:
    trips_by_device = detect_fleet_trips(_load(args), _params(args))

    if args.json:
        payload = {device: [_trip_payload(t, args.tz) for t in trips] for device, trips in trips_by_device.items()}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    for device, trips in trips_by_device.items():
        print(f"### 设备 {device or '(unknown)'}：{len(trips)} 段行程")
        for t in trips:
            print(
                f"{t.trip_id}  {_local(t.start_ms, args.tz)} -> {_local(t.end_ms, args.tz)}  "
                f"{format_distance(t.distance_km)}  {format_duration(t.duration_seconds)}  "
                f"avg={t.avg_speed_kph:.1f}km/h max={t.max_speed_kph:.1f}km/h fuel={t.fuel_liters:.2f}L"
            )
        print()
    return 0


def _cmd_idle(args: argparse.Namespace) -> int:
    samples = _load(args)
    params = _params(args)
    summaries = {device: calculate_idle_time(group, params) for device, group in group_by_device(samples).items()}

    if args.json:
        print(json.dumps({d: asdict(v) for d, v in summaries.items()}, ensure_ascii=False, indent=2))
        return 0

    for device, res in summaries.items():
        print(
            f"{device or '(unknown)'}: idle={format_duration(res.idle_seconds)} ({res.idle_percentage}%), "
            f"moving={format_duration(res.moving_seconds)} ({res.moving_percentage}%), "
            f"total={format_duration(res.total_seconds)}"
        )
    return 0


def _cmd_summary(args: argparse.Namespace) -> int:
    params = _params(args)
    trips_by_device = detect_fleet_trips(_load(args), params)
    all_trips = [t for trips in trips_by_device.values() for t in trips]
    stats = aggregate_trips(all_trips, params.fuel_model)

    if args.json:
        print(json.dumps(asdict(stats) | {"devices": len(trips_by_device)}, ensure_ascii=False, indent=2))
        return 0

    print(f"devices={len(trips_by_device)}, trips={stats.total_trips}")
    print(f"total_distance={format_distance(stats.total_distance_km)}, total_duration={format_duration(stats.total_duration_seconds)}")
    print(f"avg_distance={format_distance(stats.avg_distance_km)}, avg_duration={format_duration(stats.avg_duration_seconds)}")
    print(f"avg_speed={stats.avg_speed_kph}km/h, max_speed={stats.max_speed_kph}km/h")
    print(f"estimated_fuel={stats.total_fuel_liters}L")
    return 0


def _add_common(p: argparse.ArgumentParser, *, thresholds: bool = True) -> None:
    p.add_argument("--csv", type=str, default="telemetry.csv", help="输入CSV路径")
    p.add_argument("--tz", type=str, default=DEFAULT_TZ, help="显示时间用的时区（IANA），默认 UTC")
    p.add_argument("--json", action="store_true", help="以JSON输出（便于后处理）")
    if not thresholds:
        return
    p.add_argument("--device", type=str, default=None, help="只分析该设备（imei/deviceId）")
    p.add_argument("--range-start", type=str, default=None, help="仅统计该时间之后的数据（例如 2025-12-01 00:00:00）")
    p.add_argument("--range-end", type=str, default=None, help="仅统计该时间之前的数据（例如 2025-12-31 23:59:59）")
    p.add_argument(
        "--idle-threshold-kph",
        type=float,
        default=DEFAULT_PARAMS.idle_threshold_kph,
        help="速度不高于该值（km/h）视为静止",
    )
    p.add_argument(
        "--gap-seconds",
        type=float,
        default=DEFAULT_PARAMS.time_gap_threshold_seconds,
        help="两个行驶采样间隔超过该秒数时切分为两段行程",
    )
    p.add_argument("--min-points", type=int, default=DEFAULT_PARAMS.min_trip_points, help="一段行程最少采样点数")
    p.add_argument(
        "--min-distance-km",
        type=float,
        default=DEFAULT_PARAMS.min_trip_distance_km,
        help="过滤短于该距离（km）的行程",
    )
    p.add_argument(
        "--max-interval-seconds",
        type=float,
        default=DEFAULT_PARAMS.max_interval_seconds,
        help="统计静止/行驶时间时，超过该间隔视为离线不计入",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="fleet_analyze")
    p.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_ins = sub.add_parser("inspect", help="分析遥测CSV的设备数/时间范围/采样间隔/GPS质量")
    _add_common(p_ins, thresholds=False)
    p_ins.set_defaults(func=_cmd_inspect)

    p_trips = sub.add_parser("trips", help="按设备识别行程并输出距离/时长/速度/油耗")
    _add_common(p_trips)
    p_trips.set_defaults(func=_cmd_trips)

    p_idle = sub.add_parser("idle", help="按设备统计静止与行驶时间")
    _add_common(p_idle)
    p_idle.set_defaults(func=_cmd_idle)

    p_sum = sub.add_parser("summary", help="全车队行程汇总统计")
    _add_common(p_sum)
    p_sum.set_defaults(func=_cmd_summary)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        return int(args.func(args))
    except (ValueError, KeyError, OSError) as exc:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        print(f"错误：{exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
