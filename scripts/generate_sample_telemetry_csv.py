from __future__ import annotations

import argparse
import csv
import math
import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Final

FIELDNAMES: Final[list[str]] = ["imei", "latitude", "longitude", "speed", "timestamp", "deviceTimestamp"]


@dataclass(frozen=True, slots=True)
class Depot:
    name: str
    lat: float
    lon: float


def generate_rows(
    *,
    imei: str,
    rows: int,
    rng: random.Random,
    start: datetime,
    depot: Depot,
) -> list[dict[str, str]]:
    """Generate fake tracker rows alternating between parked and driving phases."""

    lat, lon = depot.lat, depot.lon
    heading = rng.uniform(0, 2 * math.pi)
    cur = start
    driving = False
    phase_left = rng.randint(3, 10)

    out: list[dict[str, str]] = []
    for _ in range(rows):
        if phase_left <= 0:
            driving = not driving
            phase_left = rng.randint(5, 40) if driving else rng.randint(3, 15)
            heading += rng.uniform(-1.0, 1.0)
        phase_left -= 1

        # Report every 30-60s, occasionally a 10-40 minute outage
        step_s = rng.uniform(30, 60) if rng.random() > 0.02 else rng.uniform(600, 2400)
        speed = rng.uniform(20, 110) if driving else rng.choice([0.0, 0.0, rng.uniform(0.5, 4.0)])
        if driving:
            km = speed * step_s / 3600.0
            lat += km / 111.0 * math.cos(heading)
            lon += km / (111.0 * math.cos(math.radians(lat))) * math.sin(heading)
        cur = cur + timedelta(seconds=step_s)

        no_fix = rng.random() < 0.02
        out.append(
            {
                "imei": imei,
                "latitude": "0" if no_fix else f"{lat:.7f}",
                "longitude": "0" if no_fix else f"{lon:.7f}",
                "speed": f"{speed:.1f}",
                "timestamp": (cur + timedelta(seconds=rng.uniform(1, 5))).isoformat(timespec="seconds").replace("+00:00", "Z"),
                "deviceTimestamp": cur.isoformat(timespec="seconds").replace("+00:00", "Z"),
            }
        )
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake fleet telemetry CSV for demo/testing.")
    p.add_argument("--out", type=str, default="sample_data/telemetry.csv", help="Output CSV path")
    p.add_argument("--devices", type=int, default=3, help="Number of devices")
    p.add_argument("--rows", type=int, default=500, help="Rows per device")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--start", type=str, default="2025-01-01 06:00:00", help="Start time (UTC)")
    args = p.parse_args()

    rng = random.Random(args.seed)
    start = datetime.fromisoformat(args.start).replace(tzinfo=UTC)
    depots = [
        Depot("lagos", 6.5244, 3.3792),
        Depot("nairobi", -1.2921, 36.8219),
        Depot("berlin", 52.5200, 13.4050),
    ]

    rows: list[dict[str, str]] = []
    for i in range(args.devices):
        rows.extend(
            generate_rows(
                imei=f"86{i:013d}",
                rows=args.rows,
                rng=rng,
                start=start,
                depot=depots[i % len(depots)],
            )
        )
    # Exports are usually ordered by server receive time, not per device
    rows.sort(key=lambda r: r["timestamp"])

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=FIELDNAMES)
        w.writeheader()
        w.writerows(rows)

    print(f"Generated: {out_path} (devices={args.devices}, rows={len(rows)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
