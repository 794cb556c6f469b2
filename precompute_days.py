#!/usr/bin/env python3
"""Precompute planetary hours for a run of consecutive days and emit JSON lines.

Each line is one local day keyed like the in-process cache, ready to load into
any external store.
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Iterator, TextIO

from planetary_hours.cache import make_cache_key
from planetary_hours.calculator import PlanetaryHoursCalculator
from planetary_hours.errors import PlanetaryHoursError
from planetary_hours.serialize import outcome_to_record
from planetary_hours.sun_events import set_ephe_path
from planetary_hours.timezones import local_date, parse_date


def precompute(
    start: date,
    days: int,
    lat: float,
    lon: float,
    tz_name: str,
    elevation: float = 0.0,
) -> Iterator[Dict[str, object]]:
    """Yield one record per local day; unavailable days carry ``available: false``."""

    calc = PlanetaryHoursCalculator()
    for offset in range(days):
        day = start + timedelta(days=offset)
        outcome = calc.calculate(day, lat, lon, tz_name, elevation)
        record = outcome_to_record(outcome)
        record["key"] = make_cache_key(day, lat, lon, tz_name, elevation)
        yield record


def write_records(records: Iterator[Dict[str, object]], out: TextIO) -> tuple[int, int]:
    """Write JSON lines; return (written, unavailable)."""

    written = unavailable = 0
    for record in records:
        out.write(json.dumps(record, ensure_ascii=False) + "\n")
        written += 1
        if not record["available"]:
            unavailable += 1
    return written, unavailable


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Precompute planetary hours for consecutive local days (JSON lines)."
    )
    parser.add_argument("--lat", required=True, type=float, help="Latitude in decimal degrees.")
    parser.add_argument("--lon", required=True, type=float, help="Longitude in decimal degrees.")
    parser.add_argument("--tz", required=True, help="IANA timezone identifier.")
    parser.add_argument("--start", help="First local date YYYY-MM-DD (default: today in --tz).")
    parser.add_argument("--days", type=int, default=7, help="Number of days to compute (default: 7).")
    parser.add_argument("--elevation", type=float, default=0.0, help="Observer elevation in metres.")
    parser.add_argument("--out", help="Output file (default: stdout).")
    parser.add_argument(
        "--ephe",
        help="Optional Swiss Ephemeris directory. Defaults to SWISSEPH_EPHE env or the Moshier ephemeris.",
    )
    args = parser.parse_args()

    if args.days < 1:
        raise SystemExit("--days must be at least 1.")
    if args.ephe:
        set_ephe_path(args.ephe)

    try:
        start = parse_date(args.start) if args.start else local_date(datetime.now(timezone.utc), args.tz)
        records = precompute(start, args.days, args.lat, args.lon, args.tz, args.elevation)
        if args.out:
            out_path = Path(args.out)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            with out_path.open("w", encoding="utf-8") as fh:
                written, unavailable = write_records(records, fh)
        else:
            written, unavailable = write_records(records, sys.stdout)
    except PlanetaryHoursError as exc:
        raise SystemExit(f"Error: {exc}") from exc

    print(f"{written} day(s) computed, {unavailable} unavailable", file=sys.stderr)


if __name__ == "__main__":
    main()
