"""Command line entry point for printing a day of planetary hours."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from rich.console import Console

from . import formatters, serialize, sun_events
from .calculator import PlanetaryHoursCalculator
from .errors import PlanetaryHoursError
from .log import configure_logging
from .models import Success
from .timezones import parse_date, parse_instant
from .ttl import TTLPolicy

EXIT_INVALID_INPUT = 1
EXIT_UNAVAILABLE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="planetary-hours",
        description="Print the planetary hours of a day at a location.",
    )
    parser.add_argument("--lat", required=True, type=float, help="Latitude in decimal degrees (north positive).")
    parser.add_argument("--lon", required=True, type=float, help="Longitude in decimal degrees (east positive).")
    parser.add_argument("--tz", required=True, help="IANA timezone identifier, e.g. America/New_York.")
    when = parser.add_mutually_exclusive_group()
    when.add_argument("--date", help="Local calendar date YYYY-MM-DD (defaults to today in --tz).")
    when.add_argument(
        "--at",
        help="ISO-8601 instant; shows the planetary day running at that moment and highlights its hour.",
    )
    parser.add_argument("--elevation", type=float, default=0.0, help="Observer elevation in metres.")
    parser.add_argument("--24h", dest="time_format", action="store_const", const="24h", default="12h",
                        help="Use a 24-hour clock.")
    parser.add_argument("--json", action="store_true", help="Print the schedule as JSON.")
    parser.add_argument("--html", help="Also export the rendered tables to this HTML file.")
    parser.add_argument("--ephe", help="Swiss Ephemeris data directory (overrides SWISSEPH_EPHE).")
    parser.add_argument("--log-level", help="Logging level (overrides PLANETARY_HOURS_LOG_LEVEL).")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    CLI entry point.

    Usage:
        planetary-hours --lat 40.7128 --lon -74.0060 --tz America/New_York --date 2025-06-14
    """

    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    console = Console()

    if args.ephe:
        sun_events.set_ephe_path(str(Path(args.ephe).expanduser()))

    calc = PlanetaryHoursCalculator()
    try:
        policy = TTLPolicy.from_env()
        if args.at:
            now = parse_instant(args.at)
            outcome = calc.calculate_for_instant(now, args.lat, args.lon, args.tz, args.elevation)
        else:
            now = datetime.now(timezone.utc)
            when = parse_date(args.date) if args.date else now
            outcome = calc.calculate(when, args.lat, args.lon, args.tz, args.elevation)
    except (PlanetaryHoursError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return EXIT_INVALID_INPUT

    if args.json:
        print(serialize.to_json(outcome, indent=2))
    elif isinstance(outcome, Success):
        formatters.render_schedule(console, outcome.result, time_format=args.time_format, now=now, policy=policy)
    else:
        console.print(f"[yellow]{serialize.NOT_AVAILABLE_MESSAGE}[/yellow]: {outcome.reason}")

    if not isinstance(outcome, Success):
        return EXIT_UNAVAILABLE

    if args.html:
        html_path = Path(args.html)
        html_path.parent.mkdir(parents=True, exist_ok=True)
        formatters.export_schedule_html(html_path, outcome.result, time_format=args.time_format, now=now, policy=policy)
    return 0


if __name__ == "__main__":
    sys.exit(main())
