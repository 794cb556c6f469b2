"""Display formatting and Rich rendering of planetary-hour schedules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from io import StringIO
from pathlib import Path
from typing import Dict, List

from rich import box
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from .models import CalculationResult, PlanetaryHour
from .scheduler import get_current_hour
from .timezones import resolve_timezone, timezone_abbreviation, to_utc
from .ttl import TTLPolicy, calculate_dynamic_ttl

TIME_FORMATS = ("12h", "24h")

PLANET_STYLES: Dict[str, str] = {
    "Sun": "bold yellow",
    "Moon": "bright_white",
    "Mercury": "cyan",
    "Venus": "green",
    "Mars": "red",
    "Jupiter": "blue",
    "Saturn": "magenta",
}

PLANET_SYMBOLS: Dict[str, str] = {
    "Sun": "☉",
    "Moon": "☽",
    "Mercury": "☿",
    "Venus": "♀",
    "Mars": "♂",
    "Jupiter": "♃",
    "Saturn": "♄",
}


@dataclass(frozen=True)
class FormattedPlanetaryHour:
    """UI-ready view of one hour."""

    planet: str
    time_range: str
    period: str
    duration_minutes: float
    good_for: str
    avoid: str
    current: bool


def format_time(instant: datetime, tz_name: str, time_format: str = "24h") -> str:
    """Wall-clock time in ``tz_name``: ``HH:MM`` or ``h:MM AM``."""
    if time_format not in TIME_FORMATS:
        raise ValueError(f"time_format must be one of {TIME_FORMATS}, got {time_format!r}")
    local = to_utc(instant).astimezone(resolve_timezone(tz_name))
    if time_format == "24h":
        return f"{local.hour:02d}:{local.minute:02d}"
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{local.hour % 12 or 12}:{local.minute:02d} {suffix}"


def format_time_range(hour: PlanetaryHour, tz_name: str, time_format: str = "24h") -> str:
    return f"{format_time(hour.start, tz_name, time_format)} - {format_time(hour.end, tz_name, time_format)}"


def format_hour(
    hour: PlanetaryHour, tz_name: str, time_format: str = "24h", current: bool = False
) -> FormattedPlanetaryHour:
    return FormattedPlanetaryHour(
        planet=hour.ruler,
        time_range=format_time_range(hour, tz_name, time_format),
        period=hour.period,
        duration_minutes=hour.duration_minutes,
        good_for=hour.good_for,
        avoid=hour.avoid,
        current=current,
    )


def format_hours(
    result: CalculationResult, time_format: str = "24h", now: datetime | None = None
) -> List[FormattedPlanetaryHour]:
    """All 24 hours formatted in the result's timezone, the one containing ``now`` marked current."""
    now = now or datetime.now(timezone.utc)
    current = get_current_hour(result, now)
    return [format_hour(hour, result.timezone, time_format, current=hour == current) for hour in result.hours]


def current_hour_payload(
    result: CalculationResult, time_format: str = "24h", now: datetime | None = None
) -> Dict[str, object]:
    """Current hour, day ruler and sunrise, enough to render a "now" panel."""
    now = now or datetime.now(timezone.utc)
    hour = get_current_hour(result, now)
    return {
        "current_hour": format_hour(hour, result.timezone, time_format, current=True) if hour else None,
        "day_ruler": result.day_ruler,
        "sunrise": result.sunrise,
    }


def _planet_label(name: str, use_symbols: bool = True) -> str:
    style = PLANET_STYLES.get(name, "white")
    symbol = f"{PLANET_SYMBOLS[name]} " if use_symbols and name in PLANET_SYMBOLS else ""
    return f"[{style}]{symbol}{name}[/{style}]"


def render_schedule(
    console: Console,
    result: CalculationResult,
    time_format: str = "24h",
    now: datetime | None = None,
    use_symbols: bool = True,
    policy: TTLPolicy | None = None,
) -> None:
    """Print the summary, the 24 hours and the cache recommendation to ``console``."""
    now = now or datetime.now(timezone.utc)
    tz_name = result.timezone
    current = get_current_hour(result, now)

    summary = Table(title="Planetary day", box=box.MINIMAL, expand=False, padding=(0, 1))
    summary.add_column("Field", justify="right", no_wrap=True)
    summary.add_column("Value", style="cyan", no_wrap=True)
    summary.add_row("Date", f"{result.requested_date.isoformat()} ({result.requested_date.strftime('%A')})")
    summary.add_row("Location", f"{result.latitude:.4f}, {result.longitude:.4f}")
    summary.add_row("Timezone", f"{tz_name} ({timezone_abbreviation(result.sunrise, tz_name)})")
    summary.add_row("Day ruler", _planet_label(result.day_ruler, use_symbols))
    summary.add_row("Sunrise", format_time(result.sunrise, tz_name, time_format))
    summary.add_row("Sunset", format_time(result.sunset, tz_name, time_format))
    summary.add_row("Next sunrise", format_time(result.next_sunrise, tz_name, time_format))
    console.print(summary)

    table = Table(
        title="Planetary hours",
        box=box.MINIMAL_DOUBLE_HEAD,
        expand=False,
        padding=(0, 1),
    )
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Ruler", no_wrap=True)
    table.add_column("Time", no_wrap=True)
    table.add_column("Min", justify="right", no_wrap=True)
    table.add_column("Good for", overflow="fold")

    for hour in result.hours:
        if hour.index == 13:
            table.add_section()
        is_current = hour == current
        marker = "▶ " if is_current and use_symbols else ("> " if is_current else "")
        table.add_row(
            f"{marker}{hour.index:02d}",
            _planet_label(hour.ruler, use_symbols),
            format_time_range(hour, tz_name, time_format),
            f"{hour.duration_minutes:.1f}",
            hour.good_for,
            style="bold reverse" if is_current else ("" if hour.is_day else "dim"),
        )
    console.print(table)

    if current is None:
        console.print("[yellow]The reference time is outside this planetary day.[/yellow]")
    ttl = calculate_dynamic_ttl(result, now, policy)
    note = " (sensitive period)" if ttl.is_sensitive_period else ""
    console.print(f"Recommended cache TTL: {ttl.ttl_seconds}s{note}")


def print_schedule(
    result: CalculationResult, time_format: str = "24h", now: datetime | None = None, policy: TTLPolicy | None = None
) -> None:
    render_schedule(Console(), result, time_format=time_format, now=now, policy=policy)


def export_schedule_html(
    path: str | Path,
    result: CalculationResult,
    time_format: str = "24h",
    now: datetime | None = None,
    policy: TTLPolicy | None = None,
) -> None:
    """Write the rendered schedule to an HTML file."""
    console = Console(record=True, theme=Theme({}), width=110, file=StringIO())
    # Symbols render with uneven widths in browsers.
    render_schedule(console, result, time_format=time_format, now=now, use_symbols=False, policy=policy)
    Path(path).write_text(console.export_html(inline_styles=True), encoding="utf-8")
