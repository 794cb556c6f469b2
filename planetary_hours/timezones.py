"""
Calendar helpers that resolve local days through IANA zone rules.

Every function takes an explicit timezone name. Nothing here consults the
host's local timezone, so results are identical whichever machine runs them.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidInputError


@lru_cache(maxsize=256)
def resolve_timezone(tz_name: str) -> ZoneInfo:
    """Return the ZoneInfo for ``tz_name`` or raise InvalidInputError."""
    if not isinstance(tz_name, str) or not tz_name.strip():
        raise InvalidInputError("A timezone identifier is required")
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidInputError(f"Unknown timezone identifier: {tz_name!r}") from exc


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise InvalidInputError(f"Datetime must carry a timezone: {dt.isoformat()}")
    return dt


def to_utc(dt: datetime) -> datetime:
    return ensure_aware(dt).astimezone(timezone.utc)


def truncate_to_millisecond(dt: datetime) -> datetime:
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def local_date(instant: datetime, tz_name: str) -> date:
    """Calendar date of an absolute instant as seen in ``tz_name``."""
    return to_utc(instant).astimezone(resolve_timezone(tz_name)).date()


def local_midnight(day: date, tz_name: str) -> datetime:
    """UTC instant of the start of ``day`` in ``tz_name``."""
    return datetime.combine(day, time(0, 0), tzinfo=resolve_timezone(tz_name)).astimezone(timezone.utc)


def local_noon(day: date, tz_name: str) -> datetime:
    return datetime.combine(day, time(12, 0), tzinfo=resolve_timezone(tz_name)).astimezone(timezone.utc)


def local_day_bounds(day: date, tz_name: str) -> tuple[datetime, datetime]:
    """``[midnight, next midnight)`` of a local day, as UTC instants."""
    return local_midnight(day, tz_name), local_midnight(day + timedelta(days=1), tz_name)


def local_weekday(value: date | datetime, tz_name: str) -> int:
    """Weekday (Monday == 0) of a date, or of an instant projected into ``tz_name``."""
    if isinstance(value, datetime):
        return local_date(value, tz_name).weekday()
    return value.weekday()


def parse_date(text: str) -> date:
    """Parse ``YYYY-MM-DD``."""
    try:
        return date.fromisoformat(text.strip())
    except (AttributeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid ISO date string: {text!r}") from exc


def parse_instant(text: str) -> datetime:
    """Parse an ISO-8601 instant; a trailing ``Z`` means UTC and an offset is required."""
    raw = text.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid ISO-8601 instant: {text!r}") from exc
    return to_utc(dt)


def add_days_to_iso_date(text: str, days: int) -> str:
    """Calendar arithmetic on a ``YYYY-MM-DD`` string, free of DST effects."""
    return (parse_date(text) + timedelta(days=days)).isoformat()


def reanchor_date_on_timezone_change(
    selected: datetime, old_tz: str, new_tz: str, base_time: datetime
) -> datetime:
    """
    Move a selected date to the "same day" after the user switches timezone.

    If the selection was "today" in the old zone it follows "today" in the new
    zone; otherwise the calendar date seen in the old zone is kept. Either way
    the result is local noon in the new zone, which keeps UTC round trips from
    shifting the day.
    """
    selected_old = local_date(selected, old_tz)
    today_old = local_date(base_time, old_tz)
    target = local_date(base_time, new_tz) if selected_old == today_old else selected_old
    return local_noon(target, new_tz)


def timezone_abbreviation(instant: datetime, tz_name: str) -> str:
    """Short zone name in effect at ``instant`` (EDT, AEST, +14 ...)."""
    return to_utc(instant).astimezone(resolve_timezone(tz_name)).tzname() or ""
