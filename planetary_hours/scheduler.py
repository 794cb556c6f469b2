"""Partition a planetary day into 24 ruled hours and look hours up."""

from __future__ import annotations

from bisect import bisect_right
from datetime import date, datetime
from typing import List

from .models import DAY, NIGHT, CalculationResult, PlanetaryHour
from .rulers import day_ruler_for, hour_rulers
from .timezones import to_utc, truncate_to_millisecond


def _split(start: datetime, end: datetime, parts: int = 12) -> List[datetime]:
    """``parts + 1`` boundaries from start to end; the last one is exactly ``end``."""
    span = end - start
    bounds = [truncate_to_millisecond(start + span * k / parts) for k in range(parts)]
    bounds.append(end)
    return bounds


def build_schedule(
    sunrise: datetime,
    sunset: datetime,
    next_sunrise: datetime,
    local_date: date,
    tz_name: str,
    latitude: float = 0.0,
    longitude: float = 0.0,
    elevation: float = 0.0,
) -> CalculationResult:
    """
    Build the 24-hour schedule of a planetary day.

    Hours 1-12 divide sunrise to sunset, hours 13-24 divide sunset to the next
    sunrise. Hour 1 is ruled by the weekday ruler of ``local_date`` (the date
    as observed in ``tz_name``) and every later hour advances one step in the
    Chaldean order, across the day/night boundary without a break.
    """

    sunrise, sunset, next_sunrise = (to_utc(dt) for dt in (sunrise, sunset, next_sunrise))
    if not sunrise < sunset < next_sunrise:
        raise ValueError(
            f"Sun events out of order: sunrise={sunrise.isoformat()}, "
            f"sunset={sunset.isoformat()}, next_sunrise={next_sunrise.isoformat()}"
        )

    day_ruler = day_ruler_for(local_date)
    rulers = hour_rulers(day_ruler)

    hours: List[PlanetaryHour] = []
    for period, bounds in ((DAY, _split(sunrise, sunset)), (NIGHT, _split(sunset, next_sunrise))):
        for start, end in zip(bounds, bounds[1:]):
            index = len(hours) + 1
            hours.append(PlanetaryHour(index=index, start=start, end=end, ruler=rulers[index - 1], period=period))

    return CalculationResult(
        requested_date=local_date,
        latitude=latitude,
        longitude=longitude,
        timezone=tz_name,
        sunrise=sunrise,
        sunset=sunset,
        next_sunrise=next_sunrise,
        day_ruler=day_ruler,
        hours=tuple(hours),
        elevation=elevation,
    )


def _position(result: CalculationResult, instant: datetime) -> int | None:
    """Zero-based index of the hour containing ``instant``, if any."""
    instant = to_utc(instant)
    idx = bisect_right([hour.start for hour in result.hours], instant) - 1
    if idx < 0 or instant >= result.hours[idx].end:
        return None
    return idx


def get_current_hour(result: CalculationResult, instant: datetime) -> PlanetaryHour | None:
    """
    Hour whose ``[start, end)`` contains ``instant``.

    None when the instant falls before sunrise or at/after the next sunrise:
    the schedule exists but does not cover it.
    """
    idx = _position(result, instant)
    return None if idx is None else result.hours[idx]


def get_next_hour(result: CalculationResult, instant: datetime) -> PlanetaryHour | None:
    """Hour that starts after the one containing ``instant`` (hour 1 before sunrise)."""
    if to_utc(instant) < result.sunrise:
        return result.hours[0]
    idx = _position(result, instant)
    if idx is None or idx + 1 >= len(result.hours):
        return None
    return result.hours[idx + 1]
