"""Calculation service: validate input, compute sun events, build and memoize schedules."""

from __future__ import annotations

import logging
import math
import time
from datetime import date, datetime, timedelta, timezone
from typing import Tuple

from .cache import ScheduleCache, make_cache_key
from .errors import InvalidInputError
from .models import CalculationOutcome, CalculationResult, PlanetaryHour, Success, Unavailable
from .scheduler import build_schedule, get_current_hour
from .sun_events import compute_sun_events
from .timezones import local_date, parse_date, parse_instant, resolve_timezone, to_utc

logger = logging.getLogger(__name__)

DateInput = date | datetime | str


def _finite_number(value: object, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return number


def validate_coordinates(latitude: object, longitude: object) -> Tuple[float, float]:
    """Return (lat, lon) as floats; out-of-range values are rejected, never clamped."""
    lat = _finite_number(latitude, "latitude")
    lon = _finite_number(longitude, "longitude")
    if not -90.0 <= lat <= 90.0:
        raise InvalidInputError(f"latitude must be within [-90, 90], got {lat}")
    if not -180.0 <= lon <= 180.0:
        raise InvalidInputError(f"longitude must be within [-180, 180], got {lon}")
    return lat, lon


def resolve_local_date(when: DateInput, tz_name: str) -> date:
    """
    Local calendar date a request refers to.

    A ``date`` is taken as-is; an aware ``datetime`` is projected into
    ``tz_name``. Strings may hold either form in ISO-8601.
    """
    if isinstance(when, str):
        when = parse_date(when) if len(when.strip()) == 10 else parse_instant(when)
    if isinstance(when, datetime):
        return local_date(when, tz_name)
    if isinstance(when, date):
        return when
    raise InvalidInputError(f"Expected a date, datetime or ISO string, got {when!r}")


class PlanetaryHoursCalculator:
    """Compose sun-event search and scheduling behind a memoization cache."""

    def __init__(self, cache: ScheduleCache | None = None) -> None:
        self.cache = cache if cache is not None else ScheduleCache()

    def calculate(
        self,
        when: DateInput,
        latitude: float,
        longitude: float,
        tz_name: str,
        elevation: float = 0.0,
    ) -> CalculationOutcome:
        """
        Planetary hours for the local day of ``when`` at a location.

        Returns Success or Unavailable. Invalid coordinates, timezone or date
        raise InvalidInputError.
        """

        latitude, longitude = validate_coordinates(latitude, longitude)
        elevation = _finite_number(elevation, "elevation")
        resolve_timezone(tz_name)
        day = resolve_local_date(when, tz_name)

        key = make_cache_key(day, latitude, longitude, tz_name, elevation)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Schedule cache hit: %s", key)
            return cached

        started = time.perf_counter()
        events = compute_sun_events(day, latitude, longitude, tz_name, elevation)
        if isinstance(events, Unavailable):
            outcome: CalculationOutcome = events
        else:
            outcome = Success(
                build_schedule(
                    events.sunrise,
                    events.sunset,
                    events.next_sunrise,
                    day,
                    tz_name,
                    latitude=latitude,
                    longitude=longitude,
                    elevation=elevation,
                )
            )
        self.cache.set(key, outcome)
        logger.info(
            "Computed planetary hours %s in %.1f ms (available=%s)",
            key,
            (time.perf_counter() - started) * 1000.0,
            outcome.available,
        )
        return outcome

    def calculate_for_instant(
        self,
        instant: datetime,
        latitude: float,
        longitude: float,
        tz_name: str,
        elevation: float = 0.0,
    ) -> CalculationOutcome:
        """
        Planetary day whose schedule contains ``instant``.

        Before sunrise the previous local day's night hours are still running,
        so that day's schedule is returned instead. After the next sunrise
        (possible at high latitudes, where sunrise can move earlier by more
        than the time left before midnight) the following local day is used.
        """

        instant = to_utc(instant)
        outcome = self.calculate(instant, latitude, longitude, tz_name, elevation)
        if not isinstance(outcome, Success):
            return outcome
        day = outcome.result.requested_date
        if instant < outcome.result.sunrise:
            return self.calculate(day - timedelta(days=1), latitude, longitude, tz_name, elevation)
        if instant >= outcome.result.next_sunrise:
            return self.calculate(day + timedelta(days=1), latitude, longitude, tz_name, elevation)
        return outcome

    def get_current_hour(self, result: CalculationResult, instant: datetime | None = None) -> PlanetaryHour | None:
        """Hour containing ``instant`` (defaults to now), or None outside the schedule."""
        return get_current_hour(result, instant or datetime.now(timezone.utc))

    def clear_cache(self) -> None:
        self.cache.clear()


calculator = PlanetaryHoursCalculator()


def calculate(
    when: DateInput,
    latitude: float,
    longitude: float,
    tz_name: str,
    elevation: float = 0.0,
) -> CalculationOutcome:
    """Calculate with the shared module-level calculator."""
    return calculator.calculate(when, latitude, longitude, tz_name, elevation)
