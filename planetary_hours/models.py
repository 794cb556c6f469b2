"""Dataclasses that capture sun events, planetary hours and calculation outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union

from .rulers import PLANET_ATTRIBUTES

DAY = "day"
NIGHT = "night"


@dataclass(frozen=True)
class SunEvents:
    """Sunrise, sunset and the following sunrise as aware UTC datetimes."""

    sunrise: datetime
    sunset: datetime
    next_sunrise: datetime


@dataclass(frozen=True)
class PlanetaryHour:
    """One of the 24 unequal hours, half-open on ``[start, end)``."""

    index: int  # 1-24 across the whole planetary day
    start: datetime
    end: datetime
    ruler: str
    period: str  # "day" or "night"

    @property
    def is_day(self) -> bool:
        return self.period == DAY

    @property
    def number_in_period(self) -> int:
        """1-12 within the day or night half."""
        return self.index if self.index <= 12 else self.index - 12

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_minutes(self) -> float:
        return round(self.duration.total_seconds() / 60.0, 2)

    @property
    def good_for(self) -> str:
        return PLANET_ATTRIBUTES[self.ruler]["good_for"]

    @property
    def avoid(self) -> str:
        return PLANET_ATTRIBUTES[self.ruler]["avoid"]

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass(frozen=True)
class CalculationResult:
    """Complete schedule for one planetary day at one location."""

    requested_date: date  # local calendar date in ``timezone``
    latitude: float
    longitude: float
    timezone: str
    sunrise: datetime
    sunset: datetime
    next_sunrise: datetime
    day_ruler: str
    hours: tuple[PlanetaryHour, ...]
    elevation: float = 0.0

    @property
    def day_hours(self) -> tuple[PlanetaryHour, ...]:
        return self.hours[:12]

    @property
    def night_hours(self) -> tuple[PlanetaryHour, ...]:
        return self.hours[12:]

    @property
    def day_hour_length(self) -> timedelta:
        return (self.sunset - self.sunrise) / 12

    @property
    def night_hour_length(self) -> timedelta:
        return (self.next_sunrise - self.sunset) / 12


@dataclass(frozen=True)
class Success:
    """A schedule could be produced."""

    result: CalculationResult

    @property
    def available(self) -> bool:
        return True


@dataclass(frozen=True)
class Unavailable:
    """
    No schedule exists for this date and location.

    Returned, never raised: the sun does not cross the horizon inside the
    window (polar day or polar night). Callers should show a "not available"
    message instead of retrying.
    """

    reason: str
    requested_date: date | None = None
    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None

    @property
    def available(self) -> bool:
        return False


CalculationOutcome = Union[Success, Unavailable]


@dataclass(frozen=True)
class TTLCalculationResult:
    """Recommended cache lifetime for a schedule at a reference instant."""

    ttl_seconds: int
    remaining_ms: int
    is_sensitive_period: bool
    next_switch: datetime
    current_index: int | None  # ordinal of the hour containing ``now``
