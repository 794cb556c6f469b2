"""Planetary hours for any date, location and IANA timezone."""

from .cache import ScheduleCache, make_cache_key
from .calculator import PlanetaryHoursCalculator, calculate, calculator, validate_coordinates
from .errors import EphemerisError, InvalidInputError, PlanetaryHoursError
from .models import (
    CalculationOutcome,
    CalculationResult,
    PlanetaryHour,
    Success,
    SunEvents,
    TTLCalculationResult,
    Unavailable,
)
from .rulers import CHALDEAN_ORDER, DAY_RULERS, advance_ruler, day_ruler_for, hour_rulers
from .scheduler import build_schedule, get_current_hour, get_next_hour
from .sun_events import compute_sun_events, set_ephe_path
from .ttl import TTLPolicy, calculate_dynamic_ttl

__all__ = [
    "CHALDEAN_ORDER",
    "DAY_RULERS",
    "CalculationOutcome",
    "CalculationResult",
    "EphemerisError",
    "InvalidInputError",
    "PlanetaryHour",
    "PlanetaryHoursCalculator",
    "PlanetaryHoursError",
    "ScheduleCache",
    "Success",
    "SunEvents",
    "TTLCalculationResult",
    "TTLPolicy",
    "Unavailable",
    "advance_ruler",
    "build_schedule",
    "calculate",
    "calculate_dynamic_ttl",
    "calculator",
    "compute_sun_events",
    "day_ruler_for",
    "get_current_hour",
    "get_next_hour",
    "hour_rulers",
    "make_cache_key",
    "set_ephe_path",
    "validate_coordinates",
]
