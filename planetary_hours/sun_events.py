"""Sunrise and sunset search with Swiss Ephemeris."""

from __future__ import annotations

import logging
import os
import threading
from datetime import date, datetime, timedelta, timezone

import swisseph as swe

from .errors import EphemerisError
from .models import SunEvents, Unavailable
from .timezones import local_day_bounds, truncate_to_millisecond

logger = logging.getLogger(__name__)

EPHE_PATH = os.environ.get("SWISSEPH_EPHE")
J2000_JD = 2451545.0
J2000 = datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc)

# swe_rise_trans status when the body stays above or below the horizon.
CIRCUMPOLAR = -2

# The C library keeps global state (ephemeris path, file handles).
_SWE_LOCK = threading.Lock()
# Directory last handed to swe.set_ephe_path; guarded by _SWE_LOCK.
_APPLIED_PATH: str | None = None


def set_ephe_path(path: str | None) -> None:
    """Override the ephemeris directory used for all Swiss Ephemeris calls."""

    global EPHE_PATH
    EPHE_PATH = path


def ephemeris_flags() -> int:
    """
    Resolve the ephemeris to use.

    With SWISSEPH_EPHE (or set_ephe_path) pointing at data files we use the
    Swiss Ephemeris proper; otherwise the built-in Moshier ephemeris, whose
    accuracy is far below a second for rise and set times.

    Call with _SWE_LOCK held. The library is only pointed at a directory when
    it changes, so data files are not reopened for every search.
    """

    global _APPLIED_PATH
    path = EPHE_PATH or os.environ.get("SWISSEPH_EPHE")
    if not path:
        return swe.FLG_MOSEPH
    if path != _APPLIED_PATH:
        swe.set_ephe_path(path)
        _APPLIED_PATH = path
    return swe.FLG_SWIEPH


def julian_day(dt: datetime) -> float:
    """Convert an aware datetime into a Julian day (UT frame)."""
    dt_utc = dt.astimezone(timezone.utc)
    ut_hour = (
        dt_utc.hour
        + dt_utc.minute / 60.0
        + dt_utc.second / 3600.0
        + dt_utc.microsecond / 3_600_000_000.0
    )
    return swe.julday(dt_utc.year, dt_utc.month, dt_utc.day, ut_hour, swe.GREG_CAL)


def datetime_from_julian_day(jd: float) -> datetime:
    """Aware UTC datetime for a UT Julian day, truncated to milliseconds."""
    return truncate_to_millisecond(J2000 + timedelta(days=jd - J2000_JD))


def _next_crossing(jd: float, event: int, latitude: float, longitude: float, elevation: float) -> float | None:
    """
    UT Julian day of the next sunrise or sunset after ``jd``.

    Returns None when the sun is circumpolar for this search.
    """
    try:
        with _SWE_LOCK:
            flags = ephemeris_flags()
            status, tret = swe.rise_trans(
                jd,
                swe.SUN,
                rsmi=event,
                geopos=(longitude, latitude, elevation),
                flags=flags,
            )
    except swe.Error as exc:
        raise EphemerisError(f"Swiss Ephemeris failed for jd={jd}, lat={latitude}, lon={longitude}: {exc}") from exc

    if status == CIRCUMPOLAR:
        return None
    if status < 0 or not tret:
        raise EphemerisError(f"Failed to compute sun crossing for jd={jd}, lat={latitude}, lon={longitude}")
    return float(tret[0])


def compute_sun_events(
    local_date: date,
    latitude: float,
    longitude: float,
    tz_name: str,
    elevation: float = 0.0,
) -> SunEvents | Unavailable:
    """
    Sunrise and sunset of a local calendar day plus the sunrise that follows.

    The day runs from local midnight to the next local midnight in ``tz_name``.
    Sunrise must fall inside it; the sunset and next sunrise are the first
    crossings after it. If the sun stays up or down (polar day or night), or
    either half of the planetary day would span a full day or more, the result
    is Unavailable.
    """

    start, end = local_day_bounds(local_date, tz_name)
    start_jd = julian_day(start)
    end_jd = julian_day(end)

    def unavailable(reason: str) -> Unavailable:
        logger.info("No sun events for %s at %.4f, %.4f (%s): %s", local_date, latitude, longitude, tz_name, reason)
        return Unavailable(
            reason=reason,
            requested_date=local_date,
            latitude=latitude,
            longitude=longitude,
            timezone=tz_name,
        )

    sunrise_jd = _next_crossing(start_jd, swe.CALC_RISE, latitude, longitude, elevation)
    if sunrise_jd is None:
        return unavailable("the sun does not rise or set on this date (polar day or night)")
    if sunrise_jd >= end_jd:
        return unavailable("the sun does not rise during this local day")

    sunset_jd = _next_crossing(sunrise_jd, swe.CALC_SET, latitude, longitude, elevation)
    if sunset_jd is None or sunset_jd - sunrise_jd >= 1.0:
        return unavailable("the sun does not set within a day of sunrise (polar day)")

    next_sunrise_jd = _next_crossing(sunset_jd, swe.CALC_RISE, latitude, longitude, elevation)
    if next_sunrise_jd is not None and next_sunrise_jd >= end_jd:
        # The next day searches its sunrise from this midnight; repeat that exact
        # search so both days end and begin on the same instant.
        from_midnight = _next_crossing(end_jd, swe.CALC_RISE, latitude, longitude, elevation)
        if from_midnight is not None and from_midnight - next_sunrise_jd < 0.5:
            next_sunrise_jd = from_midnight
    if next_sunrise_jd is None or next_sunrise_jd - sunset_jd >= 1.0:
        return unavailable("the sun does not rise again within a day of sunset (polar night)")

    return SunEvents(
        sunrise=datetime_from_julian_day(sunrise_jd),
        sunset=datetime_from_julian_day(sunset_jd),
        next_sunrise=datetime_from_julian_day(next_sunrise_jd),
    )
