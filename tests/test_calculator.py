from __future__ import annotations

import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone

import pytest

from planetary_hours.calculator import PlanetaryHoursCalculator, resolve_local_date
from planetary_hours.errors import InvalidInputError
from planetary_hours.models import Success, SunEvents, Unavailable
from planetary_hours.timezones import local_noon

LOCATIONS = {
    "new_york": (40.7128, -74.0060, "America/New_York"),
    "sydney": (-33.8688, 151.2093, "Australia/Sydney"),
    "kiritimati": (1.87, -157.36, "Pacific/Kiritimati"),
    "honolulu": (21.3069, -157.8583, "Pacific/Honolulu"),
}


@pytest.fixture
def calc():
    return PlanetaryHoursCalculator()


@pytest.mark.parametrize("name", sorted(LOCATIONS))
def test_saturday_is_ruled_by_saturn_everywhere(calc, name):
    lat, lon, tz = LOCATIONS[name]
    outcome = calc.calculate(date(2025, 6, 14), lat, lon, tz)
    assert isinstance(outcome, Success)
    result = outcome.result
    assert result.day_ruler == "Saturn"
    assert result.hours[0].ruler == "Saturn"
    assert len(result.hours) == 24
    assert result.hours[0].start == result.sunrise
    assert result.hours[-1].end == result.next_sunrise

    # The same local day requested as an instant at local noon.
    by_instant = calc.calculate(local_noon(date(2025, 6, 14), tz), lat, lon, tz)
    assert by_instant is outcome


@pytest.mark.parametrize("name", sorted(LOCATIONS))
def test_sunday_is_ruled_by_the_sun(calc, name):
    lat, lon, tz = LOCATIONS[name]
    outcome = calc.calculate("2025-06-15", lat, lon, tz)
    assert outcome.result.day_ruler == "Sun"


def test_one_instant_can_be_two_weekdays(calc):
    instant = datetime(2025, 6, 14, 12, 0, tzinfo=timezone.utc)
    rulers = {
        name: calc.calculate(instant, lat, lon, tz).result.day_ruler
        for name, (lat, lon, tz) in LOCATIONS.items()
    }
    assert rulers == {"new_york": "Saturn", "sydney": "Saturn", "kiritimati": "Sun", "honolulu": "Saturn"}


def test_string_instants_are_projected_into_the_timezone():
    assert resolve_local_date("2025-06-14T12:00:00Z", "Pacific/Kiritimati") == date(2025, 6, 15)
    assert resolve_local_date("2025-06-14", "Pacific/Kiritimati") == date(2025, 6, 14)
    with pytest.raises(InvalidInputError):
        resolve_local_date(20250614, "UTC")


def test_result_properties(calc):
    result = calc.calculate(date(2025, 6, 14), *LOCATIONS["new_york"]).result
    assert result.requested_date == date(2025, 6, 14)
    assert result.timezone == "America/New_York"
    assert result.latitude == pytest.approx(40.7128)
    assert [h.period for h in result.hours] == ["day"] * 12 + ["night"] * 12
    assert result.hours[11].end == result.sunset
    assert result.day_hour_length > timedelta(hours=1) > result.night_hour_length


def test_results_are_cached(calc):
    first = calc.calculate(date(2025, 6, 14), *LOCATIONS["new_york"])
    second = calc.calculate(date(2025, 6, 14), *LOCATIONS["new_york"])
    assert first is second
    assert len(calc.cache) == 1
    assert calc.cache.hits == 1

    # Differences below 4 decimals share a key.
    nearby = calc.calculate(date(2025, 6, 14), 40.71281, -74.00601, "America/New_York")
    assert nearby is first

    calc.clear_cache()
    assert len(calc.cache) == 0
    assert calc.calculate(date(2025, 6, 14), *LOCATIONS["new_york"]) is not first


def test_unavailable_outcomes_are_cached(calc):
    outcome = calc.calculate(date(2025, 6, 21), 82.5018, -62.3481, "Etc/GMT+4")
    assert isinstance(outcome, Unavailable)
    assert not outcome.available
    assert calc.calculate(date(2025, 6, 21), 82.5018, -62.3481, "Etc/GMT+4") is outcome


@pytest.mark.parametrize(
    "lat, lon, tz",
    [
        (91.0, 0.0, "UTC"),
        (-90.5, 0.0, "UTC"),
        (0.0, 180.5, "UTC"),
        (float("nan"), 0.0, "UTC"),
        (0.0, float("inf"), "UTC"),
        ("40.7", 0.0, "UTC"),
        (True, 0.0, "UTC"),
        (40.7, -74.0, "Not/AZone"),
        (40.7, -74.0, ""),
    ],
)
def test_invalid_input_raises(calc, lat, lon, tz):
    with pytest.raises(InvalidInputError):
        calc.calculate(date(2025, 6, 14), lat, lon, tz)


def test_invalid_date_raises(calc):
    with pytest.raises(InvalidInputError):
        calc.calculate("2025-02-30", *LOCATIONS["new_york"])
    with pytest.raises(InvalidInputError):
        calc.calculate(datetime(2025, 6, 14, 12, 0), *LOCATIONS["new_york"])


def test_before_sunrise_belongs_to_previous_planetary_day(calc):
    # 04:00 EDT, before the 05:24 sunrise: Friday's night hours are still running.
    instant = datetime(2025, 6, 14, 8, 0, tzinfo=timezone.utc)
    outcome = calc.calculate_for_instant(instant, *LOCATIONS["new_york"])
    result = outcome.result
    assert result.requested_date == date(2025, 6, 13)
    assert result.day_ruler == "Venus"
    hour = calc.get_current_hour(result, instant)
    assert hour is not None
    assert hour.period == "night"
    assert hour.index >= 13


def test_after_sunrise_uses_the_same_day(calc):
    instant = datetime(2025, 6, 14, 16, 0, tzinfo=timezone.utc)
    outcome = calc.calculate_for_instant(instant, *LOCATIONS["new_york"])
    assert outcome.result.requested_date == date(2025, 6, 14)
    assert calc.get_current_hour(outcome.result, instant).period == "day"


def test_concurrent_callers_share_one_result(calc):
    def run(_):
        return calc.calculate(date(2025, 6, 14), *LOCATIONS["sydney"])

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(run, range(32)))

    assert all(isinstance(o, Success) for o in outcomes)
    assert len({o.result for o in outcomes}) == 1
    assert len(calc.cache) == 1


@pytest.mark.parametrize("name", ["new_york", "sydney"])
def test_every_instant_around_sunrise_is_covered(calc, name):
    lat, lon, tz = LOCATIONS[name]
    for offset in range(0, 60, 7):
        day = date(2025, 1, 1) + timedelta(days=offset)
        sunrise = calc.calculate(day, lat, lon, tz).result.sunrise
        for instant in (sunrise - timedelta(milliseconds=1), sunrise, sunrise + timedelta(milliseconds=1)):
            result = calc.calculate_for_instant(instant, lat, lon, tz).result
            hour = calc.get_current_hour(result, instant)
            assert hour is not None, (name, day, instant)
            expected_day = day - timedelta(days=1) if instant < sunrise else day
            assert result.requested_date == expected_day
            assert hour.index == (24 if instant < sunrise else 1)


def test_reykjavik_winter_instants_are_covered(calc):
    lat, lon, tz = 64.1466, -21.9426, "Atlantic/Reykjavik"
    for offset in range(10):
        day = date(2025, 1, 1) + timedelta(days=offset)
        result = calc.calculate(day, lat, lon, tz).result
        for instant in (result.sunrise - timedelta(milliseconds=1), result.next_sunrise - timedelta(milliseconds=1)):
            covering = calc.calculate_for_instant(instant, lat, lon, tz).result
            assert calc.get_current_hour(covering, instant) is not None


def test_instant_after_a_same_day_next_sunrise_moves_forward(calc, monkeypatch):
    # Far north in spring, sunrise can creep earlier by more than the minutes
    # left before midnight: the next sunrise then lands on the same local date.
    day = date(2025, 4, 10)

    def fake_sun_events(local_day, latitude, longitude, tz_name, elevation=0.0):
        midnight = datetime.combine(local_day, datetime.min.time(), tzinfo=timezone.utc)
        if local_day == day:
            return SunEvents(
                sunrise=midnight + timedelta(minutes=20),
                sunset=midnight + timedelta(hours=20),
                next_sunrise=midnight + timedelta(hours=23, minutes=50),
            )
        return SunEvents(
            sunrise=midnight + timedelta(hours=23, minutes=40),
            sunset=midnight + timedelta(days=1, hours=19),
            next_sunrise=midnight + timedelta(days=1, hours=23, minutes=30),
        )

    monkeypatch.setattr(sys.modules["planetary_hours.calculator"], "compute_sun_events", fake_sun_events)

    late = datetime(2025, 4, 10, 23, 45, tzinfo=timezone.utc)
    same_day = calc.calculate_for_instant(late, 69.6492, 18.9553, "UTC").result
    assert same_day.requested_date == day
    assert calc.get_current_hour(same_day, late).index == 24

    after = datetime(2025, 4, 10, 23, 55, tzinfo=timezone.utc)
    following = calc.calculate_for_instant(after, 69.6492, 18.9553, "UTC").result
    assert following.requested_date == date(2025, 4, 11)
    assert following.day_ruler == "Venus"
    # Between two planetary days: the next one has not begun yet.
    assert after < following.sunrise
    assert calc.get_current_hour(following, after) is None
