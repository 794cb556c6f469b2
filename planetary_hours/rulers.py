"""Chaldean order, weekday rulers and the hour-by-hour rotation."""

from __future__ import annotations

from datetime import date
from typing import Dict, Tuple

CHALDEAN_ORDER: Tuple[str, ...] = (
    "Saturn",
    "Jupiter",
    "Mars",
    "Sun",
    "Venus",
    "Mercury",
    "Moon",
)

# Keyed by date.weekday(): Monday == 0.
DAY_RULERS: Dict[int, str] = {
    0: "Moon",
    1: "Mars",
    2: "Mercury",
    3: "Jupiter",
    4: "Venus",
    5: "Saturn",
    6: "Sun",
}

WEEKDAY_NAMES: Tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

PLANET_ATTRIBUTES: Dict[str, Dict[str, str]] = {
    "Sun": {
        "good_for": "Leadership, success, vitality, authority",
        "avoid": "Humility, staying in the background, passive activities",
    },
    "Moon": {
        "good_for": "Emotions, intuition, domestic matters, public affairs",
        "avoid": "Major decisions, confrontations, risky ventures",
    },
    "Mercury": {
        "good_for": "Communication, learning, writing, trade, travel",
        "avoid": "Silence, isolation, physical labor",
    },
    "Venus": {
        "good_for": "Love, beauty, art, social activities, pleasure",
        "avoid": "Conflict, hard work, isolation",
    },
    "Mars": {
        "good_for": "Energy, courage, action, competition",
        "avoid": "Peace negotiations, gentle activities, meditation",
    },
    "Jupiter": {
        "good_for": "Growth, expansion, abundance, wisdom, finances",
        "avoid": "Restriction, limitation, pessimism",
    },
    "Saturn": {
        "good_for": "Discipline, responsibility, long-term projects",
        "avoid": "New ventures, spontaneity, risk-taking",
    },
}


def advance_ruler(planet: str, steps: int) -> str:
    """Return the planet ``steps`` positions after ``planet`` in Chaldean order."""
    if planet not in CHALDEAN_ORDER:
        raise ValueError(f"Unknown planet: {planet}")
    start_idx = CHALDEAN_ORDER.index(planet)
    return CHALDEAN_ORDER[(start_idx + steps) % len(CHALDEAN_ORDER)]


def day_ruler_for(local_date: date) -> str:
    """Planet ruling the weekday of a local calendar date."""
    return DAY_RULERS[local_date.weekday()]


def hour_rulers(day_ruler: str, count: int = 24) -> Tuple[str, ...]:
    """
    Rulers for hours 1..count of a planetary day.

    Hour 1 is the day ruler; each following hour steps once through the
    Chaldean order, night hours continuing the same sequence.
    """
    return tuple(advance_ruler(day_ruler, hour) for hour in range(count))


PLANETARY_HOUR_TABLE: Dict[str, Tuple[str, ...]] = {
    WEEKDAY_NAMES[weekday]: hour_rulers(ruler) for weekday, ruler in DAY_RULERS.items()
}
