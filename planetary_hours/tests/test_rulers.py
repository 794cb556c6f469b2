import unittest
from datetime import date

from planetary_hours.rulers import (
    CHALDEAN_ORDER,
    DAY_RULERS,
    PLANETARY_HOUR_TABLE,
    advance_ruler,
    day_ruler_for,
    hour_rulers,
)


class RulerRotationTest(unittest.TestCase):
    def test_chaldean_order(self) -> None:
        self.assertEqual(
            ("Saturn", "Jupiter", "Mars", "Sun", "Venus", "Mercury", "Moon"),
            CHALDEAN_ORDER,
        )

    def test_advance_wraps_after_seven(self) -> None:
        self.assertEqual("Jupiter", advance_ruler("Saturn", 1))
        self.assertEqual("Saturn", advance_ruler("Moon", 1))
        self.assertEqual("Mars", advance_ruler("Mars", 7))
        self.assertEqual("Moon", advance_ruler("Saturn", -1))

    def test_unknown_planet_rejected(self) -> None:
        with self.assertRaises(ValueError):
            advance_ruler("Pluto", 1)

    def test_weekday_rulers(self) -> None:
        self.assertEqual("Saturn", day_ruler_for(date(2025, 6, 14)))  # Saturday
        self.assertEqual("Sun", day_ruler_for(date(2025, 6, 15)))  # Sunday
        self.assertEqual("Moon", day_ruler_for(date(2025, 6, 16)))
        self.assertEqual("Mercury", day_ruler_for(date(2024, 3, 20)))
        self.assertEqual(set(CHALDEAN_ORDER), set(DAY_RULERS.values()))

    def test_hour_sequence_period_seven(self) -> None:
        for day_ruler in CHALDEAN_ORDER:
            rulers = hour_rulers(day_ruler)
            self.assertEqual(24, len(rulers))
            self.assertEqual(day_ruler, rulers[0])
            for n in range(24 - 7):
                self.assertEqual(rulers[n], rulers[n + 7])

    def test_next_day_ruler_follows_hour_24(self) -> None:
        # Hour 25 of one day is hour 1 of the next: the weekday order falls out of the rotation.
        for weekday, ruler in DAY_RULERS.items():
            self.assertEqual(DAY_RULERS[(weekday + 1) % 7], advance_ruler(ruler, 24))

    def test_named_table(self) -> None:
        self.assertEqual("Sun", PLANETARY_HOUR_TABLE["Sunday"][0])
        self.assertEqual("Saturn", PLANETARY_HOUR_TABLE["Monday"][1])
        self.assertEqual("Mercury", PLANETARY_HOUR_TABLE["Saturday"][12])


if __name__ == "__main__":
    unittest.main()
