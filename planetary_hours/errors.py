"""Exception types raised at the calculation boundary."""

from __future__ import annotations


class PlanetaryHoursError(Exception):
    """Base class for every error raised by planetary_hours."""


class InvalidInputError(PlanetaryHoursError, ValueError):
    """Coordinates, timezone or date input that cannot be used as given."""


class EphemerisError(PlanetaryHoursError, RuntimeError):
    """Swiss Ephemeris failed while searching for a rise or set."""
