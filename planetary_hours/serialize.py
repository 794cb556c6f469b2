"""Plain-record and JSON forms of calculation outcomes."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict

from .errors import InvalidInputError
from .models import CalculationOutcome, CalculationResult, PlanetaryHour, Success, Unavailable
from .timezones import parse_date, parse_instant

NOT_AVAILABLE_MESSAGE = "Planetary hours data is not available for this location/date"


def format_instant(dt: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def hour_to_record(hour: PlanetaryHour) -> Dict[str, Any]:
    return {
        "hourNumberOverall": hour.index,
        "startTime": format_instant(hour.start),
        "endTime": format_instant(hour.end),
        "ruler": hour.ruler,
        "type": hour.period,
        "durationMinutes": hour.duration_minutes,
    }


def to_record(result: CalculationResult) -> Dict[str, Any]:
    return {
        "requestedDate": result.requested_date.isoformat(),
        "latitude": result.latitude,
        "longitude": result.longitude,
        "elevation": result.elevation,
        "timezone": result.timezone,
        "sunrise": format_instant(result.sunrise),
        "sunset": format_instant(result.sunset),
        "nextSunrise": format_instant(result.next_sunrise),
        "dayRuler": result.day_ruler,
        "planetaryHours": [hour_to_record(hour) for hour in result.hours],
    }


def outcome_to_record(outcome: CalculationOutcome) -> Dict[str, Any]:
    """Success becomes the full record; Unavailable a flagged message."""
    if isinstance(outcome, Success):
        return {"available": True, **to_record(outcome.result)}
    record: Dict[str, Any] = {
        "available": False,
        "message": NOT_AVAILABLE_MESSAGE,
        "reason": outcome.reason,
    }
    if outcome.requested_date is not None:
        record["requestedDate"] = outcome.requested_date.isoformat()
    for key in ("latitude", "longitude", "timezone"):
        value = getattr(outcome, key)
        if value is not None:
            record[key] = value
    return record


def from_record(record: Dict[str, Any]) -> CalculationResult:
    """Rebuild a CalculationResult from ``to_record`` output."""
    try:
        hours = tuple(
            PlanetaryHour(
                index=int(item["hourNumberOverall"]),
                start=parse_instant(item["startTime"]),
                end=parse_instant(item["endTime"]),
                ruler=item["ruler"],
                period=item["type"],
            )
            for item in record["planetaryHours"]
        )
        return CalculationResult(
            requested_date=parse_date(record["requestedDate"]),
            latitude=float(record["latitude"]),
            longitude=float(record["longitude"]),
            timezone=record["timezone"],
            sunrise=parse_instant(record["sunrise"]),
            sunset=parse_instant(record["sunset"]),
            next_sunrise=parse_instant(record["nextSunrise"]),
            day_ruler=record["dayRuler"],
            hours=hours,
            elevation=float(record.get("elevation", 0.0)),
        )
    except (KeyError, TypeError) as exc:
        raise InvalidInputError(f"Malformed planetary hours record: {exc}") from exc


def outcome_from_record(record: Dict[str, Any]) -> CalculationOutcome:
    if record.get("available", True):
        return Success(from_record(record))
    return Unavailable(
        reason=record.get("reason", NOT_AVAILABLE_MESSAGE),
        requested_date=parse_date(record["requestedDate"]) if "requestedDate" in record else None,
        latitude=record.get("latitude"),
        longitude=record.get("longitude"),
        timezone=record.get("timezone"),
    )


def to_json(outcome: CalculationOutcome, indent: int | None = None) -> str:
    return json.dumps(outcome_to_record(outcome), indent=indent, ensure_ascii=False)


def from_json(text: str) -> CalculationOutcome:
    return outcome_from_record(json.loads(text))
