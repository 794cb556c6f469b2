"""In-process memoization of calculation outcomes."""

from __future__ import annotations

import threading
from datetime import date
from typing import Dict, List

from .models import CalculationOutcome


def _fixed(value: float, places: int) -> str:
    # round() first so values that print as zero become +0.0 rather than -0.0.
    return f"{round(value, places) + 0.0:.{places}f}"


def make_cache_key(local_date: date, latitude: float, longitude: float, tz_name: str, elevation: float = 0.0) -> str:
    """
    Normalised key for one planetary day at one place.

    Coordinates are fixed to 4 decimals (about 10 m), so requests that only
    differ below that precision share an entry.
    """
    key = f"{local_date.isoformat()}_{_fixed(latitude, 4)}_{_fixed(longitude, 4)}_{tz_name}"
    elev = _fixed(elevation, 1)
    if float(elev):
        key += f"_{elev}"
    return key


class ScheduleCache:
    """
    Thread-safe map of cache key to calculation outcome.

    There is no expiry or size limit: outcomes are deterministic, and callers
    decide when to drop them with ``clear``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: Dict[str, CalculationOutcome] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> CalculationOutcome | None:
        with self._lock:
            outcome = self._store.get(key)
            if outcome is None:
                self.misses += 1
            else:
                self.hits += 1
            return outcome

    def set(self, key: str, outcome: CalculationOutcome) -> None:
        with self._lock:
            self._store[key] = outcome

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self.hits = 0
            self.misses = 0

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._store)

    def stats(self) -> Dict[str, object]:
        with self._lock:
            return {
                "size": len(self._store),
                "hits": self.hits,
                "misses": self.misses,
                "keys": list(self._store),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store
