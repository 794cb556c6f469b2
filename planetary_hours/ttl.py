"""
Dynamic cache lifetimes for planetary-hour schedules.

A cached page that shows "the current hour" goes stale the moment that hour
ends, so the recommended TTL follows the time left in the current hour:
generous in the middle of an hour, short just before a transition.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .models import CalculationResult, TTLCalculationResult
from .scheduler import get_current_hour
from .timezones import to_utc

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLANETARY_HOURS_TTL_"


@dataclass(frozen=True)
class TTLPolicy:
    """Tunable thresholds; none of the defaults is load-bearing."""

    safety_margin_seconds: int = 3 * 60  # expire this long before a transition
    sensitive_period_seconds: int = 5 * 60
    sensitive_ttl_seconds: int = 30
    min_ttl_seconds: int = 30
    max_ttl_seconds: int = 2 * 60 * 60
    fallback_ttl_seconds: int = 10 * 60  # used when no hour covers ``now``

    def __post_init__(self) -> None:
        for name in (
            "safety_margin_seconds",
            "sensitive_period_seconds",
            "sensitive_ttl_seconds",
            "min_ttl_seconds",
            "max_ttl_seconds",
            "fallback_ttl_seconds",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.min_ttl_seconds > self.max_ttl_seconds:
            raise ValueError("min_ttl_seconds must not exceed max_ttl_seconds")
        # Otherwise the TTL could jump up when ``now`` enters the sensitive period.
        if self.sensitive_ttl_seconds > self.min_ttl_seconds:
            raise ValueError("sensitive_ttl_seconds must not exceed min_ttl_seconds")

    @property
    def sensitive_period_ms(self) -> int:
        return self.sensitive_period_seconds * 1000

    @property
    def safety_margin_ms(self) -> int:
        return self.safety_margin_seconds * 1000

    @classmethod
    def from_env(cls) -> "TTLPolicy":
        """Defaults overridden by PLANETARY_HOURS_TTL_<FIELD> variables (integer seconds)."""
        overrides = {}
        for name in cls.__dataclass_fields__:
            raw = os.environ.get(ENV_PREFIX + name.upper())
            if raw is None or not raw.strip():
                continue
            try:
                overrides[name] = int(raw)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX + name.upper()} must be an integer, got {raw!r}") from exc
        return cls(**overrides)


DEFAULT_POLICY = TTLPolicy()


def _ttl_for_remaining(remaining_ms: int, policy: TTLPolicy) -> int:
    """
    Non-decreasing in ``remaining_ms``.

    Inside the sensitive period the TTL never exceeds the time left (rounded
    up to the next second), so a cached copy dies with the hour it shows.
    """
    if remaining_ms <= policy.sensitive_period_ms:
        return max(1, min(policy.sensitive_ttl_seconds, math.ceil(remaining_ms / 1000)))
    safe_ms = max(remaining_ms - policy.safety_margin_ms, 0)
    ttl = safe_ms // 1000
    return int(min(max(ttl, policy.min_ttl_seconds), policy.max_ttl_seconds))


def calculate_dynamic_ttl(
    result: CalculationResult,
    now: datetime | None = None,
    policy: TTLPolicy | None = None,
) -> TTLCalculationResult:
    """Recommended TTL for ``result`` as seen at ``now`` (defaults to the current time)."""

    policy = policy or DEFAULT_POLICY
    now = to_utc(now) if now is not None else datetime.now(timezone.utc)

    hour = get_current_hour(result, now)
    if hour is None:
        logger.warning(
            "No planetary hour covers %s (schedule %s - %s); using fallback TTL",
            now.isoformat(),
            result.sunrise.isoformat(),
            result.next_sunrise.isoformat(),
        )
        return TTLCalculationResult(
            ttl_seconds=policy.fallback_ttl_seconds,
            remaining_ms=policy.fallback_ttl_seconds * 1000,
            is_sensitive_period=True,
            next_switch=now + timedelta(seconds=policy.fallback_ttl_seconds),
            current_index=None,
        )

    remaining_ms = (hour.end - now) // timedelta(milliseconds=1)
    ttl = TTLCalculationResult(
        ttl_seconds=_ttl_for_remaining(remaining_ms, policy),
        remaining_ms=remaining_ms,
        is_sensitive_period=remaining_ms <= policy.sensitive_period_ms,
        next_switch=hour.end,
        current_index=hour.index,
    )
    logger.debug(
        "TTL %ss for hour %d (%s), %.1f min remaining, sensitive=%s",
        ttl.ttl_seconds,
        hour.index,
        hour.ruler,
        remaining_ms / 60000.0,
        ttl.is_sensitive_period,
    )
    return ttl


def revalidate_seconds(result: CalculationResult, now: datetime | None = None, policy: TTLPolicy | None = None) -> int:
    """Revalidation interval for incremental static regeneration."""
    return calculate_dynamic_ttl(result, now, policy).ttl_seconds


def cache_control_header(
    result: CalculationResult, now: datetime | None = None, policy: TTLPolicy | None = None
) -> str:
    """Cache-Control value for an HTTP response carrying ``result``."""
    ttl = calculate_dynamic_ttl(result, now, policy)
    max_age = ttl.ttl_seconds
    if ttl.is_sensitive_period:
        return f"public, max-age={max_age}, must-revalidate, stale-while-revalidate=10"
    return f"public, max-age={max_age}, s-maxage={max_age}, stale-while-revalidate=60"


def versioned_cache_key(
    result: CalculationResult,
    now: datetime | None = None,
    *extra: str,
    policy: TTLPolicy | None = None,
) -> str:
    """Cache key that changes at every hour transition."""
    ttl = calculate_dynamic_ttl(result, now, policy)
    switch = int(ttl.next_switch.timestamp())
    return "-".join([result.requested_date.isoformat(), result.timezone, f"switch-{switch}", *extra])
