"""Logging setup for the command line entry points."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "PLANETARY_HOURS_LOG_LEVEL"


def _coerce_level(value: str | int | None) -> int:
    """
    Level from a name ("debug"), a number ("10") or an int.

    Anything unrecognised falls back to WARNING.
    """
    if value is None:
        return logging.WARNING
    if isinstance(value, int):
        return value
    candidate = value.strip()
    if not candidate:
        return logging.WARNING
    if candidate.isdigit():
        return int(candidate)
    resolved = logging.getLevelName(candidate.upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def configure_logging(level: str | int | None = None) -> int:
    """Route log records through Rich on stderr; returns the effective level."""
    effective = _coerce_level(level if level is not None else os.environ.get(LOG_LEVEL_ENV))
    logging.basicConfig(
        level=effective,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    return effective
