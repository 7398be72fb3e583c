"""Time-related helpers.

This module centralizes helpers for obtaining timestamps in UTC.  Returning
timestamps through a single function guarantees that the format stays
consistent across the entire application, and gives tests a single seam to
patch when they need to move the clock.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as an aware ``datetime`` instance."""

    return datetime.now(timezone.utc)


def utc_now_isoformat() -> str:
    """Return the current UTC time in ISO 8601 format ending with ``Z``."""

    return utc_now().isoformat().replace("+00:00", "Z")


def utc_now_millis() -> int:
    """Return the number of milliseconds since the Unix epoch."""

    return time.time_ns() // 1_000_000


def utc_start_of_day(value: datetime | None = None) -> datetime:
    """Return midnight (UTC) of the day containing *value*."""

    current = value or utc_now()
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    current = current.astimezone(timezone.utc)
    return current.replace(hour=0, minute=0, second=0, microsecond=0)


def isoformat_z(value: datetime | None) -> str | None:
    """Serialize *value* as ISO 8601 UTC with a trailing ``Z``."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
