"""
Domain time utilities (pure).

Centralized timestamp validation and local-calendar helpers.

Records carry UTC timestamps; reports reason in calendar dates of the salon's
local timezone. Conversion between the two happens only here.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces the requirement that record timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def local_date(value: datetime, tz: Optional[tzinfo] = None) -> date:
    """
    Calendar date of a UTC timestamp as seen in `tz`.

    With no tz the UTC calendar date is returned.
    """

    if tz is None:
        return value.date()
    return value.astimezone(tz).date()


def parse_iso_date(name: str, value: date | str) -> date:
    """Accept a date or an ISO `YYYY-MM-DD` string (a datetime is truncated to its date)."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}")
    raise TypeError(f"Unsupported date type for {name}: {type(value)!r}")
