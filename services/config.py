"""
Report configuration.

Values come from the environment, with a `.env` file at the project root
loaded first. Only the services and entry points read configuration; the
domain and aggregation code receive these values as parameters.

Environment variables:
- REPORT_TIMEZONE: IANA timezone for calendar-day boundaries (default Africa/Kigali)
- REPORT_FETCH_WORKERS: thread pool size for concurrent fetches (default 5)
- REPORT_CURRENCY: currency code reports are expressed in (default RWF)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from domain.money import DEFAULT_CURRENCY

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_TIMEZONE = "Africa/Kigali"
DEFAULT_FETCH_WORKERS = 5


@dataclass(frozen=True, slots=True)
class ReportSettings:
    timezone: ZoneInfo
    fetch_workers: int
    currency: str


def load_settings() -> ReportSettings:
    """
    Read report settings from the environment.

    Raises:
        RuntimeError: if REPORT_TIMEZONE is not a known timezone or
            REPORT_FETCH_WORKERS is not a positive integer
    """

    tz_name = os.getenv("REPORT_TIMEZONE") or DEFAULT_TIMEZONE
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise RuntimeError(
            f"Invalid REPORT_TIMEZONE: {tz_name!r}. Use an IANA name such as 'Africa/Kigali'."
        )

    raw_workers = os.getenv("REPORT_FETCH_WORKERS") or str(DEFAULT_FETCH_WORKERS)
    try:
        workers = int(raw_workers)
    except ValueError:
        workers = 0
    if workers < 1:
        raise RuntimeError(f"REPORT_FETCH_WORKERS must be a positive integer, got {raw_workers!r}")

    return ReportSettings(
        timezone=tz,
        fetch_workers=workers,
        currency=(os.getenv("REPORT_CURRENCY") or DEFAULT_CURRENCY).upper(),
    )


__all__ = ["ReportSettings", "load_settings", "DEFAULT_TIMEZONE", "DEFAULT_FETCH_WORKERS"]
