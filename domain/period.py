"""
Domain: reporting periods and named date ranges.

Rules implemented here:
- A Period is a closed range of calendar dates [start_date, end_date].
- Window lengths are inclusive of both endpoints:
  - today:                 start = end
  - week / last7days:      start = end - 6 days   (7 days)
  - month / last30days:    start = end - 29 days  (30 days)
  - last90days:            start = end - 89 days  (90 days)
  - thisYear:              start = January 1 of the evaluation year
- Every period has a previous period of identical length that ends the day
  before it starts. The two never overlap.

Day boundaries follow the caller's local timezone, which must be passed in
explicitly; this module never reads configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Optional

from .time import parse_iso_date


class PeriodToken(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    LAST_7_DAYS = "last7days"
    LAST_30_DAYS = "last30days"
    LAST_90_DAYS = "last90days"
    THIS_YEAR = "thisYear"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    PeriodToken.TODAY: "Today",
    PeriodToken.WEEK: "This Week",
    PeriodToken.MONTH: "This Month",
    PeriodToken.LAST_7_DAYS: "Last 7 Days",
    PeriodToken.LAST_30_DAYS: "Last 30 Days",
    PeriodToken.LAST_90_DAYS: "Last 90 Days",
    PeriodToken.THIS_YEAR: "This Year",
}

# Days subtracted from the end date to get the start date.
_LOOKBACK_DAYS = {
    PeriodToken.TODAY: 0,
    PeriodToken.WEEK: 6,
    PeriodToken.LAST_7_DAYS: 6,
    PeriodToken.MONTH: 29,
    PeriodToken.LAST_30_DAYS: 29,
    PeriodToken.LAST_90_DAYS: 89,
}


@dataclass(frozen=True, slots=True)
class Period:
    """
    Inclusive calendar-date range used as an aggregation window.
    """

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if isinstance(self.start_date, datetime) or isinstance(self.end_date, datetime):
            raise TypeError("Period bounds must be calendar dates, not datetimes")
        if self.start_date > self.end_date:
            raise ValueError(
                f"start_date must be <= end_date (got {self.start_date} > {self.end_date})"
            )

    @property
    def days(self) -> int:
        """Number of calendar days in the period, both endpoints included."""

        return (self.end_date - self.start_date).days + 1

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def previous(self) -> "Period":
        """The adjacent, equally long period immediately before this one."""

        previous_end = self.start_date - timedelta(days=1)
        previous_start = previous_end - timedelta(days=self.days - 1)
        return Period(start_date=previous_start, end_date=previous_end)

    def iter_days(self):
        day = self.start_date
        while day <= self.end_date:
            yield day
            day += timedelta(days=1)

    def to_dict(self) -> dict[str, str]:
        return {"start_date": self.start_date.isoformat(), "end_date": self.end_date.isoformat()}


def evaluation_date(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> date:
    """
    The local calendar date of `now` (defaults to the current instant).

    A naive `now` is taken to already be local time.
    """

    if now is None:
        now = datetime.now(timezone.utc)
    if now.tzinfo is None or tz is None:
        return now.date()
    return now.astimezone(tz).date()


def resolve_period(
    token: PeriodToken | str,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> Period:
    """
    Convert a named period token into concrete calendar bounds.

    Raises:
        ValueError: for an unknown token
    """

    try:
        token = PeriodToken(token)
    except ValueError:
        allowed = ", ".join(t.value for t in PeriodToken)
        raise ValueError(f"Unknown period {token!r}. Expected one of: {allowed}")

    end = evaluation_date(now, tz)
    if token is PeriodToken.THIS_YEAR:
        return Period(start_date=date(end.year, 1, 1), end_date=end)
    return Period(start_date=end - timedelta(days=_LOOKBACK_DAYS[token]), end_date=end)


def resolve_period_pair(
    token: PeriodToken | str,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> tuple[Period, Period]:
    """Return (current, previous) for a named period."""

    current = resolve_period(token, now=now, tz=tz)
    return current, current.previous()


def custom_period(start: date | str, end: date | str) -> Period:
    """Build a Period from explicit bounds given as dates or ISO strings."""

    return Period(
        start_date=parse_iso_date("start_date", start),
        end_date=parse_iso_date("end_date", end),
    )


__all__ = [
    "PeriodToken",
    "Period",
    "evaluation_date",
    "resolve_period",
    "resolve_period_pair",
    "custom_period",
]
