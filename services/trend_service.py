"""
Trend service: buckets revenue into a gap-free time series.

Rules:
- Periods of up to 90 calendar days are bucketed per day; longer periods per
  calendar month.
- Daily: one bucket for every day from start_date to end_date inclusive.
- Monthly: one bucket for every calendar month the period touches, partial
  first and last months included.
- Buckets with no sales are present with value 0. The number of buckets
  always equals the number of calendar units in the period.
- A sale belongs to the local calendar day of its created_at timestamp.
  Sales outside the period are ignored.
"""

from __future__ import annotations

from datetime import date, tzinfo
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from domain.money import ZERO
from domain.period import Period
from domain.sale import Sale
from domain.summary import Granularity, TimeSeries, TrendBucket
from domain.time import local_date

DAILY_MAX_DAYS = 90

_MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def choose_granularity(period: Period) -> Granularity:
    return Granularity.DAILY if period.days <= DAILY_MAX_DAYS else Granularity.MONTHLY


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _next_month(day: date) -> date:
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def _iter_months(period: Period) -> Iterable[date]:
    month = _month_start(period.start_date)
    last = _month_start(period.end_date)
    while month <= last:
        yield month
        month = _next_month(month)


def calendar_units(period: Period, granularity: Optional[Granularity] = None) -> int:
    """Number of buckets a series over `period` must have."""

    granularity = granularity or choose_granularity(period)
    if granularity is Granularity.DAILY:
        return period.days
    start, end = period.start_date, period.end_date
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


def bucket_key(day: date, granularity: Granularity) -> str:
    if granularity is Granularity.DAILY:
        return day.isoformat()
    return f"{day.year:04d}-{day.month:02d}"


def bucket_label(day: date, granularity: Granularity) -> str:
    """Short chart label: DD/MM for days, 'Mon YYYY' for months."""

    if granularity is Granularity.DAILY:
        return f"{day.day:02d}/{day.month:02d}"
    return f"{_MONTH_NAMES[day.month - 1]} {day.year}"


def bucketize(
    sales: Iterable[Sale],
    period: Period,
    tz: Optional[tzinfo] = None,
    granularity: Optional[Granularity] = None,
) -> TimeSeries:
    """
    Revenue per calendar unit across the whole period.

    Args:
        sales: Sales to bucket (any range; out-of-period sales are skipped)
        period: Reporting window
        tz: Local timezone for day boundaries (UTC dates when None)
        granularity: Force daily/monthly; chosen from the period length when None

    Returns:
        TimeSeries with exactly calendar_units(period, granularity) buckets
    """

    granularity = granularity or choose_granularity(period)

    totals: Dict[str, Decimal] = {}
    for sale in sales:
        day = local_date(sale.created_at, tz)
        if not period.contains(day):
            continue
        key = bucket_key(day, granularity)
        totals[key] = totals.get(key, ZERO) + sale.total_amount

    starts = period.iter_days() if granularity is Granularity.DAILY else _iter_months(period)
    buckets: List[TrendBucket] = [
        TrendBucket(
            key=bucket_key(start, granularity),
            label=bucket_label(start, granularity),
            start_date=start,
            value=totals.get(bucket_key(start, granularity), ZERO),
        )
        for start in starts
    ]
    return TimeSeries(granularity=granularity, buckets=tuple(buckets))


__all__ = [
    "DAILY_MAX_DAYS",
    "choose_granularity",
    "calendar_units",
    "bucket_key",
    "bucket_label",
    "bucketize",
]
