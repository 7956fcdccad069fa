"""
Tests for `domain/period.py`.

Covers contract rules:
- Each named period resolves to its exact inclusive day count.
- The evaluation date follows the caller's timezone.
- previous() has the same length and ends the day before start.
- Invalid tokens and inverted bounds are rejected.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from domain.period import (
    Period,
    PeriodToken,
    custom_period,
    evaluation_date,
    resolve_period,
    resolve_period_pair,
)

NOW = datetime(2025, 3, 15, 10, 0, 0, tzinfo=timezone.utc)
KIGALI = ZoneInfo("Africa/Kigali")


@pytest.mark.parametrize(
    "token,start,days",
    [
        ("today", date(2025, 3, 15), 1),
        ("week", date(2025, 3, 9), 7),
        ("last7days", date(2025, 3, 9), 7),
        ("month", date(2025, 2, 14), 30),
        ("last30days", date(2025, 2, 14), 30),
        ("last90days", date(2024, 12, 16), 90),
        ("thisYear", date(2025, 1, 1), 74),
    ],
)
def test_resolve_period_windows(token: str, start: date, days: int) -> None:
    """Verify every token ends today and spans its exact number of days."""

    period = resolve_period(token, now=NOW)

    assert period.end_date == date(2025, 3, 15)
    assert period.start_date == start
    assert period.days == days


def test_resolve_period_accepts_enum_members() -> None:
    assert resolve_period(PeriodToken.LAST_90_DAYS, now=NOW) == resolve_period("last90days", now=NOW)


def test_every_period_token_has_a_display_label() -> None:
    assert PeriodToken("last7days").label == "Last 7 Days"
    assert PeriodToken.THIS_YEAR.label == "This Year"
    assert all(token.label for token in PeriodToken)


def test_resolve_period_uses_local_timezone() -> None:
    """Verify 23:30 UTC is already the next day in Kigali (UTC+2)."""

    late = datetime(2025, 3, 15, 23, 30, tzinfo=timezone.utc)

    assert resolve_period("today", now=late).end_date == date(2025, 3, 15)
    assert resolve_period("today", now=late, tz=KIGALI).end_date == date(2025, 3, 16)


def test_evaluation_date_with_naive_now_is_taken_as_local() -> None:
    assert evaluation_date(datetime(2025, 3, 15, 23, 30), tz=KIGALI) == date(2025, 3, 15)


def test_resolve_period_rejects_unknown_token() -> None:
    with pytest.raises(ValueError):
        resolve_period("fortnight", now=NOW)


def test_previous_period_is_adjacent_and_equal_length() -> None:
    """Verify previous() ends the day before start and keeps the length."""

    period = Period(start_date=date(2025, 3, 1), end_date=date(2025, 3, 10))
    previous = period.previous()

    assert previous == Period(start_date=date(2025, 2, 19), end_date=date(2025, 2, 28))
    assert previous.days == period.days


@pytest.mark.parametrize("token", [t.value for t in PeriodToken])
def test_resolve_period_pair_never_overlaps(token: str) -> None:
    current, previous = resolve_period_pair(token, now=NOW)

    assert previous.end_date < current.start_date
    assert (current.start_date - previous.end_date).days == 1
    assert previous.days == current.days


def test_custom_period_from_iso_strings() -> None:
    period = custom_period("2025-01-01", "2025-01-31")

    assert period.start_date == date(2025, 1, 1)
    assert period.days == 31


def test_custom_period_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError):
        custom_period("2025-02-01", "2025-01-31")


def test_custom_period_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        custom_period("yesterday", "2025-01-31")


def test_period_rejects_datetimes() -> None:
    with pytest.raises(TypeError):
        Period(start_date=datetime(2025, 1, 1, tzinfo=timezone.utc), end_date=date(2025, 1, 2))


def test_period_contains_is_inclusive() -> None:
    period = Period(start_date=date(2025, 3, 1), end_date=date(2025, 3, 3))

    assert period.contains(date(2025, 3, 1))
    assert period.contains(date(2025, 3, 3))
    assert not period.contains(date(2025, 3, 4))
    assert list(period.iter_days()) == [date(2025, 3, 1), date(2025, 3, 2), date(2025, 3, 3)]
