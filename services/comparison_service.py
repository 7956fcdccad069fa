"""
Comparison and ratio math for financial dashboards.

Every function here returns a finite float. Zero denominators resolve to a
defined value instead of raising or producing NaN/Infinity:

- percent_change(current, previous)
    previous > 0               -> (current - previous) / previous * 100
    previous == 0, current > 0 -> 100
    otherwise                  -> 0

- signed_percent_change(current, previous)   (net income, profit)
    previous != 0              -> (current - previous) / |previous| * 100
    previous == 0              -> +100 / -100 / 0 by the sign of current

These fallbacks are a product rule for what a dashboard displays; keep them
exactly as written.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Union

from domain.money import HUNDRED, ZERO, round_half_up, to_decimal

Number = Union[Decimal, int, float]


def percent_change(current: Number, previous: Number) -> float:
    """Period-over-period change for non-negative metrics (revenue, expenses, counts)."""

    current = to_decimal(current)
    previous = to_decimal(previous)

    if previous > ZERO:
        return float((current - previous) / previous * HUNDRED)
    if current > ZERO:
        return 100.0
    return 0.0


def signed_percent_change(current: Number, previous: Number) -> float:
    """Period-over-period change for metrics that can be negative (net income)."""

    current = to_decimal(current)
    previous = to_decimal(previous)

    if previous != ZERO:
        return float((current - previous) / abs(previous) * HUNDRED)
    if current > ZERO:
        return 100.0
    if current < ZERO:
        return -100.0
    return 0.0


def profit_margin(net_income: Number, revenue: Number) -> float:
    """Net income as a percentage of revenue; 0 when there is no revenue."""

    revenue = to_decimal(revenue)
    if revenue == ZERO:
        return 0.0
    return float(to_decimal(net_income) / revenue * HUNDRED)


def share_percentage(part: Number, total: Number) -> int:
    """Whole-number share of a total (half-up rounding); 0 when the total is 0."""

    total = to_decimal(total)
    if total == ZERO:
        return 0
    return int(round_half_up(to_decimal(part) / total * HUNDRED))


__all__ = ["percent_change", "signed_percent_change", "profit_margin", "share_percentage"]
