"""
Domain: report read models.

Output value objects produced by the aggregation services and consumed by the
API and CLI. Everything here is immutable and free of I/O.

Invariants (enforced by the services that build these objects):
- CategoryShare percentages sum to 100 (within rounding) when the total is
  non-zero, and are all 0 when it is zero.
- A TimeSeries has exactly one bucket per calendar unit of its period, in
  chronological order, zero-filled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional, Tuple
from uuid import UUID

from .money import ZERO
from .period import Period


class Granularity(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


@dataclass(frozen=True, slots=True)
class MetricValue:
    """A metric for the current period and its change against the previous one."""

    value: Decimal
    change_percent: float
    previous_value: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class CategoryShare:
    label: str
    amount: Decimal
    percentage: int
    count: int = 0
    key: Optional[str] = None
    units: Optional[Decimal] = None  # summed quantities, may be fractional

    @property
    def average(self) -> Decimal:
        """Amount per unit when units are tracked, else per counted record (0 when none)."""

        divisor = self.units if self.units is not None else Decimal(self.count)
        if divisor <= 0:
            return ZERO
        return self.amount / divisor


@dataclass(frozen=True, slots=True)
class TrendBucket:
    key: str  # YYYY-MM-DD (daily) or YYYY-MM (monthly)
    label: str
    start_date: date
    value: Decimal


@dataclass(frozen=True, slots=True)
class TimeSeries:
    granularity: Granularity
    buckets: Tuple[TrendBucket, ...]

    @property
    def total(self) -> Decimal:
        return sum((b.value for b in self.buckets), ZERO)

    def __len__(self) -> int:
        return len(self.buckets)


@dataclass(frozen=True, slots=True)
class CommissionStats:
    """Cash-basis view of commissions: what has and has not been paid out."""

    total: Decimal
    paid: Decimal
    unpaid: Decimal
    paid_count: int
    unpaid_count: int

    @property
    def count(self) -> int:
        return self.paid_count + self.unpaid_count


@dataclass(frozen=True, slots=True)
class AppointmentStats:
    total: int
    by_status: Mapping[str, int]
    completion_rate: float

    def count(self, status: str) -> int:
        return self.by_status.get(status, 0)


@dataclass(frozen=True, slots=True)
class FinancialSummary:
    """
    Totals for a single period.

    expenses are accrual-basis: every commission earned in the period counts,
    paid or not.
    """

    revenue: Decimal
    expenses: Decimal
    net_income: Decimal
    profit_margin: float
    sales_count: int
    average_sale: Decimal

    @property
    def is_profit(self) -> bool:
        return self.net_income >= 0


@dataclass(frozen=True, slots=True)
class ReportWarning:
    """A non-fatal problem (typically a failed fetch) that degraded a report."""

    source: str
    message: str


@dataclass(frozen=True, slots=True)
class ProfitLossStatement:
    period: Period
    service_revenue: Decimal
    product_revenue: Decimal
    other_revenue: Decimal
    total_revenue: Decimal
    commission_expenses: Decimal
    other_expenses: Decimal
    total_expenses: Decimal
    gross_profit: Decimal
    net_profit: Decimal
    profit_margin: float


@dataclass(frozen=True, slots=True)
class FinancialReport:
    """
    Everything a financial dashboard renders for one salon and period.
    """

    salon_id: UUID
    period: Period
    previous_period: Period
    current: FinancialSummary
    previous: FinancialSummary
    metrics: Mapping[str, MetricValue]
    payment_methods: Tuple[CategoryShare, ...]
    employee_expenses: Tuple[CategoryShare, ...]
    top_services: Tuple[CategoryShare, ...]
    top_products: Tuple[CategoryShare, ...]
    trend: TimeSeries
    commission_stats: CommissionStats
    appointment_stats: AppointmentStats
    generated_at: datetime
    currency: str
    warnings: Tuple[ReportWarning, ...] = field(default_factory=tuple)

    @property
    def is_degraded(self) -> bool:
        """True when at least one record source failed and was treated as empty."""

        return bool(self.warnings)


__all__ = [
    "Granularity",
    "MetricValue",
    "CategoryShare",
    "TrendBucket",
    "TimeSeries",
    "CommissionStats",
    "AppointmentStats",
    "FinancialSummary",
    "ReportWarning",
    "ProfitLossStatement",
    "FinancialReport",
]
