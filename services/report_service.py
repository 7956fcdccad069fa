"""
Report service: fetch-then-aggregate pipeline for salon financial reports.

Handles:
- Resolving the salon a report is about (explicit id, or the owner's first salon)
- Issuing the independent record fetches concurrently and joining them
- Degrading gracefully: a failed fetch becomes an empty list plus a warning
- Assembling summaries, breakdowns, trends and period-over-period changes

The only fatal condition is the absence of a salon. Every other failure is
reported on the result, never raised.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple
from uuid import UUID

from domain.appointment import Appointment
from domain.commission import Commission, CommissionFilters
from domain.money import DEFAULT_CURRENCY, ZERO
from domain.period import Period
from domain.sale import ItemKind, Sale
from domain.summary import (
    CategoryShare,
    CommissionStats,
    FinancialReport,
    MetricValue,
    ProfitLossStatement,
    ReportWarning,
)
from services import aggregation_service as aggregation
from services.commission_ledger_service import CommissionGroup, GroupBy, group_commissions
from services.comparison_service import percent_change, signed_percent_change
from services.trend_service import bucketize

logger = logging.getLogger(__name__)

TOP_ITEMS_LIMIT = 10
_CANCEL_POLL_SECONDS = 0.05


class NoSalonAvailableError(Exception):
    """Raised when a report has no salon to be about."""

    def __init__(self, message: str = "No salon available") -> None:
        super().__init__(message)


class ReportCancelledError(Exception):
    """Raised when the caller cancelled a report while its fetches were in flight."""


class RecordSource(Protocol):
    """Where raw records come from (Supabase in production, fakes in tests)."""

    def fetch_sales(self, salon_id: UUID, start_date: date, end_date: date) -> List[Sale]: ...

    def fetch_commissions(self, filters: CommissionFilters) -> List[Commission]: ...

    def fetch_appointments(self, salon_id: UUID) -> List[Appointment]: ...

    def resolve_salon_id(self, owner_id: UUID) -> Optional[UUID]: ...


@dataclass(frozen=True, slots=True)
class ExpenseBreakdown:
    salon_id: UUID
    period: Period
    total: Decimal
    categories: Tuple[CategoryShare, ...]
    commission_stats: CommissionStats
    warnings: Tuple[ReportWarning, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class RevenueBreakdown:
    salon_id: UUID
    period: Period
    total_revenue: Decimal
    service_revenue: Decimal
    product_revenue: Decimal
    services: Tuple[CategoryShare, ...]
    products: Tuple[CategoryShare, ...]
    warnings: Tuple[ReportWarning, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class ProfitLossReport:
    salon_id: UUID
    statement: ProfitLossStatement
    warnings: Tuple[ReportWarning, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class CommissionOverview:
    filters: CommissionFilters
    stats: CommissionStats
    groups: Tuple[CommissionGroup, ...]
    warnings: Tuple[ReportWarning, ...] = field(default_factory=tuple)


class ReportService:
    """
    Builds reports from a RecordSource.

    Stateless between calls: every report re-runs the full fetch-then-aggregate
    pipeline. Safe to share across threads.
    """

    def __init__(
        self,
        source: RecordSource,
        tz: Optional[tzinfo] = None,
        max_workers: int = 5,
        currency: str = DEFAULT_CURRENCY,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._source = source
        self._tz = tz
        self._max_workers = max_workers
        self._currency = currency
        self._clock = clock

    # ------------------------------------------------------------------
    # Salon resolution
    # ------------------------------------------------------------------

    def resolve_salon(self, salon_id: Optional[UUID], owner_id: Optional[UUID] = None) -> UUID:
        """
        Decide which salon a report is about.

        Raises:
            NoSalonAvailableError: if neither a salon id nor an owner with a salon is given
        """

        if salon_id is not None:
            return salon_id
        if owner_id is not None:
            try:
                resolved = self._source.resolve_salon_id(owner_id)
            except Exception as e:
                logger.warning(
                    "Salon lookup failed",
                    extra={"owner_id": str(owner_id), "error": str(e)},
                )
                raise NoSalonAvailableError() from e
            if resolved is not None:
                return resolved
        raise NoSalonAvailableError()

    # ------------------------------------------------------------------
    # Concurrent fetching
    # ------------------------------------------------------------------

    def _fetch_all(
        self,
        jobs: Dict[str, Callable[[], Sequence[Any]]],
        cancel_event: Optional[threading.Event] = None,
        context: Optional[Dict[str, str]] = None,
    ) -> Tuple[Dict[str, list], Tuple[ReportWarning, ...]]:
        """
        Run independent fetch jobs concurrently and join them.

        Each job that raises is replaced by an empty list and produces a
        warning. Warnings come back in job order.

        Raises:
            ReportCancelledError: if cancel_event is set before all jobs finish
        """

        results: Dict[str, list] = {}
        errors: Dict[str, str] = {}
        pool = ThreadPoolExecutor(max_workers=self._max_workers)
        cancelled = False
        try:
            futures: Dict[Future, str] = {pool.submit(job): name for name, job in jobs.items()}
            pending = set(futures)
            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    cancelled = True
                    raise ReportCancelledError("Report cancelled before fetches completed")
                done, pending = wait(pending, timeout=_CANCEL_POLL_SECONDS, return_when=FIRST_COMPLETED)
                for future in done:
                    name = futures[future]
                    try:
                        results[name] = list(future.result())
                    except Exception as e:
                        logger.warning(
                            f"Fetch of '{name}' failed; continuing with empty data",
                            extra={"source": name, "error": str(e), **(context or {})},
                        )
                        results[name] = []
                        errors[name] = str(e) or type(e).__name__
        finally:
            pool.shutdown(wait=not cancelled, cancel_futures=cancelled)

        warnings = tuple(
            ReportWarning(source=name, message=errors[name]) for name in jobs if name in errors
        )
        return results, warnings

    def _commission_filters(self, salon_id: UUID, period: Period) -> CommissionFilters:
        return CommissionFilters(salon_id=salon_id, start_date=period.start_date, end_date=period.end_date)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def build_financial_report(
        self,
        period: Period,
        salon_id: Optional[UUID] = None,
        owner_id: Optional[UUID] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> FinancialReport:
        """
        Full financial dashboard for a salon: current vs previous period.

        Fetches (concurrently): current and previous sales, current and
        previous commissions, and appointments.

        Raises:
            NoSalonAvailableError: no salon context
            ReportCancelledError: cancel_event was set while fetching
        """

        salon = self.resolve_salon(salon_id, owner_id)
        previous_period = period.previous()
        source = self._source

        logger.info(
            "Building financial report",
            extra={"salon_id": str(salon), **period.to_dict()},
        )

        records, warnings = self._fetch_all(
            {
                "sales": lambda: source.fetch_sales(salon, period.start_date, period.end_date),
                "previous_sales": lambda: source.fetch_sales(
                    salon, previous_period.start_date, previous_period.end_date
                ),
                "commissions": lambda: source.fetch_commissions(self._commission_filters(salon, period)),
                "previous_commissions": lambda: source.fetch_commissions(
                    self._commission_filters(salon, previous_period)
                ),
                "appointments": lambda: source.fetch_appointments(salon),
            },
            cancel_event=cancel_event,
            context={"salon_id": str(salon)},
        )

        sales: List[Sale] = records["sales"]
        commissions: List[Commission] = records["commissions"]

        current = aggregation.aggregate(sales, commissions)
        previous = aggregation.aggregate(records["previous_sales"], records["previous_commissions"])

        metrics = {
            "revenue": MetricValue(
                value=current.revenue,
                change_percent=percent_change(current.revenue, previous.revenue),
                previous_value=previous.revenue,
            ),
            "expenses": MetricValue(
                value=current.expenses,
                change_percent=percent_change(current.expenses, previous.expenses),
                previous_value=previous.expenses,
            ),
            "net_income": MetricValue(
                value=current.net_income,
                change_percent=signed_percent_change(current.net_income, previous.net_income),
                previous_value=previous.net_income,
            ),
            "sales_count": MetricValue(
                value=Decimal(current.sales_count),
                change_percent=percent_change(current.sales_count, previous.sales_count),
                previous_value=Decimal(previous.sales_count),
            ),
            "average_sale": MetricValue(
                value=current.average_sale,
                change_percent=percent_change(current.average_sale, previous.average_sale),
                previous_value=previous.average_sale,
            ),
        }

        if warnings:
            logger.warning(
                "Financial report built on partial data",
                extra={"salon_id": str(salon), "failed_sources": [w.source for w in warnings]},
            )

        return FinancialReport(
            salon_id=salon,
            period=period,
            previous_period=previous_period,
            current=current,
            previous=previous,
            metrics=metrics,
            payment_methods=aggregation.payment_method_breakdown(sales),
            employee_expenses=aggregation.employee_expense_breakdown(commissions),
            top_services=aggregation.item_revenue_breakdown(sales, ItemKind.SERVICE, limit=TOP_ITEMS_LIMIT),
            top_products=aggregation.item_revenue_breakdown(sales, ItemKind.PRODUCT, limit=TOP_ITEMS_LIMIT),
            trend=bucketize(sales, period, tz=self._tz),
            commission_stats=aggregation.commission_stats(commissions),
            appointment_stats=aggregation.appointment_stats(records["appointments"], period, tz=self._tz),
            generated_at=self._clock(),
            currency=self._currency,
            warnings=warnings,
        )

    def build_expense_breakdown(
        self,
        period: Period,
        salon_id: Optional[UUID] = None,
        owner_id: Optional[UUID] = None,
    ) -> ExpenseBreakdown:
        """Commission expenses for a period, per employee."""

        salon = self.resolve_salon(salon_id, owner_id)
        records, warnings = self._fetch_all(
            {"commissions": lambda: self._source.fetch_commissions(self._commission_filters(salon, period))},
            context={"salon_id": str(salon)},
        )
        commissions = records["commissions"]

        return ExpenseBreakdown(
            salon_id=salon,
            period=period,
            total=aggregation.total_expenses(commissions),
            categories=aggregation.employee_expense_breakdown(commissions),
            commission_stats=aggregation.commission_stats(commissions),
            warnings=warnings,
        )

    def build_revenue_breakdown(
        self,
        period: Period,
        salon_id: Optional[UUID] = None,
        owner_id: Optional[UUID] = None,
    ) -> RevenueBreakdown:
        """Revenue by service and by product for a period."""

        salon = self.resolve_salon(salon_id, owner_id)
        records, warnings = self._fetch_all(
            {"sales": lambda: self._source.fetch_sales(salon, period.start_date, period.end_date)},
            context={"salon_id": str(salon)},
        )
        sales = records["sales"]
        services = aggregation.item_revenue_breakdown(sales, ItemKind.SERVICE)
        products = aggregation.item_revenue_breakdown(sales, ItemKind.PRODUCT)

        return RevenueBreakdown(
            salon_id=salon,
            period=period,
            total_revenue=aggregation.total_revenue(sales),
            service_revenue=sum((s.amount for s in services), ZERO),
            product_revenue=sum((p.amount for p in products), ZERO),
            services=services,
            products=products,
            warnings=warnings,
        )

    def build_profit_loss(
        self,
        period: Period,
        salon_id: Optional[UUID] = None,
        owner_id: Optional[UUID] = None,
    ) -> ProfitLossReport:
        salon = self.resolve_salon(salon_id, owner_id)
        records, warnings = self._fetch_all(
            {
                "sales": lambda: self._source.fetch_sales(salon, period.start_date, period.end_date),
                "commissions": lambda: self._source.fetch_commissions(
                    self._commission_filters(salon, period)
                ),
            },
            context={"salon_id": str(salon)},
        )
        return ProfitLossReport(
            salon_id=salon,
            statement=aggregation.profit_loss(records["sales"], records["commissions"], period),
            warnings=warnings,
        )

    def build_commission_overview(
        self,
        filters: CommissionFilters,
        group_by: GroupBy | str = GroupBy.DATE,
        today: Optional[date] = None,
    ) -> CommissionOverview:
        """
        Commission totals (paid vs unpaid) and display groups.

        Unlike the other reports, a salon is optional here: an employee can
        list their own commissions across salons.
        """

        if filters.salon_id is None and filters.employee_id is None:
            raise NoSalonAvailableError()

        records, warnings = self._fetch_all(
            {"commissions": lambda: self._source.fetch_commissions(filters)},
        )
        commissions = records["commissions"]
        if today is None:
            today = self._clock().astimezone(self._tz or timezone.utc).date()

        return CommissionOverview(
            filters=filters,
            stats=aggregation.commission_stats(commissions),
            groups=tuple(group_commissions(commissions, group_by, today=today, tz=self._tz)),
            warnings=warnings,
        )


__all__ = [
    "NoSalonAvailableError",
    "ReportCancelledError",
    "RecordSource",
    "ExpenseBreakdown",
    "RevenueBreakdown",
    "ProfitLossReport",
    "CommissionOverview",
    "ReportService",
]
