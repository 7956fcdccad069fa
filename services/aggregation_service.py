"""
Aggregation service: reduces raw sales and commissions into report figures.

Pure functions over already-fetched, immutable records. No I/O, no shared
state, no exceptions on empty input.

Policy:
- Revenue is the sum of sale totals.
- Expenses are the sum of ALL commissions in range, paid or unpaid
  (accrual basis). The paid/unpaid split is reported separately by
  `commission_stats` for payout tracking.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import tzinfo
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from domain.appointment import Appointment, AppointmentStatus
from domain.commission import Commission
from domain.money import ZERO
from domain.period import Period
from domain.sale import ItemKind, PaymentMethod, Sale
from domain.summary import (
    AppointmentStats,
    CategoryShare,
    CommissionStats,
    FinancialSummary,
    ProfitLossStatement,
)
from domain.time import local_date
from services.comparison_service import profit_margin, share_percentage

EMPLOYEE_COMMISSIONS_LABEL = "Employee Commissions"

T = TypeVar("T")


@dataclass(slots=True)
class _Group:
    label: str
    amount: Decimal = ZERO
    count: int = 0
    units: Optional[Decimal] = None


def _build_shares(groups: Iterable[_Group], total: Decimal) -> Tuple[CategoryShare, ...]:
    """Turn accumulated groups into shares of `total`, largest first."""

    shares = [
        CategoryShare(
            label=group.label,
            amount=group.amount,
            percentage=share_percentage(group.amount, total),
            count=group.count,
            key=group.label,
            units=group.units,
        )
        for group in groups
    ]
    # Stable sort keeps first-seen order among equal amounts.
    shares.sort(key=lambda share: share.amount, reverse=True)
    return tuple(shares)


def _group_by(
    records: Iterable[T],
    key: Callable[[T], str],
    amount: Callable[[T], Decimal],
    units: Optional[Callable[[T], Decimal]] = None,
) -> List[_Group]:
    groups: Dict[str, _Group] = {}
    for record in records:
        label = key(record)
        group = groups.get(label)
        if group is None:
            group = groups[label] = _Group(label=label)
        group.amount += amount(record)
        group.count += 1
        if units is not None:
            group.units = (group.units or ZERO) + units(record)
    return list(groups.values())


def total_revenue(sales: Iterable[Sale]) -> Decimal:
    return sum((sale.total_amount for sale in sales), ZERO)


def total_expenses(commissions: Iterable[Commission]) -> Decimal:
    """Accrued commission cost: every commission counts, paid or not."""

    return sum((commission.amount for commission in commissions), ZERO)


def aggregate(sales: Sequence[Sale], commissions: Sequence[Commission]) -> FinancialSummary:
    """
    Revenue, expenses, net income and margin for one period.

    Example:
        sales totalling 3000 and one unpaid 300 commission give
        revenue=3000, expenses=300, net_income=2700, profit_margin=90.0
    """

    revenue = total_revenue(sales)
    expenses = total_expenses(commissions)
    net_income = revenue - expenses
    sales_count = len(sales)

    return FinancialSummary(
        revenue=revenue,
        expenses=expenses,
        net_income=net_income,
        profit_margin=profit_margin(net_income, revenue),
        sales_count=sales_count,
        average_sale=revenue / sales_count if sales_count else ZERO,
    )


def payment_method_breakdown(sales: Sequence[Sale]) -> Tuple[CategoryShare, ...]:
    """Revenue per payment method as whole-number percentages of total revenue."""

    groups = _group_by(
        sales,
        key=lambda sale: sale.payment_method.value,
        amount=lambda sale: sale.total_amount,
    )
    shares = _build_shares(groups, total_revenue(sales))
    # Grouped on the enum value; relabel for display and keep the value as key.
    return tuple(
        CategoryShare(
            label=PaymentMethod(share.label).label,
            amount=share.amount,
            percentage=share.percentage,
            count=share.count,
            key=share.label,
        )
        for share in shares
    )


def employee_expense_breakdown(commissions: Sequence[Commission]) -> Tuple[CategoryShare, ...]:
    """
    Commission cost per employee.

    If commissions exist but none can be attributed to an employee, the whole
    total is reported as a single generic category at 100%.
    """

    total = total_expenses(commissions)
    if total > ZERO and not any(_is_attributed(c) for c in commissions):
        return (
            CategoryShare(
                label=EMPLOYEE_COMMISSIONS_LABEL,
                amount=total,
                percentage=100,
                count=len(commissions),
                key=EMPLOYEE_COMMISSIONS_LABEL,
            ),
        )

    groups = _group_by(
        commissions,
        key=lambda commission: commission.display_employee_name,
        amount=lambda commission: commission.amount,
    )
    return _build_shares(groups, total)


def _is_attributed(commission: Commission) -> bool:
    return bool(commission.employee_id or commission.employee_name or commission.employee_role_title)


def item_revenue_breakdown(
    sales: Sequence[Sale],
    kind: ItemKind,
    limit: Optional[int] = None,
) -> Tuple[CategoryShare, ...]:
    """
    Line-item revenue per service (or product) name.

    count is the number of sale lines; units is the quantity sold, which can be
    fractional, and average is revenue per unit. Percentages are of the revenue
    of this item kind only.
    """

    items = [item for sale in sales for item in sale.items_of_kind(kind)]
    groups = _group_by(
        items,
        key=lambda item: item.name,
        amount=lambda item: item.line_total,
        units=lambda item: item.quantity,
    )
    total = sum((item.line_total for item in items), ZERO)
    shares = _build_shares(groups, total)
    return shares[:limit] if limit is not None else shares


def commission_stats(commissions: Sequence[Commission]) -> CommissionStats:
    paid = [c for c in commissions if c.paid]
    unpaid = [c for c in commissions if not c.paid]
    paid_total = total_expenses(paid)
    unpaid_total = total_expenses(unpaid)
    return CommissionStats(
        total=paid_total + unpaid_total,
        paid=paid_total,
        unpaid=unpaid_total,
        paid_count=len(paid),
        unpaid_count=len(unpaid),
    )


def appointment_stats(
    appointments: Sequence[Appointment],
    period: Optional[Period] = None,
    tz: Optional[tzinfo] = None,
) -> AppointmentStats:
    """
    Booking counts per status for appointments scheduled within `period`.

    completion_rate is completed / total * 100 (0 when there are none).
    """

    if period is not None:
        appointments = [
            appointment
            for appointment in appointments
            if period.contains(local_date(appointment.scheduled_start, tz))
        ]

    counts = Counter(appointment.status.value for appointment in appointments)
    by_status = {status.value: counts.get(status.value, 0) for status in AppointmentStatus}
    total = len(appointments)
    completed = by_status[AppointmentStatus.COMPLETED.value]

    return AppointmentStats(
        total=total,
        by_status=by_status,
        completion_rate=(completed / total * 100) if total else 0.0,
    )


def profit_loss(
    sales: Sequence[Sale],
    commissions: Sequence[Commission],
    period: Period,
) -> ProfitLossStatement:
    """
    Profit & loss statement for a period.

    Revenue not attributable to service or product lines (discounts, rounding,
    sales without items) is reported as other revenue so the lines add up to
    total revenue. Commissions are currently the only tracked expense.
    """

    revenue = total_revenue(sales)
    service_revenue = sum(
        (item.line_total for sale in sales for item in sale.items_of_kind(ItemKind.SERVICE)), ZERO
    )
    product_revenue = sum(
        (item.line_total for sale in sales for item in sale.items_of_kind(ItemKind.PRODUCT)), ZERO
    )
    commission_expenses = total_expenses(commissions)
    other_expenses = ZERO
    total = commission_expenses + other_expenses
    gross_profit = revenue - commission_expenses
    net_profit = revenue - total

    return ProfitLossStatement(
        period=period,
        service_revenue=service_revenue,
        product_revenue=product_revenue,
        other_revenue=revenue - service_revenue - product_revenue,
        total_revenue=revenue,
        commission_expenses=commission_expenses,
        other_expenses=other_expenses,
        total_expenses=total,
        gross_profit=gross_profit,
        net_profit=net_profit,
        profit_margin=profit_margin(net_profit, revenue),
    )


__all__ = [
    "EMPLOYEE_COMMISSIONS_LABEL",
    "total_revenue",
    "total_expenses",
    "aggregate",
    "payment_method_breakdown",
    "employee_expense_breakdown",
    "item_revenue_breakdown",
    "commission_stats",
    "appointment_stats",
    "profit_loss",
]
