"""
Tests for `services/aggregation_service.py`.

Covers:
- totals, net income, margin and average sale
- accrual-basis expenses (paid and unpaid commissions both count)
- breakdown grouping, ordering and whole-number percentages
- the generic employee category for unattributed commissions
- appointment counts and completion rate
- profit & loss lines adding up
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from builders import (
    ALICE_ID,
    BOB_ID,
    make_appointment,
    make_commission,
    make_sale,
    product_item,
    service_item,
    utc,
)
from domain.appointment import AppointmentStatus
from domain.period import Period
from domain.sale import ItemKind, PaymentMethod
from services.aggregation_service import (
    EMPLOYEE_COMMISSIONS_LABEL,
    aggregate,
    appointment_stats,
    commission_stats,
    employee_expense_breakdown,
    item_revenue_breakdown,
    payment_method_breakdown,
    profit_loss,
)

MARCH = Period(start_date=date(2025, 3, 1), end_date=date(2025, 3, 31))


def test_aggregate_totals() -> None:
    """Sales of 1000 and 2000 with one unpaid 300 commission."""

    sales = [make_sale(1000, utc(2025, 3, 1)), make_sale(2000, utc(2025, 3, 2))]
    commissions = [make_commission(300, utc(2025, 3, 1), paid=False)]

    summary = aggregate(sales, commissions)

    assert summary.revenue == Decimal("3000")
    assert summary.expenses == Decimal("300")
    assert summary.net_income == Decimal("2700")
    assert summary.profit_margin == pytest.approx(90.0)
    assert summary.sales_count == 2
    assert summary.average_sale == Decimal("1500")
    assert summary.is_profit


def test_aggregate_counts_paid_and_unpaid_commissions() -> None:
    """Verify expenses are accrual-basis: payout status does not matter."""

    commissions = [
        make_commission(100, utc(2025, 3, 1), paid=True),
        make_commission(200, utc(2025, 3, 2), paid=False),
    ]

    assert aggregate([], commissions).expenses == Decimal("300")

    stats = commission_stats(commissions)
    assert stats.total == Decimal("300")
    assert stats.paid == Decimal("100")
    assert stats.unpaid == Decimal("200")
    assert (stats.paid_count, stats.unpaid_count) == (1, 1)
    assert stats.count == 2


def test_aggregate_empty_input() -> None:
    summary = aggregate([], [])

    assert summary.revenue == Decimal("0")
    assert summary.expenses == Decimal("0")
    assert summary.profit_margin == 0.0
    assert summary.average_sale == Decimal("0")
    assert summary.sales_count == 0
    assert summary.is_profit


def test_aggregate_loss() -> None:
    summary = aggregate([make_sale(100, utc(2025, 3, 1))], [make_commission(300, utc(2025, 3, 1))])

    assert summary.net_income == Decimal("-200")
    assert not summary.is_profit
    assert summary.profit_margin == pytest.approx(-200.0)


def test_payment_method_breakdown() -> None:
    """Verify grouping, display labels, percentages and descending order."""

    sales = [
        make_sale(100, utc(2025, 3, 1), PaymentMethod.MOBILE_MONEY),
        make_sale(400, utc(2025, 3, 1), PaymentMethod.CASH),
        make_sale(300, utc(2025, 3, 2), PaymentMethod.CARD),
        make_sale(200, utc(2025, 3, 3), PaymentMethod.CASH),
    ]

    shares = payment_method_breakdown(sales)

    assert [s.label for s in shares] == ["Cash", "Card", "Mobile Money"]
    assert [s.key for s in shares] == ["cash", "card", "mobile_money"]
    assert [s.amount for s in shares] == [Decimal("600"), Decimal("300"), Decimal("100")]
    assert [s.percentage for s in shares] == [60, 30, 10]
    assert [s.count for s in shares] == [2, 1, 1]


def test_payment_method_breakdown_unknown_method() -> None:
    shares = payment_method_breakdown([make_sale(100, utc(2025, 3, 1), "crypto")])

    assert shares[0].label == "Unknown"
    assert shares[0].key == "unknown"
    assert shares[0].percentage == 100


def test_breakdown_percentages_sum_to_100_within_rounding() -> None:
    sales = [make_sale(1, utc(2025, 3, 1), m) for m in (PaymentMethod.CASH, PaymentMethod.CARD, PaymentMethod.BANK_TRANSFER)]

    shares = payment_method_breakdown(sales)

    assert [s.percentage for s in shares] == [33, 33, 33]
    assert abs(sum(s.percentage for s in shares) - 100) <= len(shares)


def test_breakdown_with_zero_total_has_zero_percentages() -> None:
    shares = payment_method_breakdown([make_sale(0, utc(2025, 3, 1)), make_sale(0, utc(2025, 3, 2), "card")])

    assert all(s.percentage == 0 for s in shares)


def test_employee_expense_breakdown() -> None:
    commissions = [
        make_commission(100, utc(2025, 3, 1), employee_name="Bob", employee_id=BOB_ID),
        make_commission(200, utc(2025, 3, 1), employee_name="Alice", employee_id=ALICE_ID),
        make_commission(100, utc(2025, 3, 2), employee_name="Alice", employee_id=ALICE_ID, paid=True),
    ]

    shares = employee_expense_breakdown(commissions)

    assert [(s.label, s.amount, s.percentage) for s in shares] == [
        ("Alice", Decimal("300"), 75),
        ("Bob", Decimal("100"), 25),
    ]


def test_employee_expense_breakdown_name_fallbacks() -> None:
    """Role title stands in for a missing name; an id alone reads as Unknown Employee."""

    commissions = [
        make_commission(200, utc(2025, 3, 1), role_title="Stylist", employee_id=ALICE_ID),
        make_commission(100, utc(2025, 3, 1), employee_id=BOB_ID),
    ]

    labels = [s.label for s in employee_expense_breakdown(commissions)]

    assert labels == ["Stylist", "Unknown Employee"]


def test_employee_expense_breakdown_unattributed_commissions() -> None:
    """Verify a single generic category at 100% when no commission names an employee."""

    commissions = [make_commission(150, utc(2025, 3, 1)), make_commission(50, utc(2025, 3, 2))]

    shares = employee_expense_breakdown(commissions)

    assert len(shares) == 1
    assert shares[0].label == EMPLOYEE_COMMISSIONS_LABEL
    assert shares[0].amount == Decimal("200")
    assert shares[0].percentage == 100
    assert shares[0].count == 2


def test_employee_expense_breakdown_empty() -> None:
    assert employee_expense_breakdown([]) == ()


def _item_sales():
    return [
        make_sale(
            11000,
            utc(2025, 3, 1),
            items=[service_item("Haircut", 5000), product_item("Shampoo", 6000, quantity=2)],
        ),
        make_sale(
            25000,
            utc(2025, 3, 2),
            items=[service_item("Haircut", 5000), service_item("Braids", 20000)],
        ),
    ]


def test_item_revenue_breakdown_services() -> None:
    shares = item_revenue_breakdown(_item_sales(), ItemKind.SERVICE)

    assert [(s.label, s.amount, s.percentage, s.count) for s in shares] == [
        ("Braids", Decimal("20000"), 67, 1),
        ("Haircut", Decimal("10000"), 33, 2),
    ]
    assert shares[1].average == Decimal("5000")


def test_item_revenue_breakdown_products_count_units() -> None:
    shares = item_revenue_breakdown(_item_sales(), ItemKind.PRODUCT)

    assert len(shares) == 1
    assert shares[0].count == 1
    assert shares[0].units == Decimal("2")
    assert shares[0].average == Decimal("3000")
    assert shares[0].percentage == 100


def test_item_revenue_breakdown_limit() -> None:
    shares = item_revenue_breakdown(_item_sales(), ItemKind.SERVICE, limit=1)

    assert [s.label for s in shares] == ["Braids"]


def test_item_revenue_breakdown_fractional_quantities() -> None:
    """Half a bottle and two and a half bottles make three units sold."""

    sale = make_sale(
        1250,
        utc(2025, 3, 1),
        items=[product_item("Hair oil", 500, quantity="0.5"), product_item("Hair oil", 750, quantity="2.5")],
    )

    share = item_revenue_breakdown([sale], ItemKind.PRODUCT)[0]

    assert share.count == 2
    assert share.units == Decimal("3.0")
    assert share.average == Decimal("1250") / Decimal("3")


def test_item_without_name_uses_fallback() -> None:
    sale = make_sale(500, utc(2025, 3, 1), items=[service_item("", 500)])

    assert item_revenue_breakdown([sale], ItemKind.SERVICE)[0].label == "Unknown Service"


def test_appointment_stats() -> None:
    """Only appointments scheduled within the period are counted."""

    appointments = [
        make_appointment(utc(2025, 3, 3), AppointmentStatus.COMPLETED),
        make_appointment(utc(2025, 3, 4), AppointmentStatus.COMPLETED),
        make_appointment(utc(2025, 3, 5), AppointmentStatus.CANCELLED),
        make_appointment(utc(2025, 4, 2), AppointmentStatus.COMPLETED),
    ]

    stats = appointment_stats(appointments, MARCH)

    assert stats.total == 3
    assert stats.count("completed") == 2
    assert stats.count("cancelled") == 1
    assert stats.count("no_show") == 0
    assert stats.completion_rate == pytest.approx(200 / 3)
    assert set(stats.by_status) == {s.value for s in AppointmentStatus}


def test_appointment_stats_empty() -> None:
    stats = appointment_stats([], MARCH)

    assert stats.total == 0
    assert stats.completion_rate == 0.0


def test_profit_loss_lines_add_up() -> None:
    """Revenue not on a service or product line is reported as other revenue."""

    sales = [
        make_sale(
            10000,
            utc(2025, 3, 1),
            items=[service_item("Haircut", 6000), product_item("Oil", 3000)],
        )
    ]
    commissions = [make_commission(2000, utc(2025, 3, 1), employee_name="Alice")]

    statement = profit_loss(sales, commissions, MARCH)

    assert statement.period == MARCH
    assert statement.service_revenue == Decimal("6000")
    assert statement.product_revenue == Decimal("3000")
    assert statement.other_revenue == Decimal("1000")
    assert statement.total_revenue == Decimal("10000")
    assert statement.commission_expenses == Decimal("2000")
    assert statement.other_expenses == Decimal("0")
    assert statement.total_expenses == Decimal("2000")
    assert statement.gross_profit == Decimal("8000")
    assert statement.net_profit == Decimal("8000")
    assert statement.profit_margin == pytest.approx(80.0)


def test_payment_methods_cash_first() -> None:
    sales = [make_sale(400, utc(2025, 3, 1), PaymentMethod.CARD), make_sale(600, utc(2025, 3, 1), PaymentMethod.CASH)]

    shares = payment_method_breakdown(sales)

    assert [(s.label, s.percentage) for s in shares] == [("Cash", 60), ("Card", 40)]
