"""
Tests for `services/report_service.py`.

Covers:
- the full financial report against a fixed record set
- degraded reports when a record source fails
- cancellation and the no-salon error
- owner-based salon resolution
- the supplementary breakdown, P&L and commission overview reports
"""

from __future__ import annotations

import threading
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from builders import (
    ALICE_ID,
    BOB_ID,
    OWNER_ID,
    SALON_ID,
    FailingCommissionsSource,
    FakeRecordSource,
    make_appointment,
    make_commission,
    make_sale,
    product_item,
    service_item,
    utc,
)
from domain.appointment import AppointmentStatus
from domain.commission import CommissionFilters
from domain.period import Period
from domain.sale import PaymentMethod
from services.commission_ledger_service import GroupBy
from services.report_service import NoSalonAvailableError, ReportCancelledError, ReportService

PERIOD = Period(start_date=date(2025, 3, 1), end_date=date(2025, 3, 10))
CLOCK = lambda: datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)  # noqa: E731


def _records():
    sales = [
        make_sale(
            1000,
            utc(2025, 3, 2),
            PaymentMethod.CASH,
            items=[service_item("Haircut", 800), product_item("Gel", 200)],
        ),
        make_sale(2000, utc(2025, 3, 5), PaymentMethod.CARD, items=[service_item("Braids", 2000)]),
        # previous period (Feb 19 - Feb 28)
        make_sale(1500, utc(2025, 2, 20), PaymentMethod.CASH),
    ]
    commissions = [
        make_commission(300, utc(2025, 3, 2), employee_name="Alice", employee_id=ALICE_ID),
        make_commission(100, utc(2025, 2, 20), paid=True, employee_name="Bob", employee_id=BOB_ID),
    ]
    appointments = [
        make_appointment(utc(2025, 3, 3), AppointmentStatus.COMPLETED),
        make_appointment(utc(2025, 3, 4), AppointmentStatus.NO_SHOW),
    ]
    return sales, commissions, appointments


def _service(source) -> ReportService:
    return ReportService(source, max_workers=3, clock=CLOCK)


def test_financial_report_metrics() -> None:
    sales, commissions, appointments = _records()
    report = _service(FakeRecordSource(sales, commissions, appointments)).build_financial_report(
        PERIOD, salon_id=SALON_ID
    )

    assert report.salon_id == SALON_ID
    assert report.previous_period == Period(start_date=date(2025, 2, 19), end_date=date(2025, 2, 28))

    assert report.current.revenue == Decimal("3000")
    assert report.current.expenses == Decimal("300")
    assert report.previous.revenue == Decimal("1500")
    assert report.previous.net_income == Decimal("1400")

    metrics = report.metrics
    assert metrics["revenue"].change_percent == pytest.approx(100.0)
    assert metrics["expenses"].change_percent == pytest.approx(200.0)
    assert metrics["net_income"].value == Decimal("2700")
    assert metrics["net_income"].change_percent == pytest.approx(1300 / 1400 * 100)
    assert metrics["sales_count"].value == Decimal("2")
    assert metrics["sales_count"].change_percent == pytest.approx(100.0)
    assert metrics["average_sale"].change_percent == pytest.approx(0.0)

    assert report.generated_at == CLOCK()
    assert report.currency == "RWF"
    assert not report.is_degraded
    assert report.warnings == ()


def test_financial_report_breakdowns_and_trend() -> None:
    sales, commissions, appointments = _records()
    report = _service(FakeRecordSource(sales, commissions, appointments)).build_financial_report(
        PERIOD, salon_id=SALON_ID
    )

    assert [(s.label, s.percentage) for s in report.payment_methods] == [("Card", 67), ("Cash", 33)]
    assert [s.label for s in report.employee_expenses] == ["Alice"]
    assert [s.label for s in report.top_services] == ["Braids", "Haircut"]
    assert [s.label for s in report.top_products] == ["Gel"]

    assert len(report.trend) == PERIOD.days
    assert report.trend.total == report.current.revenue

    assert report.commission_stats.unpaid == Decimal("300")
    assert report.appointment_stats.total == 2
    assert report.appointment_stats.completion_rate == pytest.approx(50.0)


def test_financial_report_issues_all_fetches() -> None:
    source = FakeRecordSource(*_records())

    _service(source).build_financial_report(PERIOD, salon_id=SALON_ID)

    assert sorted(source.calls) == ["appointments", "commissions", "commissions", "sales", "sales"]


def test_failed_fetch_degrades_report() -> None:
    """A failing commission source yields empty expenses plus warnings, not an error."""

    sales, commissions, appointments = _records()
    report = _service(FailingCommissionsSource(sales, commissions, appointments)).build_financial_report(
        PERIOD, salon_id=SALON_ID
    )

    assert report.is_degraded
    assert [w.source for w in report.warnings] == ["commissions", "previous_commissions"]
    assert "connection reset" in report.warnings[0].message
    assert report.current.revenue == Decimal("3000")
    assert report.current.expenses == Decimal("0")
    assert report.employee_expenses == ()


def test_missing_salon_raises() -> None:
    with pytest.raises(NoSalonAvailableError, match="No salon available"):
        _service(FakeRecordSource()).build_financial_report(PERIOD)


def test_owner_resolves_to_first_salon() -> None:
    source = FakeRecordSource(*_records(), salons_by_owner={OWNER_ID: SALON_ID})

    report = _service(source).build_financial_report(PERIOD, owner_id=OWNER_ID)

    assert report.salon_id == SALON_ID


def test_owner_without_salon_raises() -> None:
    with pytest.raises(NoSalonAvailableError):
        _service(FakeRecordSource()).build_financial_report(PERIOD, owner_id=OWNER_ID)


def test_cancelled_report_raises() -> None:
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(ReportCancelledError):
        _service(FakeRecordSource(*_records())).build_financial_report(
            PERIOD, salon_id=SALON_ID, cancel_event=cancel
        )


def test_expense_breakdown() -> None:
    sales, commissions, _ = _records()
    breakdown = _service(FakeRecordSource(sales, commissions)).build_expense_breakdown(PERIOD, salon_id=SALON_ID)

    assert breakdown.total == Decimal("300")
    assert [(c.label, c.percentage) for c in breakdown.categories] == [("Alice", 100)]
    assert breakdown.commission_stats.unpaid_count == 1
    assert breakdown.warnings == ()


def test_revenue_breakdown() -> None:
    sales, _, _ = _records()
    breakdown = _service(FakeRecordSource(sales)).build_revenue_breakdown(PERIOD, salon_id=SALON_ID)

    assert breakdown.total_revenue == Decimal("3000")
    assert breakdown.service_revenue == Decimal("2800")
    assert breakdown.product_revenue == Decimal("200")
    assert [s.label for s in breakdown.services] == ["Braids", "Haircut"]


def test_profit_loss_report() -> None:
    sales, commissions, _ = _records()
    report = _service(FakeRecordSource(sales, commissions)).build_profit_loss(PERIOD, salon_id=SALON_ID)

    statement = report.statement
    assert statement.total_revenue == Decimal("3000")
    assert statement.total_expenses == Decimal("300")
    assert statement.net_profit == Decimal("2700")
    assert statement.profit_margin == pytest.approx(90.0)


def test_commission_overview() -> None:
    _, commissions, _ = _records()
    overview = _service(FakeRecordSource(commissions=commissions)).build_commission_overview(
        CommissionFilters(salon_id=SALON_ID), group_by=GroupBy.STATUS, today=date(2025, 3, 15)
    )

    assert overview.stats.total == Decimal("400")
    assert [g.label for g in overview.groups] == ["Unpaid", "Paid"]


def test_commission_overview_defaults_today_from_clock() -> None:
    _, commissions, _ = _records()
    overview = _service(FakeRecordSource(commissions=commissions)).build_commission_overview(
        CommissionFilters(employee_id=ALICE_ID)
    )

    assert [g.label for g in overview.groups] == ["Sunday, March 2, 2025"]


def test_commission_overview_needs_salon_or_employee() -> None:
    with pytest.raises(NoSalonAvailableError):
        _service(FakeRecordSource()).build_commission_overview(CommissionFilters(paid=False))
