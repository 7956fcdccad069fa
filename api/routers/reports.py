"""
Reports API Endpoints.

Read-only financial reports for one salon and period. The salon comes from
`salon_id`, or from the first salon owned by `owner_id`. The period is a named
token (`period`, default `month`) or explicit `start_date` and `end_date`.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_report_service, get_settings, request_period
from api.models import (
    ExpenseBreakdownResponse,
    FinancialReportResponse,
    ProfitLossResponse,
    RevenueBreakdownResponse,
)
from api.serializers import (
    appointment_stats_model,
    commission_stats_model,
    metric_model,
    period_model,
    share_models,
    summary_model,
    time_series_model,
    warning_models,
)
from services.config import ReportSettings
from services.report_service import NoSalonAvailableError, ReportService

logger = logging.getLogger(__name__)

router = APIRouter()

_PERIOD_HELP = "today, week, month, last7days, last30days, last90days or thisYear"


@router.get(
    "/reports/financial",
    response_model=FinancialReportResponse,
    summary="Financial Report",
    description="Revenue, expenses and net income with period-over-period changes, breakdowns and trend."
)
def get_financial_report(
    salon_id: Optional[UUID] = Query(None, description="Salon to report on"),
    owner_id: Optional[UUID] = Query(None, description="Use this owner's first salon when salon_id is absent"),
    period: Optional[str] = Query(None, description=_PERIOD_HELP),
    start_date: Optional[date] = Query(None, description="Custom range start (inclusive)"),
    end_date: Optional[date] = Query(None, description="Custom range end (inclusive)"),
    service: ReportService = Depends(get_report_service),
    settings: ReportSettings = Depends(get_settings),
):
    """
    Build the financial dashboard for a salon.

    A failed record fetch does not fail the request: the report comes back
    with `is_degraded: true` and one warning per failed source.

    **Example usage:**
    - Last 30 days: `GET /api/v1/reports/financial?salon_id=...&period=month`
    - Custom range: `GET /api/v1/reports/financial?salon_id=...&start_date=2025-01-01&end_date=2025-03-31`
    """
    report_period = request_period(period, start_date, end_date, settings)
    try:
        report = service.build_financial_report(report_period, salon_id=salon_id, owner_id=owner_id)

        return FinancialReportResponse(
            salon_id=report.salon_id,
            currency=report.currency,
            period=period_model(report.period),
            previous_period=period_model(report.previous_period),
            current=summary_model(report.current),
            previous=summary_model(report.previous),
            metrics={name: metric_model(metric) for name, metric in report.metrics.items()},
            payment_methods=share_models(report.payment_methods),
            employee_expenses=share_models(report.employee_expenses),
            top_services=share_models(report.top_services),
            top_products=share_models(report.top_products),
            trend=time_series_model(report.trend),
            commission_stats=commission_stats_model(report.commission_stats),
            appointment_stats=appointment_stats_model(report.appointment_stats),
            generated_at=report.generated_at,
            is_degraded=report.is_degraded,
            warnings=warning_models(report.warnings),
        )

    except HTTPException:
        raise
    except NoSalonAvailableError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Financial report failed", extra={"salon_id": str(salon_id)})
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build financial report: {str(e)}"
        )


@router.get(
    "/reports/expenses",
    response_model=ExpenseBreakdownResponse,
    summary="Expense Breakdown",
    description="Commission expenses for the period, grouped per employee."
)
def get_expense_breakdown(
    salon_id: Optional[UUID] = Query(None, description="Salon to report on"),
    owner_id: Optional[UUID] = Query(None, description="Use this owner's first salon when salon_id is absent"),
    period: Optional[str] = Query(None, description=_PERIOD_HELP),
    start_date: Optional[date] = Query(None, description="Custom range start (inclusive)"),
    end_date: Optional[date] = Query(None, description="Custom range end (inclusive)"),
    service: ReportService = Depends(get_report_service),
    settings: ReportSettings = Depends(get_settings),
):
    report_period = request_period(period, start_date, end_date, settings)
    try:
        breakdown = service.build_expense_breakdown(report_period, salon_id=salon_id, owner_id=owner_id)

        return ExpenseBreakdownResponse(
            salon_id=breakdown.salon_id,
            period=period_model(breakdown.period),
            total=breakdown.total,
            categories=share_models(breakdown.categories),
            commission_stats=commission_stats_model(breakdown.commission_stats),
            is_degraded=bool(breakdown.warnings),
            warnings=warning_models(breakdown.warnings),
        )

    except HTTPException:
        raise
    except NoSalonAvailableError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Expense breakdown failed", extra={"salon_id": str(salon_id)})
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build expense breakdown: {str(e)}"
        )


@router.get(
    "/reports/revenue",
    response_model=RevenueBreakdownResponse,
    summary="Revenue Breakdown",
    description="Revenue by service and by product, with units sold and average revenue per unit."
)
def get_revenue_breakdown(
    salon_id: Optional[UUID] = Query(None, description="Salon to report on"),
    owner_id: Optional[UUID] = Query(None, description="Use this owner's first salon when salon_id is absent"),
    period: Optional[str] = Query(None, description=_PERIOD_HELP),
    start_date: Optional[date] = Query(None, description="Custom range start (inclusive)"),
    end_date: Optional[date] = Query(None, description="Custom range end (inclusive)"),
    service: ReportService = Depends(get_report_service),
    settings: ReportSettings = Depends(get_settings),
):
    report_period = request_period(period, start_date, end_date, settings)
    try:
        breakdown = service.build_revenue_breakdown(report_period, salon_id=salon_id, owner_id=owner_id)

        return RevenueBreakdownResponse(
            salon_id=breakdown.salon_id,
            period=period_model(breakdown.period),
            total_revenue=breakdown.total_revenue,
            service_revenue=breakdown.service_revenue,
            product_revenue=breakdown.product_revenue,
            services=share_models(breakdown.services),
            products=share_models(breakdown.products),
            is_degraded=bool(breakdown.warnings),
            warnings=warning_models(breakdown.warnings),
        )

    except HTTPException:
        raise
    except NoSalonAvailableError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Revenue breakdown failed", extra={"salon_id": str(salon_id)})
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build revenue breakdown: {str(e)}"
        )


@router.get(
    "/reports/profit-loss",
    response_model=ProfitLossResponse,
    summary="Profit & Loss",
    description="Profit and loss statement: revenue by source, commission expenses, net profit."
)
def get_profit_loss(
    salon_id: Optional[UUID] = Query(None, description="Salon to report on"),
    owner_id: Optional[UUID] = Query(None, description="Use this owner's first salon when salon_id is absent"),
    period: Optional[str] = Query(None, description=_PERIOD_HELP),
    start_date: Optional[date] = Query(None, description="Custom range start (inclusive)"),
    end_date: Optional[date] = Query(None, description="Custom range end (inclusive)"),
    service: ReportService = Depends(get_report_service),
    settings: ReportSettings = Depends(get_settings),
):
    report_period = request_period(period, start_date, end_date, settings)
    try:
        report = service.build_profit_loss(report_period, salon_id=salon_id, owner_id=owner_id)
        statement = report.statement

        return ProfitLossResponse(
            salon_id=report.salon_id,
            period=period_model(statement.period),
            service_revenue=statement.service_revenue,
            product_revenue=statement.product_revenue,
            other_revenue=statement.other_revenue,
            total_revenue=statement.total_revenue,
            commission_expenses=statement.commission_expenses,
            other_expenses=statement.other_expenses,
            total_expenses=statement.total_expenses,
            gross_profit=statement.gross_profit,
            net_profit=statement.net_profit,
            profit_margin=statement.profit_margin,
            is_degraded=bool(report.warnings),
            warnings=warning_models(report.warnings),
        )

    except HTTPException:
        raise
    except NoSalonAvailableError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Profit and loss report failed", extra={"salon_id": str(salon_id)})
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build profit and loss report: {str(e)}"
        )
