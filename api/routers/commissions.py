"""
Commissions API Endpoints.

Read-only commission ledger: paid vs unpaid totals and display groups.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_report_service, get_settings, request_period
from api.models import CommissionOverviewResponse
from api.serializers import commission_group_model, commission_stats_model, warning_models
from domain.commission import CommissionFilters
from services.commission_ledger_service import GroupBy
from services.config import ReportSettings
from services.report_service import NoSalonAvailableError, ReportService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/commissions/overview",
    response_model=CommissionOverviewResponse,
    summary="Commission Overview",
    description="Commission totals and groups by date, employee or status. Needs a salon_id or an employee_id."
)
def get_commission_overview(
    salon_id: Optional[UUID] = Query(None, description="Commissions of this salon's employees"),
    employee_id: Optional[UUID] = Query(None, description="Commissions of one salon employee"),
    paid: Optional[bool] = Query(None, description="Only paid (true) or unpaid (false) commissions"),
    group_by: str = Query("date", description="none, date, employee or status"),
    period: Optional[str] = Query(None, description="Restrict to a named period (all time when omitted)"),
    start_date: Optional[date] = Query(None, description="Custom range start (inclusive)"),
    end_date: Optional[date] = Query(None, description="Custom range end (inclusive)"),
    service: ReportService = Depends(get_report_service),
    settings: ReportSettings = Depends(get_settings),
):
    """
    List commissions grouped for the payout screen.

    **Example usage:**
    - Unpaid by employee: `GET /api/v1/commissions/overview?salon_id=...&paid=false&group_by=employee`
    - One employee this week: `GET /api/v1/commissions/overview?employee_id=...&period=week`
    """
    try:
        grouping = GroupBy(group_by)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid group_by. Must be one of {[g.value for g in GroupBy]}, got '{group_by}'"
        )

    report_period = request_period(period, start_date, end_date, settings, default=None)
    filters = CommissionFilters(
        salon_id=salon_id,
        employee_id=employee_id,
        paid=paid,
        start_date=report_period.start_date if report_period else None,
        end_date=report_period.end_date if report_period else None,
    )

    try:
        overview = service.build_commission_overview(filters, group_by=grouping)

        return CommissionOverviewResponse(
            stats=commission_stats_model(overview.stats),
            group_by=grouping.value,
            groups=[commission_group_model(g) for g in overview.groups],
            is_degraded=bool(overview.warnings),
            warnings=warning_models(overview.warnings),
        )

    except HTTPException:
        raise
    except NoSalonAvailableError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception("Commission overview failed", extra={"salon_id": str(salon_id)})
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build commission overview: {str(e)}"
        )
