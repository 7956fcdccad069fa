"""
FastAPI dependencies.

The report service is built per request from environment settings. Tests
replace `get_record_source` through `app.dependency_overrides`.
"""

from datetime import date
from typing import Optional

from fastapi import Depends, HTTPException

from domain.period import Period, custom_period, resolve_period
from repositories.record_source import SupabaseRecordSource
from services.config import ReportSettings, load_settings
from services.report_service import RecordSource, ReportService


def get_settings() -> ReportSettings:
    return load_settings()


def get_record_source(settings: ReportSettings = Depends(get_settings)) -> RecordSource:
    return SupabaseRecordSource(tz=settings.timezone)


def get_report_service(
    source: RecordSource = Depends(get_record_source),
    settings: ReportSettings = Depends(get_settings),
) -> ReportService:
    return ReportService(
        source,
        tz=settings.timezone,
        max_workers=settings.fetch_workers,
        currency=settings.currency,
    )


def request_period(
    period: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
    settings: ReportSettings,
    default: Optional[str] = "month",
) -> Optional[Period]:
    """
    Turn query parameters into a Period.

    Explicit dates win over a period token and must be given together.
    Returns None only when nothing was given and there is no default.

    Raises:
        HTTPException: 400 for half-given dates, inverted dates or an unknown token
    """

    try:
        if start_date is not None or end_date is not None:
            if start_date is None or end_date is None:
                raise HTTPException(
                    status_code=400,
                    detail="start_date and end_date must be given together",
                )
            return custom_period(start_date, end_date)

        token = period or default
        if token is None:
            return None
        return resolve_period(token, tz=settings.timezone)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
