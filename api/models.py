"""
API Response Models.

Pydantic models for serializing report responses. Monetary values are
Decimals and serialize as strings; percentages are numbers.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


# ============================================================================
# Shared Models
# ============================================================================

class PeriodModel(BaseModel):
    """Inclusive calendar date range."""
    start_date: date
    end_date: date
    days: int


class MetricValueModel(BaseModel):
    """A metric with its change against the previous period."""
    value: Decimal
    previous_value: Decimal
    change_percent: float


class CategoryShareModel(BaseModel):
    """One slice of a breakdown."""
    key: Optional[str] = None
    label: str
    amount: Decimal
    percentage: int
    count: int
    units: Optional[Decimal] = None
    average: Decimal


class TrendBucketModel(BaseModel):
    key: str  # "2025-03-01" (daily) or "2025-03" (monthly)
    label: str
    start_date: date
    value: Decimal


class TimeSeriesModel(BaseModel):
    granularity: str  # "daily" or "monthly"
    buckets: List[TrendBucketModel]
    total: Decimal


class CommissionStatsModel(BaseModel):
    """Paid vs unpaid commission totals."""
    total: Decimal
    paid: Decimal
    unpaid: Decimal
    paid_count: int
    unpaid_count: int


class AppointmentStatsModel(BaseModel):
    total: int
    by_status: Dict[str, int]
    completion_rate: float


class FinancialSummaryModel(BaseModel):
    """Raw totals for one period."""
    revenue: Decimal
    expenses: Decimal
    net_income: Decimal
    profit_margin: float
    is_profit: bool
    sales_count: int
    average_sale: Decimal


class WarningModel(BaseModel):
    """A record source that failed and was treated as empty."""
    source: str
    message: str


# ============================================================================
# Report Models
# ============================================================================

class FinancialReportResponse(BaseModel):
    """Financial dashboard for one salon and period."""
    salon_id: UUID
    currency: str
    period: PeriodModel
    previous_period: PeriodModel
    current: FinancialSummaryModel
    previous: FinancialSummaryModel
    metrics: Dict[str, MetricValueModel]
    payment_methods: List[CategoryShareModel]
    employee_expenses: List[CategoryShareModel]
    top_services: List[CategoryShareModel]
    top_products: List[CategoryShareModel]
    trend: TimeSeriesModel
    commission_stats: CommissionStatsModel
    appointment_stats: AppointmentStatsModel
    generated_at: datetime
    is_degraded: bool
    warnings: List[WarningModel]

    class Config:
        json_schema_extra = {
            "example": {
                "salon_id": "123e4567-e89b-12d3-a456-426614174000",
                "currency": "RWF",
                "period": {"start_date": "2025-03-01", "end_date": "2025-03-30", "days": 30},
                "previous_period": {"start_date": "2025-01-30", "end_date": "2025-02-28", "days": 30},
                "metrics": {
                    "revenue": {"value": "450000", "previous_value": "300000", "change_percent": 50.0}
                },
                "is_degraded": False,
                "warnings": []
            }
        }


class ExpenseBreakdownResponse(BaseModel):
    """Commission expenses per employee."""
    salon_id: UUID
    period: PeriodModel
    total: Decimal
    categories: List[CategoryShareModel]
    commission_stats: CommissionStatsModel
    is_degraded: bool
    warnings: List[WarningModel]


class RevenueBreakdownResponse(BaseModel):
    """Revenue by service and by product."""
    salon_id: UUID
    period: PeriodModel
    total_revenue: Decimal
    service_revenue: Decimal
    product_revenue: Decimal
    services: List[CategoryShareModel]
    products: List[CategoryShareModel]
    is_degraded: bool
    warnings: List[WarningModel]


class ProfitLossResponse(BaseModel):
    """Profit and loss statement."""
    salon_id: UUID
    period: PeriodModel
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
    is_degraded: bool
    warnings: List[WarningModel]

    class Config:
        json_schema_extra = {
            "example": {
                "salon_id": "123e4567-e89b-12d3-a456-426614174000",
                "period": {"start_date": "2025-03-01", "end_date": "2025-03-30", "days": 30},
                "service_revenue": "400000",
                "product_revenue": "50000",
                "other_revenue": "0",
                "total_revenue": "450000",
                "commission_expenses": "90000",
                "other_expenses": "0",
                "total_expenses": "90000",
                "gross_profit": "360000",
                "net_profit": "360000",
                "profit_margin": 80.0,
                "is_degraded": False,
                "warnings": []
            }
        }


# ============================================================================
# Commission Models
# ============================================================================

class CommissionItemModel(BaseModel):
    """Single commission in a ledger group."""
    commission_id: UUID
    employee_id: Optional[UUID] = None
    employee_name: str
    amount: Decimal
    commission_rate: Decimal
    sale_amount: Decimal
    source: str  # "sale" or "appointment"
    paid: bool
    paid_at: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    created_at: datetime


class CommissionGroupModel(BaseModel):
    label: str
    total: Decimal
    unpaid_count: int
    commissions: List[CommissionItemModel]


class CommissionOverviewResponse(BaseModel):
    """Commission totals and display groups."""
    stats: CommissionStatsModel
    group_by: str
    groups: List[CommissionGroupModel]
    is_degraded: bool
    warnings: List[WarningModel]


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int = Field(..., ge=400)

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Not found",
                "detail": "No salon available",
                "status_code": 404
            }
        }
