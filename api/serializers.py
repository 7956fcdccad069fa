"""
Conversions from domain/service results to API response models.
"""

from typing import Iterable, List, Sequence

from api.models import (
    AppointmentStatsModel,
    CategoryShareModel,
    CommissionGroupModel,
    CommissionItemModel,
    CommissionStatsModel,
    FinancialSummaryModel,
    MetricValueModel,
    PeriodModel,
    TimeSeriesModel,
    TrendBucketModel,
    WarningModel,
)
from domain.commission import Commission
from domain.period import Period
from domain.summary import (
    AppointmentStats,
    CategoryShare,
    CommissionStats,
    FinancialSummary,
    MetricValue,
    ReportWarning,
    TimeSeries,
)
from services.commission_ledger_service import CommissionGroup


def period_model(period: Period) -> PeriodModel:
    return PeriodModel(start_date=period.start_date, end_date=period.end_date, days=period.days)


def metric_model(metric: MetricValue) -> MetricValueModel:
    return MetricValueModel(
        value=metric.value,
        previous_value=metric.previous_value,
        change_percent=metric.change_percent,
    )


def share_models(shares: Iterable[CategoryShare]) -> List[CategoryShareModel]:
    return [
        CategoryShareModel(
            key=share.key,
            label=share.label,
            amount=share.amount,
            percentage=share.percentage,
            count=share.count,
            units=share.units,
            average=share.average,
        )
        for share in shares
    ]


def time_series_model(series: TimeSeries) -> TimeSeriesModel:
    return TimeSeriesModel(
        granularity=series.granularity.value,
        buckets=[
            TrendBucketModel(key=b.key, label=b.label, start_date=b.start_date, value=b.value)
            for b in series.buckets
        ],
        total=series.total,
    )


def commission_stats_model(stats: CommissionStats) -> CommissionStatsModel:
    return CommissionStatsModel(
        total=stats.total,
        paid=stats.paid,
        unpaid=stats.unpaid,
        paid_count=stats.paid_count,
        unpaid_count=stats.unpaid_count,
    )


def appointment_stats_model(stats: AppointmentStats) -> AppointmentStatsModel:
    return AppointmentStatsModel(
        total=stats.total,
        by_status=dict(stats.by_status),
        completion_rate=stats.completion_rate,
    )


def summary_model(summary: FinancialSummary) -> FinancialSummaryModel:
    return FinancialSummaryModel(
        revenue=summary.revenue,
        expenses=summary.expenses,
        net_income=summary.net_income,
        profit_margin=summary.profit_margin,
        is_profit=summary.is_profit,
        sales_count=summary.sales_count,
        average_sale=summary.average_sale,
    )


def warning_models(warnings: Sequence[ReportWarning]) -> List[WarningModel]:
    return [WarningModel(source=w.source, message=w.message) for w in warnings]


def commission_item_model(commission: Commission) -> CommissionItemModel:
    return CommissionItemModel(
        commission_id=commission.commission_id,
        employee_id=commission.employee_id,
        employee_name=commission.display_employee_name,
        amount=commission.amount,
        commission_rate=commission.commission_rate,
        sale_amount=commission.sale_amount,
        source=commission.source.value,
        paid=commission.paid,
        paid_at=commission.paid_at,
        payment_method=commission.payment_method,
        payment_reference=commission.payment_reference,
        created_at=commission.created_at,
    )


def commission_group_model(group: CommissionGroup) -> CommissionGroupModel:
    return CommissionGroupModel(
        label=group.label,
        total=group.total,
        unpaid_count=group.unpaid_count,
        commissions=[commission_item_model(c) for c in group.commissions],
    )
