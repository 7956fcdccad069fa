"""
Commission ledger service.

Read-only views over a list of commissions for the payout screens:
- grouping by date, employee or status, in display order
- selecting unpaid commissions for a bulk payment

Nothing here marks a commission paid; the payout itself belongs to the
platform API.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta, tzinfo
from decimal import Decimal
from enum import Enum
from typing import Collection, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from domain.commission import Commission
from domain.money import ZERO
from domain.time import local_date

ALL_COMMISSIONS = "All Commissions"
TODAY = "Today"
YESTERDAY = "Yesterday"

_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
PAID = "Paid"
UNPAID = "Unpaid"


class GroupBy(str, Enum):
    NONE = "none"
    DATE = "date"
    EMPLOYEE = "employee"
    STATUS = "status"


@dataclass(frozen=True, slots=True)
class CommissionGroup:
    label: str
    commissions: Tuple[Commission, ...]
    total: Decimal
    unpaid_count: int
    sort_date: Optional[date] = None


@dataclass(frozen=True, slots=True)
class BulkPaymentSelection:
    """Unpaid commissions picked for one payout."""

    commissions: Tuple[Commission, ...]
    total: Decimal

    @property
    def count(self) -> int:
        return len(self.commissions)

    @property
    def commission_ids(self) -> List[UUID]:
        return [c.commission_id for c in self.commissions]


def _date_label(day: date, today: date) -> str:
    if day == today:
        return TODAY
    if day == today - timedelta(days=1):
        return YESTERDAY
    # e.g. "Monday, March 3, 2025"
    return f"{_DAY_NAMES[day.weekday()]}, {_MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"


def group_commissions(
    commissions: Sequence[Commission],
    group_by: GroupBy | str = GroupBy.DATE,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> List[CommissionGroup]:
    """
    Group commissions for display.

    Ordering:
    - date: Today, Yesterday, then older days newest first
    - employee: alphabetical by employee name
    - status: Unpaid before Paid
    - none: a single "All Commissions" group
    """

    group_by = GroupBy(group_by)
    if today is None:
        today = date.today()

    if group_by is GroupBy.NONE:
        return [_make_group(ALL_COMMISSIONS, list(commissions))]

    buckets: Dict[str, List[Commission]] = {}
    dates: Dict[str, date] = {}
    for commission in commissions:
        if group_by is GroupBy.DATE:
            day = local_date(commission.created_at, tz)
            label = _date_label(day, today)
            dates[label] = day
        elif group_by is GroupBy.EMPLOYEE:
            label = commission.display_employee_name
        else:
            label = PAID if commission.paid else UNPAID
        buckets.setdefault(label, []).append(commission)

    if group_by is GroupBy.DATE:
        labels = sorted(buckets, key=lambda label: dates[label], reverse=True)
    elif group_by is GroupBy.STATUS:
        labels = sorted(buckets, key=lambda label: 0 if label == UNPAID else 1)
    else:
        labels = sorted(buckets)

    return [_make_group(label, buckets[label], dates.get(label)) for label in labels]


def _make_group(label: str, commissions: List[Commission], sort_date: Optional[date] = None) -> CommissionGroup:
    return CommissionGroup(
        label=label,
        commissions=tuple(commissions),
        total=sum((c.amount for c in commissions), ZERO),
        unpaid_count=sum(1 for c in commissions if not c.paid),
        sort_date=sort_date,
    )


def select_for_bulk_payment(
    commissions: Sequence[Commission],
    selected_ids: Collection[UUID],
) -> BulkPaymentSelection:
    """
    Resolve a user's selection into the commissions that can actually be paid.

    Already-paid commissions and unknown ids are dropped silently; the order of
    `commissions` is preserved.
    """

    wanted = set(selected_ids)
    chosen = tuple(c for c in commissions if c.commission_id in wanted and not c.paid)
    return BulkPaymentSelection(commissions=chosen, total=sum((c.amount for c in chosen), ZERO))


def select_all_unpaid(commissions: Sequence[Commission]) -> BulkPaymentSelection:
    return select_for_bulk_payment(commissions, [c.commission_id for c in commissions])


__all__ = [
    "GroupBy",
    "CommissionGroup",
    "BulkPaymentSelection",
    "group_commissions",
    "select_for_bulk_payment",
    "select_all_unpaid",
]
