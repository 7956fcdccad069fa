"""
Domain: Employee commissions.

A Commission is a payable owed to a salon employee for a sale or an
appointment. It is created unpaid when the sale happens and marked paid
exactly once by the payout flow. Reporting only reads commissions.

Accounting policy: commissions are an accrued cost. They count as an expense
the moment they are earned, whether or not they have been paid yet.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional
from uuid import UUID

from .money import to_decimal
from .time import require_utc_timestamp

UNKNOWN_EMPLOYEE = "Unknown Employee"


class CommissionSource(str, Enum):
    SALE = "sale"
    APPOINTMENT = "appointment"

    @staticmethod
    def from_metadata(metadata: Optional[Mapping[str, Any]]) -> "CommissionSource":
        """Commissions are tagged with their origin in metadata; untagged ones come from sales."""

        raw = (metadata or {}).get("source")
        if raw == CommissionSource.APPOINTMENT.value:
            return CommissionSource.APPOINTMENT
        return CommissionSource.SALE


@dataclass(frozen=True, slots=True)
class Commission:
    """
    Immutable record of a commission owed to an employee.

    Invariants:
    - created_at (and paid_at when present) are UTC timestamps.
    - amount, commission_rate and sale_amount are Decimals (missing -> 0).
    """

    commission_id: UUID
    amount: Decimal
    created_at: datetime
    paid: bool = False
    commission_rate: Decimal = Decimal("0")
    sale_amount: Decimal = Decimal("0")
    paid_at: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    source: CommissionSource = CommissionSource.SALE
    employee_id: Optional[UUID] = None
    employee_name: Optional[str] = None
    employee_role_title: Optional[str] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        if self.paid_at is not None:
            require_utc_timestamp("paid_at", self.paid_at)
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "commission_rate", to_decimal(self.commission_rate))
        object.__setattr__(self, "sale_amount", to_decimal(self.sale_amount))
        object.__setattr__(self, "paid", bool(self.paid))

    @property
    def display_employee_name(self) -> str:
        """Employee full name, else role title, else a generic placeholder."""

        return self.employee_name or self.employee_role_title or UNKNOWN_EMPLOYEE


@dataclass(frozen=True, slots=True)
class CommissionFilters:
    """
    Filter criteria for commission queries. Every field is optional.

    Date bounds are inclusive local calendar dates applied to created_at.
    """

    salon_id: Optional[UUID] = None
    employee_id: Optional[UUID] = None
    paid: Optional[bool] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


__all__ = ["UNKNOWN_EMPLOYEE", "CommissionSource", "Commission", "CommissionFilters"]
