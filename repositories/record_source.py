"""
Supabase-backed RecordSource used by the report service in production.
"""

from __future__ import annotations

from datetime import date, tzinfo
from typing import List, Optional
from uuid import UUID

from domain.appointment import Appointment
from domain.commission import Commission, CommissionFilters
from domain.sale import Sale
from repositories.appointment_repository import list_appointments_for_salon
from repositories.commission_repository import list_commissions
from repositories.salon_repository import get_first_salon_id_for_owner
from repositories.sale_repository import list_sales_for_salon


class SupabaseRecordSource:
    """Delegates each fetch to its repository, applying the report timezone to date bounds."""

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self._tz = tz

    def fetch_sales(self, salon_id: UUID, start_date: date, end_date: date) -> List[Sale]:
        return list_sales_for_salon(salon_id, start_date, end_date, tz=self._tz)

    def fetch_commissions(self, filters: CommissionFilters) -> List[Commission]:
        return list_commissions(filters, tz=self._tz)

    def fetch_appointments(self, salon_id: UUID) -> List[Appointment]:
        return list_appointments_for_salon(salon_id)

    def resolve_salon_id(self, owner_id: UUID) -> Optional[UUID]:
        return get_first_salon_id_for_owner(owner_id)


__all__ = ["SupabaseRecordSource"]
