"""
Appointment repository (persistence).

Read-only: reports count bookings, they never change them.
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from domain.appointment import Appointment
from repositories.client import get_supabase
from repositories.mappers import row_to_appointment
from repositories.rows import fetch_all_pages, map_rows

_APPOINTMENTS_TABLE: str = "appointments"


def list_appointments_for_salon(salon_id: UUID) -> List[Appointment]:
    """
    Retrieve all appointments of a salon, ordered by scheduled start.

    Returns:
        List[Appointment] (possibly empty)
    """

    def build_query():
        return (
            get_supabase()
            .table(_APPOINTMENTS_TABLE)
            .select("*")
            .eq("salon_id", str(salon_id))
            .order("scheduled_start")
        )

    rows = fetch_all_pages(build_query, "list appointments")
    return map_rows(rows, row_to_appointment, "list appointments")


__all__ = ["list_appointments_for_salon"]
