"""
Commission repository (persistence).

Read-only queries over employee commissions. Marking commissions paid is done
by the payout flow of the platform, not here.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import List, Optional

from domain.commission import Commission, CommissionFilters
from repositories.client import get_supabase
from repositories.mappers import row_to_commission
from repositories.rows import fetch_all_pages, local_day_bounds, map_rows

_COMMISSIONS_TABLE: str = "commissions"

# !inner makes the salon filter on the embedded employee exclude other salons.
_COMMISSION_SELECT: str = (
    "*, employee:salon_employees!inner(id, salon_id, role_title, user:users(full_name))"
)


def list_commissions(filters: CommissionFilters, tz: Optional[tzinfo] = None) -> List[Commission]:
    """
    Query commissions matching the given filters.

    Args:
        filters: Optional salon, employee, paid flag and inclusive date bounds
        tz: Timezone of the date bounds (UTC when None)

    Returns:
        List[Commission] ordered newest first (possibly empty)
    """

    start_iso = end_iso = None
    if filters.start_date is not None or filters.end_date is not None:
        start = filters.start_date or filters.end_date
        end = filters.end_date or filters.start_date
        bounds = local_day_bounds(start, end, tz)
        start_iso = bounds[0] if filters.start_date is not None else None
        end_iso = bounds[1] if filters.end_date is not None else None

    def build_query():
        query = get_supabase().table(_COMMISSIONS_TABLE).select(_COMMISSION_SELECT)
        if filters.salon_id is not None:
            query = query.eq("employee.salon_id", str(filters.salon_id))
        if filters.employee_id is not None:
            query = query.eq("salon_employee_id", str(filters.employee_id))
        if filters.paid is not None:
            query = query.eq("paid", filters.paid)
        if start_iso is not None:
            query = query.gte("created_at", start_iso)
        if end_iso is not None:
            query = query.lt("created_at", end_iso)
        return query.order("created_at", desc=True)

    rows = fetch_all_pages(build_query, "list commissions")
    return map_rows(rows, row_to_commission, "list commissions")


__all__ = ["list_commissions"]
