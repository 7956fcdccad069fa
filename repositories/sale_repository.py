"""
Sale repository (persistence).

Read-only access to sales and their line items. Reporting never writes
sales; creating them belongs to the point-of-sale flow.
"""

from __future__ import annotations

from datetime import date, tzinfo
from typing import List, Optional
from uuid import UUID

from domain.sale import Sale
from repositories.client import get_supabase
from repositories.mappers import row_to_sale
from repositories.rows import fetch_all_pages, local_day_bounds, map_rows

# Supabase table name for sales.
_SALES_TABLE: str = "sales"

# Sales with their line items, item names and the employee on each line.
_SALE_SELECT: str = (
    "*, "
    "items:sale_items("
    "id, service_id, product_id, salon_employee_id, quantity, unit_price, line_total, "
    "service:services(name), "
    "product:products(name), "
    "employee:salon_employees(id, role_title, user:users(full_name))"
    ")"
)


def list_sales_for_salon(
    salon_id: UUID,
    start_date: date,
    end_date: date,
    tz: Optional[tzinfo] = None,
) -> List[Sale]:
    """
    Retrieve all sales of a salon created within [start_date, end_date].

    Both bounds are inclusive local calendar dates: the whole of end_date is
    covered.

    Args:
        salon_id: Salon identifier
        start_date: First day of the range
        end_date: Last day of the range
        tz: Timezone the calendar dates are expressed in (UTC when None)

    Returns:
        List[Sale] ordered by created_at (possibly empty)
    """

    start_iso, end_iso = local_day_bounds(start_date, end_date, tz)

    def build_query():
        return (
            get_supabase()
            .table(_SALES_TABLE)
            .select(_SALE_SELECT)
            .eq("salon_id", str(salon_id))
            .gte("created_at", start_iso)
            .lt("created_at", end_iso)
            .order("created_at")
        )

    rows = fetch_all_pages(build_query, "list sales")
    return map_rows(rows, row_to_sale, "list sales")


__all__ = ["list_sales_for_salon"]
