"""
Row -> domain record mappers.

Rows arrive as PostgREST JSON with embedded relations (see the select strings
in each repository). Numeric columns (NUMERIC) come back as strings and are
normalized by the domain constructors via `to_decimal`.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional
from uuid import UUID

from domain.appointment import Appointment, AppointmentStatus
from domain.commission import Commission, CommissionSource
from domain.money import DEFAULT_CURRENCY
from domain.sale import ItemKind, PaymentMethod, Sale, SaleItem
from repositories.rows import (
    parse_bool,
    parse_optional_datetime,
    parse_optional_uuid,
    parse_utc_datetime,
    related,
)


def _employee_fields(row: Mapping[str, Any]) -> tuple[Optional[UUID], Optional[str], Optional[str]]:
    """(employee_id, full name, role title) from an embedded salon_employees relation."""

    employee = related(row, "employee")
    user = related(employee, "user")
    employee_id = parse_optional_uuid(employee.get("id") or row.get("salon_employee_id"))
    return employee_id, user.get("full_name") or None, employee.get("role_title") or None


def row_to_sale_item(row: Mapping[str, Any]) -> SaleItem:
    if row.get("product_id") and not row.get("service_id"):
        kind = ItemKind.PRODUCT
        name = related(row, "product").get("name")
    else:
        kind = ItemKind.SERVICE
        name = related(row, "service").get("name")

    employee_id, employee_name, role_title = _employee_fields(row)

    return SaleItem(
        item_id=UUID(str(row["id"])),
        kind=kind,
        name=name or kind.fallback_name,
        quantity=row.get("quantity", 1),
        unit_price=row.get("unit_price"),
        line_total=row.get("line_total"),
        service_id=parse_optional_uuid(row.get("service_id")),
        product_id=parse_optional_uuid(row.get("product_id")),
        employee_id=employee_id,
        employee_name=employee_name or role_title,
    )


def row_to_sale(row: Mapping[str, Any]) -> Sale:
    """Convert a Supabase sales row (with embedded items) into a Sale."""

    items = row.get("items") or []
    return Sale(
        sale_id=UUID(str(row["id"])),
        total_amount=row.get("total_amount"),
        created_at=parse_utc_datetime(row["created_at"]),
        payment_method=PaymentMethod.parse(row.get("payment_method")),
        currency=str(row.get("currency") or DEFAULT_CURRENCY).strip(),
        items=tuple(row_to_sale_item(item) for item in items if isinstance(item, Mapping)),
        customer_id=parse_optional_uuid(row.get("customer_id")),
        salon_id=parse_optional_uuid(row.get("salon_id")),
    )


def row_to_commission(row: Mapping[str, Any]) -> Commission:
    """Convert a Supabase commissions row (with embedded employee) into a Commission."""

    employee_id, employee_name, role_title = _employee_fields(row)
    metadata = row.get("metadata") if isinstance(row.get("metadata"), Mapping) else {}

    return Commission(
        commission_id=UUID(str(row["id"])),
        amount=row.get("amount"),
        created_at=parse_utc_datetime(row["created_at"]),
        paid=parse_bool(row.get("paid")),
        commission_rate=row.get("commission_rate"),
        sale_amount=row.get("sale_amount"),
        paid_at=parse_optional_datetime(row.get("paid_at")),
        payment_method=row.get("payment_method"),
        payment_reference=row.get("payment_reference"),
        source=CommissionSource.from_metadata(metadata),
        employee_id=employee_id,
        employee_name=employee_name,
        employee_role_title=role_title,
    )


def row_to_appointment(row: Mapping[str, Any]) -> Appointment:
    raw_status = str(row.get("status") or AppointmentStatus.BOOKED.value).lower()
    try:
        status = AppointmentStatus(raw_status)
    except ValueError:
        status = AppointmentStatus.BOOKED

    return Appointment(
        appointment_id=UUID(str(row["id"])),
        scheduled_start=parse_utc_datetime(row["scheduled_start"]),
        scheduled_end=parse_utc_datetime(row["scheduled_end"]),
        status=status,
        customer_id=parse_optional_uuid(row.get("customer_id")),
        service_id=parse_optional_uuid(row.get("service_id")),
        salon_id=parse_optional_uuid(row.get("salon_id")),
        employee_id=parse_optional_uuid(row.get("salon_employee_id")),
    )


__all__ = ["row_to_sale_item", "row_to_sale", "row_to_commission", "row_to_appointment"]
