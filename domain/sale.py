"""
Domain: Sales and sale line items.

A Sale is one completed transaction at a salon. It is immutable once created
and read-only for reporting. Line items reference either a service or a
product.

Numeric fields are normalized to Decimal at construction; a missing amount is
a zero amount.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple
from uuid import UUID

from .money import DEFAULT_CURRENCY, to_decimal
from .time import require_utc_timestamp


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    MOBILE_MONEY = "mobile_money"
    BANK_TRANSFER = "bank_transfer"
    UNKNOWN = "unknown"

    @staticmethod
    def parse(value: Optional[str]) -> "PaymentMethod":
        """Resolve a stored payment method; absent or unrecognized values map to UNKNOWN."""

        if not value:
            return PaymentMethod.UNKNOWN
        try:
            return PaymentMethod(str(value).strip().lower())
        except ValueError:
            return PaymentMethod.UNKNOWN

    @property
    def label(self) -> str:
        if self is PaymentMethod.UNKNOWN:
            return "Unknown"
        return self.value.replace("_", " ").title()


class ItemKind(str, Enum):
    SERVICE = "service"
    PRODUCT = "product"

    @property
    def fallback_name(self) -> str:
        return "Unknown Service" if self is ItemKind.SERVICE else "Unknown Product"


@dataclass(frozen=True, slots=True)
class SaleItem:
    """
    One line of a sale: a service or product, its quantity and its line total.
    """

    item_id: UUID
    kind: ItemKind
    name: str
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal
    service_id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    employee_id: Optional[UUID] = None
    employee_name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", to_decimal(self.quantity))
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price))
        object.__setattr__(self, "line_total", to_decimal(self.line_total))
        if not self.name:
            object.__setattr__(self, "name", self.kind.fallback_name)


@dataclass(frozen=True, slots=True)
class Sale:
    """
    Immutable record of a completed sale.

    created_at must be a UTC timestamp; the local calendar day of the sale is
    derived from it at reporting time.
    """

    sale_id: UUID
    total_amount: Decimal
    created_at: datetime
    payment_method: PaymentMethod = PaymentMethod.UNKNOWN
    currency: str = DEFAULT_CURRENCY
    items: Tuple[SaleItem, ...] = field(default_factory=tuple)
    customer_id: Optional[UUID] = None
    salon_id: Optional[UUID] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        object.__setattr__(self, "total_amount", to_decimal(self.total_amount))
        if not isinstance(self.payment_method, PaymentMethod):
            object.__setattr__(self, "payment_method", PaymentMethod.parse(self.payment_method))
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def items_of_kind(self, kind: ItemKind) -> Tuple[SaleItem, ...]:
        return tuple(item for item in self.items if item.kind is kind)


__all__ = ["PaymentMethod", "ItemKind", "SaleItem", "Sale"]
