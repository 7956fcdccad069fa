"""
Domain: monetary values.

All amounts are Decimals in a single currency unit. The database layer hands
back NUMERIC columns as strings (sometimes formatted), so every amount goes
through `to_decimal` exactly once, when a record is built.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")

DEFAULT_CURRENCY = "RWF"

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")


def to_decimal(value: Any) -> Decimal:
    """
    Normalize a raw numeric field into a Decimal.

    None, empty strings and unparseable text become 0. Never raises.
    """

    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return ZERO
        return Decimal(str(value))

    text = _NON_NUMERIC_RE.sub("", str(value))
    if not text:
        return ZERO
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return ZERO
    return parsed if parsed.is_finite() else ZERO


def round_half_up(value: Decimal, places: int = 0) -> Decimal:
    """Round like a dashboard does (0.5 always away from zero)."""

    exponent = Decimal(1).scaleb(-places)
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


__all__ = ["ZERO", "HUNDRED", "DEFAULT_CURRENCY", "to_decimal", "round_half_up"]
