"""
Salon repository (persistence).

Only what reporting needs: finding the salon a user owns when a request does
not name one.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from repositories.client import get_supabase
from repositories.rows import response_rows

_SALONS_TABLE: str = "salons"


def get_first_salon_id_for_owner(owner_id: UUID) -> Optional[UUID]:
    """
    The oldest salon owned by a user.

    Returns:
        Salon id, or None if the user owns no salon
    """

    response = (
        get_supabase()
        .table(_SALONS_TABLE)
        .select("id")
        .eq("owner_id", str(owner_id))
        .order("created_at")
        .limit(1)
        .execute()
    )
    rows = response_rows(response, "look up salon")

    if not rows:
        return None

    return UUID(str(rows[0]["id"]))


__all__ = ["get_first_salon_id_for_owner"]
