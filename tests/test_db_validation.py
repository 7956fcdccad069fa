"""
Database validation tests.

This module checks the Supabase connection and verifies that:
1. Connection credentials work
2. The tables reports read from exist
3. The embedded selects used by the repositories are accepted
4. The repositories return typed records

They only read. Skipped unless SUPABASE_URL and SUPABASE_KEY are set (for
example in a `.env` file at the project root).
"""

from __future__ import annotations

import os
from datetime import date, timedelta
from pathlib import Path
from uuid import UUID

import pytest
from dotenv import load_dotenv

# Load .env file before anything else
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

pytestmark = pytest.mark.skipif(
    not (os.getenv("SUPABASE_URL") and os.getenv("SUPABASE_KEY")),
    reason="SUPABASE_URL / SUPABASE_KEY not set",
)

REQUIRED_TABLES = ["salons", "sales", "sale_items", "commissions", "appointments"]


def test_supabase_url_format() -> None:
    assert os.getenv("SUPABASE_URL", "").startswith("https://"), "SUPABASE_URL should start with https://"


def test_supabase_client_initialization() -> None:
    """Test that the Supabase client can be initialized."""

    from repositories.client import get_supabase

    try:
        assert get_supabase() is not None
    except RuntimeError as e:
        pytest.fail(f"Failed to initialize Supabase client: {e}")


@pytest.mark.parametrize("table", REQUIRED_TABLES)
def test_table_exists(table: str) -> None:
    """Verify each table reports depend on exists and can be queried."""

    from repositories.client import get_supabase

    try:
        get_supabase().table(table).select("*").limit(0).execute()
    except Exception as e:
        pytest.fail(
            f"'{table}' table does not exist or cannot be accessed: {e}\n"
            f"Reports need this table in Supabase."
        )


def _any_salon_id():
    from repositories.client import get_supabase

    response = get_supabase().table("salons").select("id").limit(1).execute()
    rows = getattr(response, "data", None) or []
    if not rows:
        pytest.skip("No salons in the database")
    return UUID(str(rows[0]["id"]))


def test_sale_repository_reads_typed_sales() -> None:
    from domain.sale import Sale
    from repositories.sale_repository import list_sales_for_salon

    end = date.today()
    sales = list_sales_for_salon(_any_salon_id(), end - timedelta(days=29), end)

    assert all(isinstance(sale, Sale) for sale in sales)


def test_commission_repository_reads_typed_commissions() -> None:
    from domain.commission import Commission, CommissionFilters
    from repositories.commission_repository import list_commissions

    commissions = list_commissions(CommissionFilters(salon_id=_any_salon_id()))

    assert all(isinstance(c, Commission) for c in commissions)


def test_appointment_repository_reads_typed_appointments() -> None:
    from domain.appointment import Appointment
    from repositories.appointment_repository import list_appointments_for_salon

    appointments = list_appointments_for_salon(_any_salon_id())

    assert all(isinstance(a, Appointment) for a in appointments)
