"""
Supabase client access.

The client is created on first use rather than at import time, so the
reporting services and API can be imported (and tested against fake record
sources) on machines without database credentials.

Environment variables required when a repository is actually called:
- SUPABASE_URL: Supabase project URL
- SUPABASE_KEY: Supabase API key (server-side key; reports read across salons)
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from supabase import Client, create_client  # type: ignore[import-not-found]

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Return the shared Supabase client, creating it on first call.

    Raises:
        RuntimeError: if SUPABASE_URL or SUPABASE_KEY is not set
    """

    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_KEY")

    if not url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )
    if not key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(url, key)


__all__ = ["get_supabase"]
