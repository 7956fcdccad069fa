"""
Row normalization helpers shared by the repositories.

This module never touches the Supabase client, so it can be imported (and
tested) without credentials. Everything that tolerates loose response shapes
lives here; the domain only ever sees typed records.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Callable, List, Mapping, Optional, TypeVar
from uuid import UUID

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Keys a list of rows may be wrapped under, in lookup order.
_ROW_CONTAINER_KEYS = ("data", "items", "sales", "commissions", "appointments")


def parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a Supabase timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    Naive values are taken to be UTC.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_optional_datetime(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return parse_utc_datetime(value)


def parse_optional_uuid(value: Any) -> Optional[UUID]:
    if value in (None, ""):
        return None
    return UUID(str(value))


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "t", "1", "yes"}
    return bool(value)


def unwrap_rows(payload: Any) -> List[Mapping[str, Any]]:
    """
    Extract the list of rows from a response payload.

    Accepts a bare list, or a mapping holding the list under one of the usual
    container keys (possibly nested once, e.g. {"data": {"items": [...]}}).
    Anything else yields an empty list.
    """

    if payload is None:
        return []
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, Mapping)]
    if isinstance(payload, Mapping):
        for key in _ROW_CONTAINER_KEYS:
            if key in payload:
                return unwrap_rows(payload[key])
    return []


def response_rows(response: Any, action: str) -> List[Mapping[str, Any]]:
    """
    Rows of a Supabase response, raising if the response carries an error.

    Raises:
        RuntimeError: if the response reports an error
    """

    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")
    return unwrap_rows(getattr(response, "data", None))


PAGE_SIZE = 1000


def fetch_all_pages(
    build_query: Callable[[], Any],
    action: str,
    page_size: int = PAGE_SIZE,
) -> List[Mapping[str, Any]]:
    """
    Execute a PostgREST query page by page until a short page comes back.

    `build_query` must return a fresh, fully filtered and ordered query each
    time it is called (query builders are not reusable after execute()).

    Raises:
        RuntimeError: if any page reports an error
    """

    all_rows: List[Mapping[str, Any]] = []
    offset = 0
    while True:
        response = build_query().range(offset, offset + page_size - 1).execute()
        page_rows = response_rows(response, action)
        all_rows.extend(page_rows)
        if len(page_rows) < page_size:
            break
        offset += len(page_rows)
    return all_rows


def map_rows(
    rows: List[Mapping[str, Any]],
    mapper: Callable[[Mapping[str, Any]], T],
    action: str,
) -> List[T]:
    """
    Map rows to records one at a time, skipping rows that cannot be mapped.

    A skipped row is logged with its id; the rest of the result is kept.
    """

    records: List[T] = []
    for row in rows:
        try:
            records.append(mapper(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Skipping malformed row during {action}",
                extra={"row_id": str(row.get("id")), "error": str(e)},
            )
    return records


def related(row: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """
    A joined relation embedded in a row.

    PostgREST embeds to-one relations as objects, but some views return them
    as single-element lists. Missing relations come back as {}.
    """

    value = row.get(key)
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, Mapping) else {}


def local_day_bounds(start_date: date, end_date: date, tz: Optional[tzinfo]) -> tuple[str, str]:
    """
    UTC ISO bounds covering whole local calendar days [start_date, end_date].

    The end bound is exclusive (midnight after end_date).
    """

    zone = tz or timezone.utc
    start = datetime.combine(start_date, time.min, tzinfo=zone)
    end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(timezone.utc).isoformat(), end.astimezone(timezone.utc).isoformat()


__all__ = [
    "parse_utc_datetime",
    "parse_optional_datetime",
    "parse_optional_uuid",
    "parse_bool",
    "unwrap_rows",
    "response_rows",
    "fetch_all_pages",
    "PAGE_SIZE",
    "related",
    "local_day_bounds",
]
