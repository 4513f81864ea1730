"""Supabase filter builders shared by the services."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any


def _iso(value: date | datetime | str) -> str:
    return value if isinstance(value, str) else value.isoformat()


def apply_date_filters(
    query: Any,
    column: str,
    start: date | datetime | str | None,
    end: date | datetime | str | None,
) -> Any:
    """Apply an inclusive date/time range to a Supabase query builder."""
    if start is not None:
        query = query.gte(column, _iso(start))
    if end is not None:
        query = query.lte(column, _iso(end))
    return query


def apply_cursor_filter(
    query: Any,
    column: str,
    cursor_value: Any | None,
    *,
    descending: bool = True,
) -> Any:
    """Keyset filter: rows strictly after the cursor in sort order."""
    if cursor_value is None:
        return query
    return query.lt(column, cursor_value) if descending else query.gt(column, cursor_value)


def apply_text_search(
    query: Any,
    column: str,
    search_term: str | None,
) -> Any:
    """Case-insensitive substring match using ilike."""
    if search_term:
        query = query.ilike(column, f"%{escape_like(search_term)}%")
    return query


def apply_full_text_search(
    query: Any,
    column: str,
    search_term: str | None,
) -> Any:
    """Postgres websearch over a generated tsvector column."""
    if search_term and search_term.strip():
        query = query.text_search(
            column,
            search_term.strip(),
            options={"type": "websearch", "config": "english"},
        )
    return query


def escape_like(term: str) -> str:
    """Drop characters that are meaningful to PostgREST filter syntax."""
    return term.replace(",", " ").replace("(", " ").replace(")", " ").replace("%", "").strip()


def apply_soft_delete_filter(query: Any, include_deleted: bool = False) -> Any:
    if not include_deleted:
        query = query.is_("deleted_at", "null")
    return query
