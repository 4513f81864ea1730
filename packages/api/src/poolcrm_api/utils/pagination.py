"""Cursor-based (keyset) pagination helpers.

A cursor is urlsafe base64 of JSON holding the sort value and id of the last
row of the previous page, e.g. {"updatedAt": "2025-01-15T10:00:00+00:00",
"id": "..."}. Services fetch limit + 1 rows to learn whether another page
exists.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Sequence
from typing import Any

from poolcrm_api.responses import Page


def encode_cursor(sort_key: str, sort_value: Any, last_id: str) -> str:
    payload = {sort_key: sort_value, "id": last_id}
    return base64.urlsafe_b64encode(json.dumps(payload, default=str).encode()).decode()


def decode_cursor(cursor: str | None) -> dict[str, Any]:
    """Decode a cursor; anything malformed yields {} (first page)."""
    if not cursor:
        return {}
    try:
        raw = base64.urlsafe_b64decode(cursor.encode())
        payload = json.loads(raw)
    except (ValueError, TypeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def cursor_value(cursor: str | None, sort_key: str) -> Any | None:
    return decode_cursor(cursor).get(sort_key)


def build_page(
    rows: Sequence[dict[str, Any]],
    limit: int,
    *,
    sort_key: str,
    sort_column: str,
    id_column: str = "id",
    total: int | None = None,
) -> Page[dict[str, Any]]:
    """
    Trim a limit + 1 result set to one page and compute the next cursor.

    Args:
        rows:        Rows as returned by the database (snake_case columns).
        limit:       Requested page size.
        sort_key:    Key name stored in the cursor (camelCase).
        sort_column: Column the rows are ordered by.
    """
    has_more = len(rows) > limit
    items = list(rows[:limit])
    next_cursor = None
    if has_more and items:
        last = items[-1]
        next_cursor = encode_cursor(sort_key, last.get(sort_column), str(last[id_column]))
    return Page[dict[str, Any]](
        items=items, next_cursor=next_cursor, has_more=has_more, total=total
    )
