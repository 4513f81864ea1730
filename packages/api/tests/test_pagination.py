"""Tests for cursor pagination helpers."""

from __future__ import annotations

import base64
import json

from poolcrm_api.utils.pagination import build_page, cursor_value, decode_cursor, encode_cursor


def _rows(n):
    return [
        {"id": f"id-{i}", "updated_at": f"2025-01-{20 - i:02d}T10:00:00+00:00"}
        for i in range(n)
    ]


def test_cursor_is_urlsafe_base64_json():
    cursor = encode_cursor("updatedAt", "2025-01-15T10:00:00+00:00", "abc")
    payload = json.loads(base64.urlsafe_b64decode(cursor))
    assert payload == {"updatedAt": "2025-01-15T10:00:00+00:00", "id": "abc"}
    assert cursor_value(cursor, "updatedAt") == "2025-01-15T10:00:00+00:00"


def test_malformed_cursor_means_first_page():
    assert decode_cursor("!!!not-base64") == {}
    assert decode_cursor(base64.urlsafe_b64encode(b"[1, 2]").decode()) == {}
    assert decode_cursor(None) == {}
    assert cursor_value("garbage", "updatedAt") is None


def test_build_page_with_more_rows():
    page = build_page(_rows(4), 3, sort_key="updatedAt", sort_column="updated_at", total=9)
    assert [r["id"] for r in page.items] == ["id-0", "id-1", "id-2"]
    assert page.has_more is True
    assert decode_cursor(page.next_cursor) == {
        "updatedAt": "2025-01-18T10:00:00+00:00",
        "id": "id-2",
    }
    body = page.to_api()
    assert body["hasMore"] is True
    assert body["total"] == 9
    assert body["nextCursor"] == page.next_cursor


def test_build_page_last_page():
    page = build_page(_rows(2), 3, sort_key="updatedAt", sort_column="updated_at")
    assert len(page.items) == 2
    assert page.has_more is False
    assert page.next_cursor is None


def test_build_page_empty():
    page = build_page([], 25, sort_key="createdAt", sort_column="created_at")
    assert page.to_api() == {"items": [], "nextCursor": None, "hasMore": False, "total": None}
