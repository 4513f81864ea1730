"""
models/activity.py — Pydantic models for the communications, customer_notes
and customer_attachments tables.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import Field

from poolcrm_shared.models.base import RowModel
from poolcrm_shared.models.customer import Admin


class Communication(RowModel):
    """Matches the communications table row (search_vector is DB-generated)."""

    relations: ClassVar[frozenset[str]] = frozenset({"logged_by_admin", "customer"})

    id: str | None = None
    customer_id: str
    type: str
    direction: str
    summary: str
    occurred_at: datetime
    logged_by: str | None = None
    created_at: datetime | None = None

    logged_by_admin: Admin | None = None
    customer: dict[str, Any] | None = None


class Attachment(RowModel):
    """Matches the customer_attachments table row."""

    id: str | None = None
    customer_id: str
    storage_path: str
    filename: str
    content_type: str
    size_bytes: int
    note_id: str | None = None
    uploaded_by: str | None = None
    created_at: datetime | None = None


class Note(RowModel):
    """Matches the customer_notes table row."""

    relations: ClassVar[frozenset[str]] = frozenset({"author", "attachments"})

    id: str | None = None
    customer_id: str
    content: str
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    author: Admin | None = None
    attachments: list[Attachment] = Field(default_factory=list)

    def preview(self, max_length: int = 100) -> str:
        return truncate_text(self.content, max_length)


def truncate_text(text: str, max_length: int = 100) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3].rstrip() + "..."
