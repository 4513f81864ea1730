"""Customer note input schemas."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from poolcrm_shared.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

from poolcrm_api.validation.base import Schema, require_text, require_uuid


def check_content(value: Any) -> str:
    return require_text(
        value or "",
        max_length=10_000,
        required="Note content is required",
        too_long="Note content must be 10,000 characters or less",
    )


class NoteCreate(Schema):
    customer_id: str
    content: str

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer_id(cls, v: Any) -> str:
        return require_uuid(v, "Invalid customer ID")

    @field_validator("content", mode="before")
    @classmethod
    def _content(cls, v: Any) -> str:
        return check_content(v)


class NoteUpdate(Schema):
    content: str

    @field_validator("content", mode="before")
    @classmethod
    def _content(cls, v: Any) -> str:
        return check_content(v)


class NoteListParams(Schema):
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    cursor: str | None = None
