"""Communication log input schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator

from poolcrm_shared.constants import (
    COMMUNICATION_DIRECTIONS,
    COMMUNICATION_TYPES,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)
from poolcrm_shared.time_utils import parse_datetime

from poolcrm_api.validation.base import Schema, blank_to_none, require_text, require_uuid


def check_occurred_at(value: Any) -> datetime:
    if isinstance(value, datetime):
        return parse_datetime(value)
    try:
        return parse_datetime(str(value))
    except (ValueError, OverflowError):
        raise ValueError("Please enter a valid date and time") from None


class _CommunicationFields(Schema):
    @field_validator("type", mode="before", check_fields=False)
    @classmethod
    def _type(cls, v: Any) -> str:
        if v not in COMMUNICATION_TYPES:
            raise ValueError("Please select a communication type")
        return v

    @field_validator("direction", mode="before", check_fields=False)
    @classmethod
    def _direction(cls, v: Any) -> str:
        if v not in COMMUNICATION_DIRECTIONS:
            raise ValueError("Please select a direction")
        return v

    @field_validator("summary", mode="before", check_fields=False)
    @classmethod
    def _summary(cls, v: Any) -> str:
        return require_text(
            v,
            max_length=5000,
            required="Summary is required",
            too_long="Summary must be 5000 characters or less",
        )

    @field_validator("occurred_at", mode="before", check_fields=False)
    @classmethod
    def _occurred_at(cls, v: Any) -> datetime:
        if v is None:
            raise ValueError("Please enter a valid date and time")
        return check_occurred_at(v)


class CommunicationCreate(_CommunicationFields):
    customer_id: str
    type: Literal["call", "text", "email"]
    direction: Literal["inbound", "outbound"]
    summary: str
    occurred_at: datetime

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer_id(cls, v: Any) -> str:
        return require_uuid(v, "Invalid customer ID")


class CommunicationUpdate(_CommunicationFields):
    type: Literal["call", "text", "email"] | None = None
    direction: Literal["inbound", "outbound"] | None = None
    summary: str | None = None
    occurred_at: datetime | None = None


class CommunicationListParams(Schema):
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    cursor: str | None = None
    type: Literal["call", "text", "email"] | None = None
    direction: Literal["inbound", "outbound"] | None = None
    search: str | None = Field(None, max_length=200)
    date_from: datetime | None = None
    date_to: datetime | None = None

    @field_validator("type", "direction", "search", "cursor", "date_from", "date_to",
                     mode="before")
    @classmethod
    def _blank(cls, v: Any) -> Any:
        return blank_to_none(v)


class CommunicationSearchParams(Schema):
    query: str
    limit: int = Field(10, ge=1, le=50)
    customer_id: str | None = None

    @field_validator("query", mode="before")
    @classmethod
    def _query(cls, v: Any) -> str:
        return require_text(
            v or "",
            max_length=200,
            required="Search query is required",
            too_long="Search query is too long",
        )
