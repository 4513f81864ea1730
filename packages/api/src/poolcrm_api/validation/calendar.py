"""Calendar event input schemas.

Every mutation of an existing event carries the `version` the caller last
saw; the service refuses the write if the row has moved on.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, ValidationInfo, field_validator, model_validator

from poolcrm_shared.constants import DEFAULT_PAGE_SIZE, EVENT_TYPES, MAX_PAGE_SIZE
from poolcrm_shared.time_utils import parse_datetime

from poolcrm_api.validation.base import (
    Schema,
    blank_to_none,
    optional_text,
    optional_uuid,
    require_text,
    require_uuid,
)

EventTypeField = Literal["consultation", "estimate_visit", "follow_up", "other"]
EventStatusField = Literal["scheduled", "completed", "canceled"]


def check_datetime(value: Any) -> datetime:
    try:
        return parse_datetime(value if isinstance(value, datetime) else str(value))
    except (ValueError, OverflowError):
        raise ValueError("Invalid datetime format") from None


def check_version(value: Any) -> int:
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError("Version must be a positive integer")
    return value


class _EventFields(Schema):
    @field_validator("title", mode="before", check_fields=False)
    @classmethod
    def _title(cls, v: Any) -> str:
        return require_text(
            v,
            max_length=200,
            required="Title is required",
            too_long="Title must be 200 characters or less",
        )

    @field_validator("description", mode="before", check_fields=False)
    @classmethod
    def _description(cls, v: Any) -> str | None:
        return optional_text(
            v, max_length=2000, too_long="Description must be 2000 characters or less"
        )

    @field_validator("event_type", mode="before", check_fields=False)
    @classmethod
    def _event_type(cls, v: Any) -> str:
        if v not in EVENT_TYPES:
            raise ValueError("Invalid event type")
        return v

    @field_validator("start_datetime", "end_datetime", mode="before", check_fields=False)
    @classmethod
    def _datetimes(cls, v: Any, info: ValidationInfo) -> datetime:
        if v is None:
            label = "Start" if info.field_name == "start_datetime" else "End"
            raise ValueError(f"{label} time is required")
        return check_datetime(v)

    @field_validator("all_day", mode="before", check_fields=False)
    @classmethod
    def _all_day(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("All day must be true or false")
        return v

    @field_validator("location_url", mode="before", check_fields=False)
    @classmethod
    def _location_url(cls, v: Any) -> str | None:
        v = blank_to_none(v)
        if v is None:
            return None
        url = str(v).strip()
        if not url.startswith(("http://", "https://")) or len(url) < 10:
            raise ValueError("Invalid URL format")
        return url

    @field_validator("property_id", "pool_id", mode="before", check_fields=False)
    @classmethod
    def _optional_ids(cls, v: Any) -> str | None:
        return optional_uuid(v, "Invalid UUID format")

    @field_validator("version", mode="before", check_fields=False)
    @classmethod
    def _version(cls, v: Any) -> int:
        return check_version(v)

    @model_validator(mode="after")
    def _end_after_start(self):
        start = getattr(self, "start_datetime", None)
        end = getattr(self, "end_datetime", None)
        if start is not None and end is not None and end <= start:
            raise ValueError("End time must be after start time")
        return self


class CalendarEventCreate(_EventFields):
    customer_id: str
    property_id: str | None = None
    pool_id: str | None = None
    title: str
    description: str | None = None
    event_type: EventTypeField
    start_datetime: datetime
    end_datetime: datetime
    all_day: bool = False
    location_url: str | None = None

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer_id(cls, v: Any) -> str:
        return require_uuid(v, "Invalid UUID format")


class CalendarEventUpdate(_EventFields):
    version: int
    property_id: str | None = None
    pool_id: str | None = None
    title: str | None = None
    description: str | None = None
    event_type: EventTypeField | None = None
    start_datetime: datetime | None = None
    end_datetime: datetime | None = None
    all_day: bool | None = None
    location_url: str | None = None


class RescheduleEvent(_EventFields):
    version: int
    start_datetime: datetime
    end_datetime: datetime


class VersionedAction(_EventFields):
    """Body of cancel / complete / reopen: only the expected version."""

    version: int


class CalendarListParams(Schema):
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    cursor: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    customer_id: str | None = None
    status: EventStatusField | None = None
    event_type: EventTypeField | None = None

    @field_validator("cursor", "start", "end", "customer_id", "status", "event_type",
                     mode="before")
    @classmethod
    def _blank(cls, v: Any) -> Any:
        return blank_to_none(v)


class CalendarRangeParams(Schema):
    start: datetime
    end: datetime
    customer_id: str | None = None
    status: EventStatusField | None = None
    event_type: EventTypeField | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _dt(cls, v: Any) -> datetime:
        return check_datetime(v)

    @model_validator(mode="after")
    def _ordered(self):
        if self.end < self.start:
            raise ValueError("End of range must not be before its start")
        return self
