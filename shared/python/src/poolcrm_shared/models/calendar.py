"""
models/calendar.py — Pydantic model for the calendar_events table.

`version` starts at 1 and is bumped on every write; updates compare it to
detect concurrent edits.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from poolcrm_shared.constants import EVENT_STATUS_TRANSITIONS, EVENT_TYPES
from poolcrm_shared.models.base import RowModel


class CalendarEvent(RowModel):
    """Matches the calendar_events table row."""

    relations: ClassVar[frozenset[str]] = frozenset({"customer", "property", "pool"})

    id: str | None = None
    customer_id: str
    property_id: str | None = None
    pool_id: str | None = None
    title: str
    description: str | None = None
    event_type: str
    status: str = "scheduled"
    start_datetime: datetime
    end_datetime: datetime
    all_day: bool = False
    location_url: str | None = None
    reminder_24h_sent: bool = False
    reminder_2h_sent: bool = False
    created_by: str | None = None
    version: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None

    customer: dict[str, Any] | None = None
    property: dict[str, Any] | None = None
    pool: dict[str, Any] | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "CalendarEvent":
        return cls.model_validate(row)

    def can_transition_to(self, status: str) -> bool:
        return status in EVENT_STATUS_TRANSITIONS.get(self.status, ())

    def type_label(self) -> str:
        return EVENT_TYPES.get(self.event_type, self.event_type)

    def duration_minutes(self) -> int:
        return int((self.end_datetime - self.start_datetime).total_seconds() // 60)
