"""Calendar event data service with optimistic locking.

Every write to an existing event is conditional on the version the caller
last read: the UPDATE filters on (id, version) and sets version + 1. When no
row matches, a follow-up read tells a missing event (NOT_FOUND) apart from a
status that forbids the change (VALIDATION_ERROR) and a concurrent edit
(CONFLICT).
"""

from __future__ import annotations

from typing import Any

from poolcrm_shared.models import CalendarEvent
from poolcrm_shared.time_utils import parse_datetime, to_iso, utc_now

from poolcrm_api.errors import ConflictError, NotFoundError, ValidationError
from poolcrm_api.responses import Page
from poolcrm_api.services.base import BaseService
from poolcrm_api.utils.filtering import apply_cursor_filter, apply_date_filters
from poolcrm_api.utils.pagination import build_page, cursor_value
from poolcrm_api.validation import (
    CalendarEventCreate,
    CalendarEventUpdate,
    CalendarListParams,
    CalendarRangeParams,
    RescheduleEvent,
)

EVENT_SELECT = (
    "*, customer:customers!inner(id, name, phone, phone_normalized, email), "
    "property:properties(id, address_line1, city, state), "
    "pool:pools(id, type)"
)

CONFLICT_MESSAGE = "This event was modified by another user. Please refresh and try again."
NOT_FOUND_MESSAGE = "Calendar event not found"


class CalendarService(BaseService):
    table = "calendar_events"

    # ------------------------------------------------------------------
    # Create / read
    # ------------------------------------------------------------------

    def create(self, data: CalendarEventCreate, created_by: str) -> CalendarEvent:
        """
        Schedule an event for an active customer.

        Raises:
            NotFoundError: the customer does not exist or is deleted.
        """
        customer = self._first(
            self._query("customers")
            .select("id")
            .eq("id", data.customer_id)
            .is_("deleted_at", "null")
            .limit(1)
            .execute()
        )
        if customer is None:
            raise NotFoundError("Customer")

        row = data.model_dump(mode="json")
        row.update({"status": "scheduled", "version": 1, "created_by": created_by})
        result = self._query().insert(row).execute()
        event = CalendarEvent.from_db_row(result.data[0])
        self._log.info(
            "calendar_event_created",
            event_id=event.id,
            customer_id=event.customer_id,
            start=event.start_datetime.isoformat(),
        )
        return event

    def get_by_id(self, event_id: str) -> CalendarEvent:
        """
        Raises:
            NotFoundError: no event with this id.
        """
        row = self._first(
            self._query().select(EVENT_SELECT).eq("id", event_id).limit(1).execute()
        )
        if row is None:
            raise NotFoundError("Calendar event", NOT_FOUND_MESSAGE)
        return CalendarEvent.from_db_row(row)

    def get_in_range(self, params: CalendarRangeParams) -> list[CalendarEvent]:
        """Events starting inside [start, end], earliest first."""
        query = self._query().select(EVENT_SELECT)
        query = apply_date_filters(query, "start_datetime", params.start, params.end)
        query = self._apply_filters(query, params.customer_id, params.status, params.event_type)
        result = query.order("start_datetime").execute()
        return [CalendarEvent.from_db_row(r) for r in result.data or []]

    def list(self, params: CalendarListParams) -> Page[dict[str, Any]]:
        """Earliest first; the cursor moves forward in time."""
        query = self._query().select(EVENT_SELECT)
        query = apply_date_filters(query, "start_datetime", params.start, params.end)
        query = self._apply_filters(query, params.customer_id, params.status, params.event_type)
        query = apply_cursor_filter(
            query,
            "start_datetime",
            cursor_value(params.cursor, "startDatetime"),
            descending=False,
        )
        result = query.order("start_datetime").limit(params.limit + 1).execute()

        page = build_page(
            result.data or [],
            params.limit,
            sort_key="startDatetime",
            sort_column="start_datetime",
        )
        page.items = [CalendarEvent.from_db_row(r).to_api() for r in page.items]
        return page

    def get_by_customer(
        self,
        customer_id: str,
        *,
        status: str | None = None,
        limit: int = 10,
        upcoming: bool = True,
    ) -> list[CalendarEvent]:
        query = self._query().select(EVENT_SELECT).eq("customer_id", customer_id)
        if status:
            query = query.eq("status", status)
        if upcoming:
            query = query.gte("start_datetime", to_iso(utc_now()))
        result = query.order("start_datetime", desc=not upcoming).limit(limit).execute()
        return [CalendarEvent.from_db_row(r) for r in result.data or []]

    @staticmethod
    def _apply_filters(
        query: Any, customer_id: str | None, status: str | None, event_type: str | None
    ) -> Any:
        if customer_id:
            query = query.eq("customer_id", customer_id)
        if status:
            query = query.eq("status", status)
        if event_type:
            query = query.eq("event_type", event_type)
        return query

    # ------------------------------------------------------------------
    # Versioned writes
    # ------------------------------------------------------------------

    def update(self, event_id: str, data: CalendarEventUpdate) -> CalendarEvent:
        changes = data.changes()
        changes.pop("version", None)
        self._check_times(event_id, changes)
        return self._versioned_write(event_id, data.version, changes)

    def reschedule(self, event_id: str, data: RescheduleEvent) -> CalendarEvent:
        changes = {
            "start_datetime": to_iso(data.start_datetime),
            "end_datetime": to_iso(data.end_datetime),
        }
        return self._versioned_write(
            event_id,
            data.version,
            changes,
            required_status="scheduled",
            wrong_status="Cannot reschedule a {status} event. "
            "Only scheduled events can be moved.",
        )

    def cancel(self, event_id: str, version: int) -> CalendarEvent:
        return self._versioned_write(
            event_id,
            version,
            {"status": "canceled"},
            required_status="scheduled",
            wrong_status="Cannot cancel a {status} event",
        )

    def complete(self, event_id: str, version: int) -> CalendarEvent:
        return self._versioned_write(
            event_id,
            version,
            {"status": "completed"},
            required_status="scheduled",
            wrong_status="Cannot complete a {status} event",
        )

    def reopen(self, event_id: str, version: int) -> CalendarEvent:
        """Put a canceled event back on the schedule."""
        return self._versioned_write(
            event_id,
            version,
            {"status": "scheduled"},
            required_status="canceled",
            wrong_status="Cannot reopen a {status} event",
        )

    def delete(self, event_id: str) -> bool:
        result = self._query().delete().eq("id", event_id).execute()
        deleted = bool(result.data)
        if deleted:
            self._log.info("calendar_event_deleted", event_id=event_id)
        return deleted

    def _check_times(self, event_id: str, changes: dict[str, Any]) -> None:
        """A partial update that moves only one end must still leave end > start."""
        if ("start_datetime" in changes) == ("end_datetime" in changes):
            return
        current = self.get_by_id(event_id)
        start = parse_datetime(changes.get("start_datetime") or current.start_datetime)
        end = parse_datetime(changes.get("end_datetime") or current.end_datetime)
        if end <= start:
            raise ValidationError("End time must be after start time")

    def _versioned_write(
        self,
        event_id: str,
        version: int,
        changes: dict[str, Any],
        *,
        required_status: str | None = None,
        wrong_status: str = "",
    ) -> CalendarEvent:
        query = (
            self._query()
            .update({**changes, "version": version + 1})
            .eq("id", event_id)
            .eq("version", version)
        )
        if required_status:
            query = query.eq("status", required_status)
        row = self._first(query.execute())
        if row is not None:
            self._log.info(
                "calendar_event_updated",
                event_id=event_id,
                version=version + 1,
                fields=sorted(changes),
            )
            return CalendarEvent.from_db_row(row)

        existing = self._first(
            self._query()
            .select("id, version, status")
            .eq("id", event_id)
            .limit(1)
            .execute()
        )
        if existing is None:
            raise NotFoundError("Calendar event", NOT_FOUND_MESSAGE)
        if required_status and existing["status"] != required_status:
            raise ValidationError(wrong_status.format(status=existing["status"]))
        self._log.warning(
            "calendar_event_version_conflict",
            event_id=event_id,
            expected_version=version,
            current_version=existing.get("version"),
        )
        raise ConflictError(CONFLICT_MESSAGE, details={"currentVersion": existing.get("version")})
