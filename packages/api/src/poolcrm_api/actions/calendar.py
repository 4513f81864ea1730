"""Calendar event actions.

Mutations of an existing event take the version the caller last saw; a stale
version comes back as CONFLICT.
"""

from __future__ import annotations

from typing import Any

from poolcrm_api.actions.base import action, admin_context
from poolcrm_api.middleware.auth import AuthUser
from poolcrm_api.services.calendar_service import CalendarService
from poolcrm_api.utils.cache import revalidate
from poolcrm_api.validation import (
    CalendarEventCreate,
    CalendarEventUpdate,
    CalendarListParams,
    CalendarRangeParams,
    RescheduleEvent,
    VersionedAction,
    validate_input,
)


def _revalidate(customer_id: str) -> None:
    revalidate("calendar")
    revalidate("customers", customer_id)


@action
def create_calendar_event(user: AuthUser | None, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(CalendarEventCreate, data)
    event = CalendarService(ctx.client).create(payload, ctx.admin.id)
    _revalidate(event.customer_id)
    return event.to_api()


@action
def get_calendar_event(user: AuthUser | None, event_id: str) -> dict[str, Any]:
    ctx = admin_context(user)
    return CalendarService(ctx.client).get_by_id(event_id).to_api()


@action
def get_events_in_range(user: AuthUser | None, params: Any) -> list[dict[str, Any]]:
    ctx = admin_context(user)
    query = validate_input(CalendarRangeParams, params)
    return [e.to_api() for e in CalendarService(ctx.client).get_in_range(query)]


@action
def list_calendar_events(user: AuthUser | None, params: Any = None) -> dict[str, Any]:
    ctx = admin_context(user)
    query = validate_input(CalendarListParams, params)
    return CalendarService(ctx.client).list(query).to_api()


@action
def get_customer_events(
    user: AuthUser | None,
    customer_id: str,
    *,
    status: str | None = None,
    limit: int = 10,
    upcoming: bool = True,
) -> list[dict[str, Any]]:
    ctx = admin_context(user)
    events = CalendarService(ctx.client).get_by_customer(
        customer_id, status=status, limit=limit, upcoming=upcoming
    )
    return [e.to_api() for e in events]


@action
def update_calendar_event(user: AuthUser | None, event_id: str, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(CalendarEventUpdate, data)
    event = CalendarService(ctx.client).update(event_id, payload)
    _revalidate(event.customer_id)
    return event.to_api()


@action
def reschedule_calendar_event(
    user: AuthUser | None, event_id: str, data: Any
) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(RescheduleEvent, data)
    event = CalendarService(ctx.client).reschedule(event_id, payload)
    _revalidate(event.customer_id)
    return event.to_api()


@action
def cancel_calendar_event(user: AuthUser | None, event_id: str, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(VersionedAction, data)
    event = CalendarService(ctx.client).cancel(event_id, payload.version)
    _revalidate(event.customer_id)
    return event.to_api()


@action
def complete_calendar_event(user: AuthUser | None, event_id: str, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(VersionedAction, data)
    event = CalendarService(ctx.client).complete(event_id, payload.version)
    _revalidate(event.customer_id)
    return event.to_api()


@action
def reopen_calendar_event(user: AuthUser | None, event_id: str, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(VersionedAction, data)
    event = CalendarService(ctx.client).reopen(event_id, payload.version)
    _revalidate(event.customer_id)
    return event.to_api()


@action
def delete_calendar_event(user: AuthUser | None, event_id: str) -> dict[str, bool]:
    ctx = admin_context(user)
    service = CalendarService(ctx.client)
    event = service.get_by_id(event_id)
    service.delete(event_id)
    _revalidate(event.customer_id)
    return {"deleted": True}
