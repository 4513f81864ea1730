"""Calendar endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from poolcrm_api.actions import calendar as actions
from poolcrm_api.dependencies import AuthUser, get_current_user, query_params
from poolcrm_api.responses import to_response

router = APIRouter(tags=["calendar"])


@router.get("/calendar/events")
async def list_events(
    params: dict[str, Any] = Depends(query_params),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.list_calendar_events(user, params))


@router.get("/calendar/events/range")
async def events_in_range(
    params: dict[str, Any] = Depends(query_params),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.get_events_in_range(user, params))


@router.post("/calendar/events")
async def create_event(
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.create_calendar_event(user, data), status_code=201)


@router.get("/calendar/events/{event_id}")
async def get_event(event_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_calendar_event(user, event_id))


@router.patch("/calendar/events/{event_id}")
async def update_event(
    event_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.update_calendar_event(user, event_id, data))


@router.post("/calendar/events/{event_id}/reschedule")
async def reschedule_event(
    event_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.reschedule_calendar_event(user, event_id, data))


@router.post("/calendar/events/{event_id}/cancel")
async def cancel_event(
    event_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.cancel_calendar_event(user, event_id, data))


@router.post("/calendar/events/{event_id}/complete")
async def complete_event(
    event_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.complete_calendar_event(user, event_id, data))


@router.post("/calendar/events/{event_id}/reopen")
async def reopen_event(
    event_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.reopen_calendar_event(user, event_id, data))


@router.delete("/calendar/events/{event_id}")
async def delete_event(event_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.delete_calendar_event(user, event_id))


@router.get("/customers/{customer_id}/events")
async def customer_events(
    customer_id: str,
    status: str | None = Query(None),
    limit: int = Query(10, ge=1, le=100),
    upcoming: bool = Query(True),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(
        actions.get_customer_events(
            user, customer_id, status=status, limit=limit, upcoming=upcoming
        )
    )
