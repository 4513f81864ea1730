"""Customer note endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from poolcrm_api.actions import notes as actions
from poolcrm_api.dependencies import AuthUser, get_current_user, query_params
from poolcrm_api.responses import to_response

router = APIRouter(tags=["notes"])


@router.get("/customers/{customer_id}/notes")
async def list_notes(
    customer_id: str,
    params: dict[str, Any] = Depends(query_params),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.list_notes_by_customer(user, customer_id, params))


@router.post("/customers/{customer_id}/notes")
async def create_note(
    customer_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    result = actions.create_note(user, {**data, "customer_id": customer_id})
    return to_response(result, status_code=201)


@router.get("/notes/{note_id}")
async def get_note(note_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_note(user, note_id))


@router.patch("/notes/{note_id}")
async def update_note(
    note_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.update_note(user, note_id, data))


@router.delete("/notes/{note_id}")
async def delete_note(note_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.delete_note(user, note_id))
