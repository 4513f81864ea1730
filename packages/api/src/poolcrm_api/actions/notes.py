"""Customer note actions."""

from __future__ import annotations

from typing import Any

from poolcrm_api.actions.base import action, admin_context
from poolcrm_api.errors import NotFoundError
from poolcrm_api.middleware.auth import AuthUser
from poolcrm_api.services.note_service import NoteService
from poolcrm_api.utils.cache import revalidate
from poolcrm_api.validation import NoteCreate, NoteListParams, NoteUpdate, validate_input


@action
def create_note(user: AuthUser | None, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(NoteCreate, data)
    service = NoteService(ctx.client)
    if not service.customer_exists(payload.customer_id):
        raise NotFoundError("Customer")
    note = service.create(payload, ctx.admin.id)
    revalidate("customers", payload.customer_id)
    return note.to_api()


@action
def get_note(user: AuthUser | None, note_id: str) -> dict[str, Any]:
    ctx = admin_context(user)
    note = NoteService(ctx.client).get_by_id(note_id)
    if note is None:
        raise NotFoundError("Note")
    return note.to_api()


@action
def list_notes_by_customer(
    user: AuthUser | None, customer_id: str, params: Any = None
) -> dict[str, Any]:
    ctx = admin_context(user)
    query = validate_input(NoteListParams, params)
    service = NoteService(ctx.client)
    if not service.customer_exists(customer_id):
        raise NotFoundError("Customer")
    return service.list_by_customer(customer_id, query).to_api()


@action
def update_note(user: AuthUser | None, note_id: str, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(NoteUpdate, data)
    note = NoteService(ctx.client).update(note_id, payload)
    revalidate("customers", note.customer_id)
    return note.to_api()


@action
def delete_note(user: AuthUser | None, note_id: str) -> dict[str, bool]:
    ctx = admin_context(user)
    service = NoteService(ctx.client)
    customer_id = service.get_customer_id(note_id)
    if customer_id is None or not service.delete(note_id):
        raise NotFoundError("Note")
    revalidate("customers", customer_id)
    return {"deleted": True}
