"""Communication log endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from poolcrm_api.actions import communications as actions
from poolcrm_api.dependencies import AuthUser, get_current_user, query_params
from poolcrm_api.responses import to_response

router = APIRouter(tags=["communications"])


@router.get("/customers/{customer_id}/communications")
async def list_communications(
    customer_id: str,
    params: dict[str, Any] = Depends(query_params),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.list_communications(user, customer_id, params))


@router.post("/customers/{customer_id}/communications")
async def create_communication(
    customer_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    result = actions.create_communication(user, {**data, "customer_id": customer_id})
    return to_response(result, status_code=201)


@router.get("/customers/{customer_id}/communications/stats")
async def communication_stats(
    customer_id: str, user: AuthUser | None = Depends(get_current_user)
):
    return to_response(actions.get_communication_stats(user, customer_id))


@router.get("/communications/search")
async def search_communications(
    params: dict[str, Any] = Depends(query_params),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.search_communications(user, params))


@router.get("/communications/{communication_id}")
async def get_communication(
    communication_id: str, user: AuthUser | None = Depends(get_current_user)
):
    return to_response(actions.get_communication(user, communication_id))


@router.patch("/communications/{communication_id}")
async def update_communication(
    communication_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.update_communication(user, communication_id, data))


@router.delete("/communications/{communication_id}")
async def delete_communication(
    communication_id: str, user: AuthUser | None = Depends(get_current_user)
):
    return to_response(actions.delete_communication(user, communication_id))
