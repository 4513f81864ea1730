"""Pool endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from poolcrm_api.actions import pools as actions
from poolcrm_api.dependencies import AuthUser, get_current_user
from poolcrm_api.responses import to_response

router = APIRouter(tags=["pools"])


@router.get("/properties/{property_id}/pool")
async def get_property_pool(property_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_pool_by_property(user, property_id))


@router.post("/properties/{property_id}/pool")
async def create_pool(
    property_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    result = actions.create_pool(user, {**data, "property_id": property_id})
    return to_response(result, status_code=201)


@router.get("/pools/{pool_id}")
async def get_pool(pool_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_pool(user, pool_id))


@router.patch("/pools/{pool_id}")
async def update_pool(
    pool_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.update_pool(user, pool_id, data))


@router.delete("/pools/{pool_id}")
async def delete_pool(pool_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.delete_pool(user, pool_id))
