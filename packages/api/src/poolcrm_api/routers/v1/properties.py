"""Property endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from poolcrm_api.actions import properties as actions
from poolcrm_api.dependencies import AuthUser, get_current_user
from poolcrm_api.responses import to_response

router = APIRouter(tags=["properties"])


@router.get("/customers/{customer_id}/properties")
async def list_properties(customer_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.list_properties_by_customer(user, customer_id))


@router.post("/customers/{customer_id}/properties")
async def create_property(
    customer_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    result = actions.create_property(user, {**data, "customer_id": customer_id})
    return to_response(result, status_code=201)


@router.get("/properties/{property_id}")
async def get_property(property_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_property(user, property_id))


@router.patch("/properties/{property_id}")
async def update_property(
    property_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.update_property(user, property_id, data))


@router.delete("/properties/{property_id}")
async def delete_property(property_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.delete_property(user, property_id))
