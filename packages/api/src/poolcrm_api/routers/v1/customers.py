"""Customer endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from poolcrm_api.actions import customers as actions
from poolcrm_api.dependencies import AuthUser, get_current_user, query_params
from poolcrm_api.responses import to_response

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("")
async def list_customers(
    params: dict[str, Any] = Depends(query_params),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.list_customers(user, params))


@router.post("")
async def create_customer(
    data: dict[str, Any] = Body(...),
    allow_duplicate: bool = Query(False, alias="allowDuplicate"),
    user: AuthUser | None = Depends(get_current_user),
):
    if allow_duplicate:
        result = actions.create_customer_allow_duplicate(user, data)
    else:
        result = actions.create_customer(user, data)
    return to_response(result, status_code=201)


@router.get("/search")
async def search_customers(
    params: dict[str, Any] = Depends(query_params),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.search_customers(user, params))


@router.get("/global-search")
async def global_search(
    q: str = Query(""),
    limit: int = Query(10, ge=1, le=50),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.global_search_customers(user, q, limit))


@router.get("/count")
async def customer_count(user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_customer_count(user))


@router.get("/check-phone")
async def check_phone(
    phone: str = Query(""),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.check_duplicate_phone(user, phone))


@router.get("/{customer_id}")
async def get_customer(customer_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_customer(user, customer_id))


@router.patch("/{customer_id}")
async def update_customer(
    customer_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.update_customer(user, customer_id, data))


@router.delete("/{customer_id}")
async def delete_customer(customer_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.delete_customer(user, customer_id))


@router.post("/{customer_id}/restore")
async def restore_customer(customer_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.restore_customer(user, customer_id))
