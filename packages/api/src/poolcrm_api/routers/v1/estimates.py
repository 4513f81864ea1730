"""Estimate endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from poolcrm_api.actions import estimates as actions
from poolcrm_api.dependencies import AuthUser, get_current_user, query_params
from poolcrm_api.responses import to_response

router = APIRouter(tags=["estimates"])


@router.get("/estimates")
async def list_estimates(
    params: dict[str, Any] = Depends(query_params),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.list_estimates(user, params))


@router.post("/estimates")
async def create_estimate(
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.create_estimate(user, data), status_code=201)


@router.get("/estimates/number/{estimate_number}")
async def get_estimate_by_number(
    estimate_number: str, user: AuthUser | None = Depends(get_current_user)
):
    return to_response(actions.get_estimate_by_number(user, estimate_number))


@router.get("/estimates/{estimate_id}")
async def get_estimate(estimate_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_estimate(user, estimate_id))


@router.patch("/estimates/{estimate_id}")
async def update_estimate(
    estimate_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.update_estimate(user, estimate_id, data))


@router.post("/estimates/{estimate_id}/status")
async def update_estimate_status(
    estimate_id: str,
    data: dict[str, Any] = Body(...),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.update_estimate_status(user, estimate_id, data))


@router.post("/estimates/{estimate_id}/duplicate")
async def duplicate_estimate(
    estimate_id: str, user: AuthUser | None = Depends(get_current_user)
):
    return to_response(actions.duplicate_estimate(user, estimate_id), status_code=201)


@router.delete("/estimates/{estimate_id}")
async def delete_estimate(estimate_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.delete_estimate(user, estimate_id))


@router.get("/customers/{customer_id}/estimates")
async def customer_estimates(
    customer_id: str,
    params: dict[str, Any] = Depends(query_params),
    user: AuthUser | None = Depends(get_current_user),
):
    return to_response(actions.get_customer_estimates(user, customer_id, params))


@router.get("/customers/{customer_id}/pools")
async def customer_pools(customer_id: str, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_pools_for_customer(user, customer_id))
