"""Estimate actions."""

from __future__ import annotations

from typing import Any

from poolcrm_api.actions.base import action, admin_context
from poolcrm_api.errors import NotFoundError, ValidationError
from poolcrm_api.middleware.auth import AuthUser
from poolcrm_api.services.estimate_service import EstimateService
from poolcrm_api.utils.cache import cache_key, record_cache, revalidate
from poolcrm_api.validation import (
    EstimateCreate,
    EstimateListParams,
    EstimateStatusUpdate,
    EstimateUpdate,
    validate_input,
)

POOL_MISMATCH_MESSAGE = "Selected pool does not belong to this customer"


def _revalidate(customer_id: str | None) -> None:
    revalidate("estimates")
    if customer_id:
        revalidate("customers", customer_id)


def _require_estimate(service: EstimateService, estimate_id: str):
    existing = service.get_by_id(estimate_id)
    if existing is None:
        raise NotFoundError("Estimate")
    return existing


@action
def create_estimate(user: AuthUser | None, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(EstimateCreate, data)
    service = EstimateService(ctx.client)
    if not service.customer_exists(payload.customer_id):
        raise NotFoundError("Customer")
    if payload.pool_id and not service.pool_belongs_to_customer(
        payload.pool_id, payload.customer_id
    ):
        raise ValidationError(POOL_MISMATCH_MESSAGE)
    estimate = service.create(payload, ctx.admin.id)
    _revalidate(payload.customer_id)
    return estimate.to_api()


@action
def get_estimate(user: AuthUser | None, estimate_id: str) -> dict[str, Any]:
    ctx = admin_context(user)
    service = EstimateService(ctx.client)

    def load() -> dict[str, Any] | None:
        estimate = service.get_by_id(estimate_id)
        return estimate.to_api() if estimate else None

    estimate = record_cache.get_or_set(cache_key("estimates", estimate_id), load)
    if estimate is None:
        raise NotFoundError("Estimate")
    return estimate


@action
def get_estimate_by_number(user: AuthUser | None, estimate_number: str) -> dict[str, Any]:
    ctx = admin_context(user)
    estimate = EstimateService(ctx.client).get_by_number(estimate_number)
    if estimate is None:
        raise NotFoundError("Estimate")
    return estimate.to_api()


@action
def list_estimates(user: AuthUser | None, params: Any = None) -> dict[str, Any]:
    ctx = admin_context(user)
    query = validate_input(EstimateListParams, params)
    return EstimateService(ctx.client).list(query).to_api()


@action
def get_customer_estimates(
    user: AuthUser | None, customer_id: str, params: Any = None
) -> dict[str, Any]:
    ctx = admin_context(user)
    query = validate_input(EstimateListParams, {**(params or {}), "customer_id": customer_id})
    return EstimateService(ctx.client).list(query).to_api()


@action
def update_estimate(user: AuthUser | None, estimate_id: str, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(EstimateUpdate, data)
    service = EstimateService(ctx.client)
    existing = _require_estimate(service, estimate_id)
    if payload.pool_id and not service.pool_belongs_to_customer(
        payload.pool_id, existing.customer_id
    ):
        raise ValidationError(POOL_MISMATCH_MESSAGE)
    estimate = service.update(estimate_id, payload)
    _revalidate(existing.customer_id)
    return estimate.to_api()


@action
def update_estimate_status(
    user: AuthUser | None, estimate_id: str, data: Any
) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(EstimateStatusUpdate, data)
    estimate = EstimateService(ctx.client).update_status(estimate_id, payload.status)
    _revalidate(estimate.customer_id)
    return estimate.to_api()


@action
def duplicate_estimate(user: AuthUser | None, estimate_id: str) -> dict[str, Any]:
    ctx = admin_context(user)
    estimate = EstimateService(ctx.client).duplicate(estimate_id, ctx.admin.id)
    _revalidate(estimate.customer_id)
    return estimate.to_api()


@action
def delete_estimate(user: AuthUser | None, estimate_id: str) -> dict[str, bool]:
    ctx = admin_context(user)
    service = EstimateService(ctx.client)
    existing = _require_estimate(service, estimate_id)
    if not service.delete(estimate_id):
        raise NotFoundError("Estimate")
    _revalidate(existing.customer_id)
    return {"deleted": True}


@action
def get_pools_for_customer(user: AuthUser | None, customer_id: str) -> list[dict[str, Any]]:
    ctx = admin_context(user)
    return EstimateService(ctx.client).get_pools_for_customer(customer_id)
