"""Pool actions."""

from __future__ import annotations

from typing import Any

from poolcrm_api.actions.base import action, admin_context
from poolcrm_api.errors import NotFoundError
from poolcrm_api.middleware.auth import AuthUser
from poolcrm_api.services.pool_service import PoolService
from poolcrm_api.utils.cache import revalidate
from poolcrm_api.validation import PoolCreate, PoolUpdate, validate_input


def _revalidate_owner(service: PoolService, property_id: str) -> None:
    customer_id = service.get_customer_id_for_property(property_id)
    if customer_id:
        revalidate("customers", customer_id)
    revalidate("estimates")


@action
def create_pool(user: AuthUser | None, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(PoolCreate, data)
    service = PoolService(ctx.client)
    if not service.property_exists(payload.property_id):
        raise NotFoundError("Property")
    pool = service.create(payload)
    _revalidate_owner(service, payload.property_id)
    return pool.to_api()


@action
def get_pool(user: AuthUser | None, pool_id: str) -> dict[str, Any]:
    ctx = admin_context(user)
    pool = PoolService(ctx.client).get_with_property(pool_id)
    if pool is None:
        raise NotFoundError("Pool")
    return pool.to_api()


@action
def get_pool_by_property(user: AuthUser | None, property_id: str) -> dict[str, Any] | None:
    ctx = admin_context(user)
    service = PoolService(ctx.client)
    if not service.property_exists(property_id):
        raise NotFoundError("Property")
    pool = service.get_by_property_id(property_id)
    return pool.to_api() if pool else None


@action
def update_pool(user: AuthUser | None, pool_id: str, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(PoolUpdate, data)
    service = PoolService(ctx.client)
    pool = service.update(pool_id, payload)
    _revalidate_owner(service, pool.property_id)
    return pool.to_api()


@action
def delete_pool(user: AuthUser | None, pool_id: str) -> dict[str, bool]:
    ctx = admin_context(user)
    service = PoolService(ctx.client)
    existing = service.get_by_id(pool_id)
    if existing is None or not service.delete(pool_id):
        raise NotFoundError("Pool")
    _revalidate_owner(service, existing.property_id)
    return {"deleted": True}
