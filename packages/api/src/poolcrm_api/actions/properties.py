"""Property actions."""

from __future__ import annotations

from typing import Any

from poolcrm_api.actions.base import action, admin_context
from poolcrm_api.errors import NotFoundError
from poolcrm_api.middleware.auth import AuthUser
from poolcrm_api.services.property_service import PropertyService
from poolcrm_api.utils.cache import revalidate
from poolcrm_api.validation import PropertyCreate, PropertyUpdate, validate_input


def _with_maps_url(prop) -> dict[str, Any]:
    return {**prop.to_api(), "googleMapsUrl": prop.google_maps_url()}


@action
def create_property(user: AuthUser | None, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(PropertyCreate, data)
    service = PropertyService(ctx.client)
    if not service.customer_exists(payload.customer_id):
        raise NotFoundError("Customer")
    prop = service.create(payload)
    revalidate("customers", payload.customer_id)
    return _with_maps_url(prop)


@action
def get_property(user: AuthUser | None, property_id: str) -> dict[str, Any]:
    ctx = admin_context(user)
    prop = PropertyService(ctx.client).get_by_id(property_id)
    if prop is None:
        raise NotFoundError("Property")
    return _with_maps_url(prop)


@action
def list_properties_by_customer(user: AuthUser | None, customer_id: str) -> list[dict[str, Any]]:
    ctx = admin_context(user)
    service = PropertyService(ctx.client)
    if not service.customer_exists(customer_id):
        raise NotFoundError("Customer")
    return [_with_maps_url(p) for p in service.list_by_customer(customer_id)]


@action
def update_property(user: AuthUser | None, property_id: str, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(PropertyUpdate, data)
    prop = PropertyService(ctx.client).update(property_id, payload)
    revalidate("customers", prop.customer_id)
    revalidate("estimates")
    return _with_maps_url(prop)


@action
def delete_property(user: AuthUser | None, property_id: str) -> dict[str, bool]:
    ctx = admin_context(user)
    service = PropertyService(ctx.client)
    existing = service.get_by_id(property_id)
    if existing is None or not service.delete(property_id):
        raise NotFoundError("Property")
    revalidate("customers", existing.customer_id)
    revalidate("estimates")
    return {"deleted": True}
