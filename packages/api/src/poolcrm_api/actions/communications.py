"""Communication log actions."""

from __future__ import annotations

from typing import Any

from poolcrm_api.actions.base import action, admin_context
from poolcrm_api.errors import NotFoundError
from poolcrm_api.middleware.auth import AuthUser
from poolcrm_api.services.communication_service import CommunicationService
from poolcrm_api.services.customer_service import CustomerService
from poolcrm_api.utils.cache import cache_key, record_cache, revalidate
from poolcrm_api.validation import (
    CommunicationCreate,
    CommunicationListParams,
    CommunicationSearchParams,
    CommunicationUpdate,
    validate_input,
)


@action
def create_communication(user: AuthUser | None, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(CommunicationCreate, data)
    if not CustomerService(ctx.client).exists(payload.customer_id):
        raise NotFoundError("Customer")
    communication = CommunicationService(ctx.client).create(payload, ctx.admin.id)
    revalidate("customers", payload.customer_id)
    return communication.to_api()


@action
def get_communication(user: AuthUser | None, communication_id: str) -> dict[str, Any]:
    ctx = admin_context(user)
    communication = CommunicationService(ctx.client).get_by_id(communication_id)
    if communication is None:
        raise NotFoundError("Communication")
    return communication.to_api()


@action
def list_communications(
    user: AuthUser | None, customer_id: str, params: Any = None
) -> dict[str, Any]:
    ctx = admin_context(user)
    query = validate_input(CommunicationListParams, params)
    if not CustomerService(ctx.client).exists(customer_id):
        raise NotFoundError("Customer")
    return CommunicationService(ctx.client).list_by_customer(customer_id, query).to_api()


@action
def search_communications(user: AuthUser | None, params: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    query = validate_input(CommunicationSearchParams, params)
    return CommunicationService(ctx.client).search(query)


@action
def update_communication(
    user: AuthUser | None, communication_id: str, data: Any
) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(CommunicationUpdate, data)
    communication = CommunicationService(ctx.client).update(communication_id, payload)
    revalidate("customers", communication.customer_id)
    return communication.to_api()


@action
def delete_communication(user: AuthUser | None, communication_id: str) -> dict[str, bool]:
    ctx = admin_context(user)
    service = CommunicationService(ctx.client)
    existing = service.get_by_id(communication_id)
    if existing is None or not service.delete(communication_id):
        raise NotFoundError("Communication")
    revalidate("customers", existing.customer_id)
    return {"deleted": True}


@action
def get_communication_stats(user: AuthUser | None, customer_id: str) -> dict[str, Any]:
    ctx = admin_context(user)
    service = CommunicationService(ctx.client)
    return record_cache.get_or_set(
        cache_key("customers", customer_id, "communication-stats"),
        lambda: service.get_stats(customer_id),
    )
