"""Customer actions."""

from __future__ import annotations

from typing import Any

from poolcrm_api.actions.base import action, admin_context
from poolcrm_api.errors import ForbiddenError, NotFoundError, UnauthorizedError
from poolcrm_api.middleware.auth import AuthUser
from poolcrm_api.services.customer_service import CustomerService
from poolcrm_api.utils.cache import cache_key, record_cache, revalidate
from poolcrm_api.validation import (
    CustomerCreate,
    CustomerListParams,
    CustomerSearchParams,
    CustomerUpdate,
    validate_input,
)

MIN_DUPLICATE_CHECK_LENGTH = 10


def _revalidate_with_estimates() -> None:
    # estimate details embed the customer name and contact fields
    revalidate("customers")
    revalidate("estimates")


@action
def create_customer(user: AuthUser | None, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(CustomerCreate, data)
    customer = CustomerService(ctx.client).create(payload, ctx.admin.id)
    revalidate("customers")
    return customer.to_api()


@action
def create_customer_allow_duplicate(user: AuthUser | None, data: Any) -> dict[str, Any]:
    """Create even though the phone is already on file (the user confirmed)."""
    ctx = admin_context(user)
    payload = validate_input(CustomerCreate, data)
    customer = CustomerService(ctx.client).create_allow_duplicate(payload, ctx.admin.id)
    revalidate("customers")
    return customer.to_api()


@action
def check_duplicate_phone(user: AuthUser | None, phone: str | None) -> dict[str, Any] | None:
    """The existing customer for a phone, or None. Auth failures also read as None."""
    if not phone or len(phone) < MIN_DUPLICATE_CHECK_LENGTH:
        return None
    try:
        ctx = admin_context(user)
    except (UnauthorizedError, ForbiddenError):
        return None
    existing = CustomerService(ctx.client).check_duplicate_phone(phone)
    return existing.to_api() if existing else None


@action
def get_customer(user: AuthUser | None, customer_id: str) -> dict[str, Any]:
    ctx = admin_context(user)
    service = CustomerService(ctx.client)

    def load() -> dict[str, Any] | None:
        details = service.get_by_id(customer_id)
        return details.to_api() if details else None

    customer = record_cache.get_or_set(cache_key("customers", customer_id), load)
    if customer is None:
        raise NotFoundError("Customer")
    return customer


@action
def list_customers(user: AuthUser | None, params: Any = None) -> dict[str, Any]:
    ctx = admin_context(user)
    query = validate_input(CustomerListParams, params)
    return CustomerService(ctx.client).list(query).to_api()


@action
def search_customers(user: AuthUser | None, params: Any) -> list[dict[str, Any]]:
    ctx = admin_context(user)
    query = validate_input(CustomerSearchParams, params)
    results = CustomerService(ctx.client).search(query.query, query.limit)
    return [c.to_api() for c in results]


@action
def global_search_customers(
    user: AuthUser | None, query: str, limit: int = 10
) -> list[dict[str, Any]]:
    ctx = admin_context(user)
    return [c.to_api() for c in CustomerService(ctx.client).global_search(query, limit)]


@action
def get_customer_count(user: AuthUser | None) -> int:
    ctx = admin_context(user)
    return record_cache.get_or_set(
        cache_key("customers", "count"), CustomerService(ctx.client).get_count
    )


@action
def update_customer(user: AuthUser | None, customer_id: str, data: Any) -> dict[str, Any]:
    ctx = admin_context(user)
    payload = validate_input(CustomerUpdate, data)
    customer = CustomerService(ctx.client).update(customer_id, payload)
    _revalidate_with_estimates()
    return customer.to_api()


@action
def delete_customer(user: AuthUser | None, customer_id: str) -> dict[str, bool]:
    ctx = admin_context(user)
    if not CustomerService(ctx.client).delete(customer_id):
        raise NotFoundError("Customer")
    _revalidate_with_estimates()
    return {"deleted": True}


@action
def restore_customer(user: AuthUser | None, customer_id: str) -> dict[str, Any]:
    ctx = admin_context(user)
    customer = CustomerService(ctx.client).restore(customer_id)
    _revalidate_with_estimates()
    return customer.to_api()
