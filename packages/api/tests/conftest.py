"""Shared test fixtures for poolcrm-api."""

from __future__ import annotations

import time
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from poolcrm_shared.config import settings

ADMIN_ID = "8f7d3c2a-1b4e-4f6a-9c8d-2e5f7a9b1c3d"

CHAIN_METHODS = (
    "select", "eq", "neq", "is_", "or_", "in_", "like", "ilike",
    "gt", "gte", "lt", "lte", "order", "limit", "range",
    "insert", "update", "delete", "text_search",
)


def make_chain(data=None, count=0):
    """Create a chainable mock that returns given data on execute()."""
    chain = MagicMock()
    chain.execute.return_value = MagicMock(data=data or [], count=count)
    for method in CHAIN_METHODS:
        getattr(chain, method).return_value = chain
    chain.not_ = chain
    return chain


def make_supabase(table_data=None, admin=True):
    """Create a mock Supabase client.

    table_data: optional dict mapping table name -> (data, count), or a list
    of (data, count) tuples handed out on successive table() calls (the last
    one repeats). All unmapped tables return empty results.

    The chains handed out are recorded in client.chains[table] so tests can
    assert on the filters a service applied.
    """
    client = MagicMock()
    td = dict(table_data or {})
    if admin:
        td.setdefault(
            "admins",
            ([{"id": ADMIN_ID, "email": "owner@example.com", "full_name": "Pat Owner"}], 1),
        )
    calls: dict[str, int] = {}
    client.chains = {}

    def _table(name):
        spec = td.get(name, ([], 0))
        if isinstance(spec, list):
            index = calls.get(name, 0)
            calls[name] = index + 1
            spec = spec[min(index, len(spec) - 1)]
        data, count = spec
        chain = make_chain(data, count)
        client.chains.setdefault(name, []).append(chain)
        return chain

    client.table.side_effect = _table
    return client


def make_token(sub=ADMIN_ID, *, secret=None, expires_in=3600, **claims):
    payload = {
        "sub": sub,
        "email": "owner@example.com",
        "aud": "authenticated",
        "exp": int(time.time()) + expires_in,
        **claims,
    }
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def _clear_caches():
    """Clear all in-memory caches between tests."""
    from poolcrm_api.utils.cache import pool_specs_cache, record_cache
    yield
    for cache in (record_cache, pool_specs_cache):
        cache.clear()


@pytest.fixture()
def supabase():
    """Default mock client: an admin row and otherwise empty tables."""
    return make_supabase()


@pytest.fixture()
def use_supabase():
    """Patch the client every action resolves; call with the mock to install."""
    patches = []

    def _install(mock):
        p = patch("poolcrm_api.actions.base.get_supabase_client", return_value=mock)
        p.start()
        patches.append(p)
        return mock

    yield _install
    for p in reversed(patches):
        p.stop()


@pytest.fixture()
def app(use_supabase, supabase):
    """Create test FastAPI app with mocked Supabase."""
    use_supabase(supabase)
    from poolcrm_api.app import create_app
    return create_app()


@pytest.fixture()
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture()
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture()
def admin_user():
    from poolcrm_api.middleware.auth import AuthUser
    return AuthUser(user_id=ADMIN_ID, email="owner@example.com")


@pytest.fixture()
def customer_row():
    return {
        "id": str(uuid4()),
        "phone": "(555) 123-4567",
        "phone_normalized": "+15551234567",
        "name": "Jane Swimmer",
        "email": "jane@example.com",
        "source": "referral",
        "deleted_at": None,
        "created_by": ADMIN_ID,
        "created_at": "2025-01-10T15:00:00+00:00",
        "updated_at": "2025-01-12T15:00:00+00:00",
    }


@pytest.fixture()
def estimate_row(customer_row):
    return {
        "id": str(uuid4()),
        "estimate_number": "EST-0007",
        "customer_id": customer_row["id"],
        "pool_id": None,
        "status": "draft",
        "line_items": [
            {
                "id": str(uuid4()),
                "description": "Pump replacement",
                "quantity": 1,
                "unit_price_cents": 85000,
                "total_cents": 85000,
            },
            {
                "id": str(uuid4()),
                "description": "Labor (hours)",
                "quantity": 2.5,
                "unit_price_cents": 9500,
                "total_cents": 23750,
            },
        ],
        "subtotal_cents": 108750,
        "tax_rate": 0.0825,
        "tax_amount_cents": 8972,
        "total_cents": 117722,
        "notes": "Includes haul-away",
        "valid_until": "2025-02-09",
        "created_by": ADMIN_ID,
        "created_at": "2025-01-10T15:00:00+00:00",
        "updated_at": "2025-01-10T15:00:00+00:00",
    }


@pytest.fixture()
def event_row(customer_row):
    return {
        "id": str(uuid4()),
        "customer_id": customer_row["id"],
        "property_id": None,
        "pool_id": None,
        "title": "Opening consultation",
        "description": None,
        "event_type": "consultation",
        "status": "scheduled",
        "start_datetime": "2025-03-03T15:00:00+00:00",
        "end_datetime": "2025-03-03T16:00:00+00:00",
        "all_day": False,
        "location_url": None,
        "reminder_24h_sent": False,
        "reminder_2h_sent": False,
        "created_by": ADMIN_ID,
        "version": 3,
        "customer": {
            "id": customer_row["id"],
            "name": customer_row["name"],
            "email": customer_row["email"],
        },
    }
