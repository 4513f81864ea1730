"""Tests for authentication middleware."""

from __future__ import annotations

from uuid import uuid4

import pytest

from poolcrm_api.errors import ForbiddenError, UnauthorizedError
from poolcrm_api.middleware.auth import AuthUser, _validate_jwt, resolve_admin
from tests.conftest import ADMIN_ID, make_supabase, make_token


def test_valid_token_claims():
    claims = _validate_jwt(make_token())
    assert claims is not None
    assert claims["sub"] == ADMIN_ID


def test_token_with_wrong_secret():
    assert _validate_jwt(make_token(secret="not-the-secret")) is None


def test_expired_token():
    assert _validate_jwt(make_token(expires_in=-60)) is None


def test_token_for_other_audience():
    assert _validate_jwt(make_token(aud="anon-but-not-authenticated")) is None


def test_resolve_admin():
    admin = resolve_admin(AuthUser(user_id=ADMIN_ID), make_supabase())
    assert admin.id == ADMIN_ID
    assert admin.full_name == "Pat Owner"


def test_resolve_admin_without_user():
    with pytest.raises(UnauthorizedError):
        resolve_admin(None, make_supabase())


def test_resolve_admin_for_non_admin():
    with pytest.raises(ForbiddenError) as exc_info:
        resolve_admin(AuthUser(user_id=str(uuid4())), make_supabase(admin=False))
    assert exc_info.value.message == "You must be an admin to perform this action"


def test_no_token_returns_401(client):
    """Without a session the action refuses before touching any data."""
    response = client.get("/v1/customers")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "UNAUTHORIZED"


def test_invalid_token_returns_401(client):
    response = client.get("/v1/customers", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_valid_token(client, auth_headers):
    response = client.get("/v1/customers", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_signed_in_non_admin_returns_403(client, use_supabase):
    use_supabase(make_supabase(admin=False))
    headers = {"Authorization": f"Bearer {make_token(sub=str(uuid4()))}"}
    response = client.get("/v1/customers", headers=headers)
    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"
