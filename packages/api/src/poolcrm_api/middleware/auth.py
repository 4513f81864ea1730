"""Supabase JWT authentication and admin resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fastapi import Request
from jose import JWTError, jwt
from supabase import Client

from poolcrm_shared.config import settings
from poolcrm_shared.db import get_supabase_client

from poolcrm_api.errors import ForbiddenError, UnauthorizedError


@dataclass
class AuthUser:
    user_id: str
    email: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)


@dataclass
class AdminUser:
    id: str
    email: str
    full_name: str


def _validate_jwt(token: str) -> dict[str, Any] | None:
    """Validate a Supabase JWT and return its claims."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except JWTError:
        return None


async def get_current_user(request: Request) -> AuthUser | None:
    """Extract and validate the user from the bearer token.

    Returns None if no credentials are provided.
    Raises UnauthorizedError if the token is invalid or expired.
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None

    claims = _validate_jwt(auth_header[7:])
    if claims is None or not claims.get("sub"):
        raise UnauthorizedError("Invalid or expired token")

    user = AuthUser(user_id=claims["sub"], email=claims.get("email"), claims=claims)
    request.state.user = user
    return user


def resolve_admin(user: AuthUser | None, client: Client | None = None) -> AdminUser:
    """
    Map an authenticated user onto their admins row.

    Raises:
        UnauthorizedError: nobody is signed in.
        ForbiddenError: the user is not an admin.
    """
    if user is None:
        raise UnauthorizedError("You must be logged in to perform this action")

    client = client or get_supabase_client(service_role=True)
    result = (
        client.table("admins")
        .select("id, email, full_name")
        .eq("id", user.user_id)
        .limit(1)
        .execute()
    )
    if not result.data:
        raise ForbiddenError("You must be an admin to perform this action")
    row = result.data[0]
    return AdminUser(id=row["id"], email=row["email"], full_name=row["full_name"])
