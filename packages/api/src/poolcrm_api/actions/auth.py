"""Admin sign-in, session refresh and sign-out actions.

The API is stateless: login and refresh hand the Supabase session tokens to
the caller, who sends the access token back as a bearer token.
"""

from __future__ import annotations

from typing import Any

import structlog
from supabase import AuthError

from poolcrm_shared.db import create_session_client

from poolcrm_api.actions.base import action, admin_context, get_client
from poolcrm_api.errors import ForbiddenError, NotFoundError, UnauthorizedError
from poolcrm_api.middleware.auth import AdminUser, AuthUser, resolve_admin
from poolcrm_api.validation import LoginInput, RefreshInput, validate_input

logger = structlog.get_logger(__name__)

NOT_ADMIN_MESSAGE = "Access denied. You must be an administrator to use this application."
SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."


def _admin_payload(admin: AdminUser) -> dict[str, str]:
    return {"id": admin.id, "email": admin.email, "fullName": admin.full_name}


def _session_payload(admin: AdminUser, session: Any) -> dict[str, Any]:
    return {
        "user": _admin_payload(admin),
        "accessToken": session.access_token,
        "refreshToken": session.refresh_token,
        "expiresAt": session.expires_at or 0,
    }


def _sign_in_error(exc: AuthError) -> UnauthorizedError:
    message = getattr(exc, "message", "") or str(exc)
    if "Invalid login credentials" in message:
        return UnauthorizedError("Invalid email or password")
    if "Email not confirmed" in message:
        return UnauthorizedError("Please verify your email address")
    return UnauthorizedError("Authentication failed. Please try again.")


@action
def login(data: Any) -> dict[str, Any]:
    """Password sign-in; only users with an admins row get a session."""
    payload = validate_input(LoginInput, data)
    session_client = create_session_client()
    try:
        response = session_client.auth.sign_in_with_password(
            {"email": payload.email, "password": payload.password}
        )
    except AuthError as exc:
        logger.info("login_rejected", email=payload.email, error=str(exc))
        raise _sign_in_error(exc) from exc

    if response.user is None or response.session is None:
        raise UnauthorizedError("Authentication failed")

    auth_user = AuthUser(user_id=response.user.id, email=response.user.email)
    try:
        admin = resolve_admin(auth_user, get_client())
    except ForbiddenError:
        session_client.auth.sign_out()
        logger.warning("login_not_admin", user_id=auth_user.user_id)
        raise ForbiddenError(NOT_ADMIN_MESSAGE) from None

    logger.info("admin_logged_in", admin_id=admin.id)
    return _session_payload(admin, response.session)


@action
def refresh_session(data: Any) -> dict[str, Any]:
    payload = validate_input(RefreshInput, data)
    try:
        response = create_session_client().auth.refresh_session(payload.refresh_token)
    except AuthError as exc:
        raise UnauthorizedError(SESSION_EXPIRED_MESSAGE) from exc

    if response.user is None or response.session is None:
        raise UnauthorizedError(SESSION_EXPIRED_MESSAGE)

    try:
        admin = resolve_admin(AuthUser(user_id=response.user.id), get_client())
    except ForbiddenError:
        raise NotFoundError("Admin") from None
    return _session_payload(admin, response.session)


@action
def logout(user: AuthUser | None, access_token: str | None) -> dict[str, bool]:
    """Revoke the caller's refresh tokens. An already revoked session still signs out."""
    if user is None or not access_token:
        raise UnauthorizedError()
    try:
        get_client().auth.admin.sign_out(access_token)
    except AuthError as exc:
        logger.warning("logout_revoke_failed", user_id=user.user_id, error=str(exc))
    logger.info("admin_logged_out", user_id=user.user_id)
    return {"signedOut": True}


@action
def get_session(user: AuthUser | None) -> dict[str, Any]:
    ctx = admin_context(user)
    return {"user": _admin_payload(ctx.admin), "expiresAt": int(user.claims.get("exp", 0))}


@action
def get_current_admin(user: AuthUser | None) -> dict[str, str]:
    return _admin_payload(admin_context(user).admin)
