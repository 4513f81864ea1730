"""
actions/base.py — Plumbing shared by every action.

An action is the unit the HTTP layer calls: it resolves the signed-in admin,
validates input, calls a service, invalidates cached reads and returns an
ActionResult instead of raising.

Usage:
    @action
    def delete_note(user, note_id):
        ctx = admin_context(user)
        ...
        return {"deleted": True}
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog
from supabase import Client

from poolcrm_shared.db import get_supabase_client

from poolcrm_api.errors import AppError, InternalError
from poolcrm_api.middleware.auth import AdminUser, AuthUser, resolve_admin
from poolcrm_api.responses import ActionFailure, ActionSuccess, fail_from, ok

logger = structlog.get_logger(__name__)

R = TypeVar("R")


@dataclass
class AdminContext:
    admin: AdminUser
    client: Client


def get_client() -> Client:
    return get_supabase_client(service_role=True)


def admin_context(user: AuthUser | None) -> AdminContext:
    """Resolve the admin and the client every service in the action will share."""
    client = get_client()
    return AdminContext(admin=resolve_admin(user, client), client=client)


def action(fn: Callable[..., R]) -> Callable[..., ActionSuccess[Any] | ActionFailure]:
    """Turn a function returning data (or raising AppError) into an action."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> ActionSuccess[Any] | ActionFailure:
        try:
            return ok(fn(*args, **kwargs))
        except AppError as exc:
            logger.info("action_rejected", action=fn.__name__, code=exc.code, error=exc.message)
            return fail_from(exc)
        except Exception as exc:
            logger.error("action_failed", action=fn.__name__, error=str(exc), exc_info=True)
            return fail_from(InternalError())

    return wrapper
