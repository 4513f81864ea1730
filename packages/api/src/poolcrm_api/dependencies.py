"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Any

from fastapi import Request

from poolcrm_api.middleware.auth import AuthUser, get_current_user


def query_params(request: Request) -> dict[str, Any]:
    """Raw query string as a dict; the action's schema does the validation."""
    return dict(request.query_params)


__all__ = [
    "AuthUser",
    "get_current_user",
    "query_params",
]
