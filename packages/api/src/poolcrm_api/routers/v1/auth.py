"""Admin session endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from poolcrm_api.actions import auth as actions
from poolcrm_api.dependencies import AuthUser, get_current_user
from poolcrm_api.responses import to_response

router = APIRouter(prefix="/auth", tags=["auth"])


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    return header[7:] if header.startswith("Bearer ") else None


@router.post("/login")
async def login(data: dict[str, Any] = Body(...)):
    return to_response(actions.login(data))


@router.post("/refresh")
async def refresh(data: dict[str, Any] = Body(...)):
    return to_response(actions.refresh_session(data))


@router.post("/logout")
async def logout(request: Request, user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.logout(user, _bearer_token(request)))


@router.get("/session")
async def session(user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_session(user))


@router.get("/me")
async def me(user: AuthUser | None = Depends(get_current_user)):
    return to_response(actions.get_current_admin(user))
