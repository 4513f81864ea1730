"""Sign-in input schemas."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from poolcrm_api.validation.base import Schema
from poolcrm_api.validation.customer import check_email


class LoginInput(Schema):
    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v: Any) -> str:
        email = check_email(v)
        if email is None:
            raise ValueError("Email is required")
        return email.lower()

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, v: Any) -> str:
        if not isinstance(v, str) or not v:
            raise ValueError("Password is required")
        return v


class RefreshInput(Schema):
    refresh_token: str

    @field_validator("refresh_token", mode="before")
    @classmethod
    def _token(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Refresh token is required")
        return v.strip()
