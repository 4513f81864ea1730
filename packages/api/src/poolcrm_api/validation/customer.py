"""Customer input schemas."""

from __future__ import annotations

import re
from typing import Any

from pydantic import Field, field_validator, validate_email
from pydantic_core import PydanticCustomError

from poolcrm_shared.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

from poolcrm_api.validation.base import Schema, blank_to_none, optional_text, require_text

_PHONE_PUNCTUATION = re.compile(r"[\s\-().+]")
_PHONE_DIGITS = re.compile(r"^\d{10,}$")


def check_phone(value: Any) -> str:
    phone = value.strip() if isinstance(value, str) else ""
    if len(phone) < 10:
        raise ValueError("Phone number must be at least 10 characters")
    if len(phone) > 20:
        raise ValueError("Phone number must be at most 20 characters")
    if not _PHONE_DIGITS.match(_PHONE_PUNCTUATION.sub("", phone)):
        raise ValueError("Please enter a valid phone number")
    return phone


def check_email(value: Any) -> str | None:
    value = blank_to_none(value)
    if value is None:
        return None
    try:
        _, email = validate_email(value.strip())
    except PydanticCustomError:
        raise ValueError("Please enter a valid email address") from None
    return email


class _CustomerFields(Schema):
    @field_validator("phone", mode="before", check_fields=False)
    @classmethod
    def _phone(cls, v: Any) -> str:
        if v is None:
            raise ValueError("Phone number is required")
        return check_phone(v)

    @field_validator("name", mode="before", check_fields=False)
    @classmethod
    def _name(cls, v: Any) -> str:
        return require_text(
            v,
            max_length=200,
            required="Name is required",
            too_long="Name must be at most 200 characters",
        )

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def _email(cls, v: Any) -> str | None:
        return check_email(v)

    @field_validator("source", mode="before", check_fields=False)
    @classmethod
    def _source(cls, v: Any) -> str | None:
        return optional_text(v, max_length=100, too_long="Source must be at most 100 characters")


class CustomerCreate(_CustomerFields):
    phone: str
    name: str
    email: str | None = None
    source: str | None = None


class CustomerUpdate(_CustomerFields):
    phone: str | None = None
    name: str | None = None
    email: str | None = None
    source: str | None = None


class CustomerListParams(Schema):
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    cursor: str | None = None
    search: str | None = Field(None, max_length=100)
    source: str | None = None
    include_deleted: bool = False

    @field_validator("search", "source", "cursor", mode="before")
    @classmethod
    def _blank(cls, v: Any) -> Any:
        return blank_to_none(v)


class CustomerSearchParams(Schema):
    query: str
    limit: int = Field(10, ge=1, le=50)

    @field_validator("query", mode="before")
    @classmethod
    def _query(cls, v: Any) -> str:
        return require_text(
            v or "",
            max_length=100,
            required="Search query is required",
            too_long="Search query is too long",
        )
