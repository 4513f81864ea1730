"""Property (service address) input schemas."""

from __future__ import annotations

import re
from typing import Any

from pydantic import field_validator

from poolcrm_shared.constants import US_STATES

from poolcrm_api.validation.base import Schema, optional_text, require_text, require_uuid

_ZIP = re.compile(r"^\d{5}(-\d{4})?$")


class _PropertyFields(Schema):
    @field_validator("address_line1", mode="before", check_fields=False)
    @classmethod
    def _line1(cls, v: Any) -> str:
        return require_text(
            v,
            max_length=200,
            required="Street address is required",
            too_long="Street address must be 200 characters or less",
        )

    @field_validator("address_line2", mode="before", check_fields=False)
    @classmethod
    def _line2(cls, v: Any) -> str | None:
        return optional_text(
            v, max_length=100, too_long="Address line 2 must be 100 characters or less"
        )

    @field_validator("city", mode="before", check_fields=False)
    @classmethod
    def _city(cls, v: Any) -> str:
        return require_text(
            v,
            max_length=100,
            required="City is required",
            too_long="City must be 100 characters or less",
        )

    @field_validator("state", mode="before", check_fields=False)
    @classmethod
    def _state(cls, v: Any) -> str:
        state = str(v or "").strip().upper()
        if len(state) != 2 or state not in US_STATES:
            raise ValueError("Please select a valid state")
        return state

    @field_validator("zip_code", mode="before", check_fields=False)
    @classmethod
    def _zip(cls, v: Any) -> str:
        zip_code = str(v or "").strip()
        if not _ZIP.match(zip_code):
            raise ValueError("Please enter a valid ZIP code (e.g., 12345 or 12345-6789)")
        return zip_code

    @field_validator("gate_code", mode="before", check_fields=False)
    @classmethod
    def _gate(cls, v: Any) -> str | None:
        return optional_text(v, max_length=20, too_long="Gate code must be 20 characters or less")

    @field_validator("access_notes", mode="before", check_fields=False)
    @classmethod
    def _access(cls, v: Any) -> str | None:
        return optional_text(
            v, max_length=500, too_long="Access notes must be 500 characters or less"
        )


class PropertyCreate(_PropertyFields):
    customer_id: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    zip_code: str
    gate_code: str | None = None
    access_notes: str | None = None

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer_id(cls, v: Any) -> str:
        return require_uuid(v, "Invalid customer ID")


class PropertyUpdate(_PropertyFields):
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    gate_code: str | None = None
    access_notes: str | None = None
