"""Estimate input schemas."""

from __future__ import annotations

from datetime import date
from typing import Any, Literal
from uuid import uuid4

from pydantic import Field, ValidationInfo, field_validator

from poolcrm_shared.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_LINE_ITEM_QUANTITY,
    MAX_PAGE_SIZE,
    MAX_UNIT_PRICE_CENTS,
)

from poolcrm_api.validation.base import (
    Schema,
    blank_to_none,
    optional_text,
    optional_uuid,
    require_text,
    require_uuid,
)

EstimateStatusField = Literal["draft", "sent", "internal_final", "converted", "declined"]

_NULL_MESSAGES = {
    "line_items": "At least one line item is required",
    "tax_rate": "Tax rate is required",
}


class LineItemInput(Schema):
    id: str = Field(default_factory=lambda: str(uuid4()))
    description: str
    quantity: float
    unit_price_cents: int

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> str:
        v = blank_to_none(v)
        return str(uuid4()) if v is None else require_uuid(v, "Invalid line item ID")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> str:
        return require_text(
            v or "",
            max_length=500,
            required="Description is required",
            too_long="Description must be 500 characters or less",
        )

    @field_validator("quantity")
    @classmethod
    def _quantity(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Quantity must be greater than 0")
        if v > MAX_LINE_ITEM_QUANTITY:
            raise ValueError("Quantity is too large")
        return v

    @field_validator("unit_price_cents")
    @classmethod
    def _price(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Price cannot be negative")
        if v > MAX_UNIT_PRICE_CENTS:
            raise ValueError("Price is too large")
        return v


class _EstimateFields(Schema):
    @field_validator("line_items", check_fields=False)
    @classmethod
    def _items(cls, v: list[LineItemInput] | None) -> list[LineItemInput] | None:
        if v is not None and len(v) == 0:
            raise ValueError("At least one line item is required")
        return v

    @field_validator("tax_rate", check_fields=False)
    @classmethod
    def _tax_rate(cls, v: float | None) -> float | None:
        if v is None:
            return None
        if v < 0:
            raise ValueError("Tax rate cannot be negative")
        if v > 1:
            raise ValueError("Tax rate cannot exceed 100%")
        return v

    @field_validator("notes", mode="before", check_fields=False)
    @classmethod
    def _notes(cls, v: Any) -> str | None:
        return optional_text(v, max_length=5000, too_long="Notes must be 5000 characters or less")

    @field_validator("valid_until", mode="before", check_fields=False)
    @classmethod
    def _valid_until(cls, v: Any) -> Any:
        v = blank_to_none(v)
        if v is None or isinstance(v, date):
            return v
        try:
            return date.fromisoformat(str(v))
        except ValueError:
            raise ValueError("Invalid date format") from None

    @field_validator("pool_id", mode="before", check_fields=False)
    @classmethod
    def _pool_id(cls, v: Any) -> str | None:
        return optional_uuid(v, "Invalid pool ID")


class EstimateCreate(_EstimateFields):
    customer_id: str
    pool_id: str | None = None
    line_items: list[LineItemInput]
    tax_rate: float = 0
    notes: str | None = None
    valid_until: date | None = None

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer_id(cls, v: Any) -> str:
        return require_uuid(v, "Invalid customer ID")


class EstimateUpdate(_EstimateFields):
    pool_id: str | None = None
    line_items: list[LineItemInput] | None = None
    tax_rate: float | None = None
    notes: str | None = None
    valid_until: date | None = None

    @field_validator("line_items", "tax_rate", mode="before")
    @classmethod
    def _not_null(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            raise ValueError(_NULL_MESSAGES[info.field_name])
        return v


class EstimateStatusUpdate(Schema):
    status: EstimateStatusField


class EstimateListParams(Schema):
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    cursor: str | None = None
    customer_id: str | None = None
    status: EstimateStatusField | None = None

    @field_validator("cursor", "customer_id", "status", mode="before")
    @classmethod
    def _blank(cls, v: Any) -> Any:
        return blank_to_none(v)
