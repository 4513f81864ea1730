"""Pool input schemas.

Dimensions arrive from form fields as strings or numbers; blank means unknown.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import field_validator, model_validator

from poolcrm_shared.constants import (
    MAX_POOL_DIMENSION_FT,
    MAX_POOL_VOLUME_GALLONS,
    POOL_SURFACES,
    POOL_TYPES,
)

from poolcrm_api.validation.base import Schema, blank_to_none, optional_text, require_uuid

DIMENSION_FIELDS = ("length_ft", "width_ft", "depth_shallow_ft", "depth_deep_ft")


def parse_dimension(value: Any) -> float | None:
    value = blank_to_none(value)
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError("Must be a positive number") from None
    if number <= 0:
        raise ValueError("Must be a positive number")
    if number > MAX_POOL_DIMENSION_FT:
        raise ValueError("Value is too large")
    return number


def parse_volume(value: Any) -> int | None:
    value = blank_to_none(value)
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError("Must be a positive number") from None
    if not number.is_integer():
        raise ValueError("Volume must be a whole number")
    if number <= 0:
        raise ValueError("Must be a positive number")
    if number > MAX_POOL_VOLUME_GALLONS:
        raise ValueError("Value is too large")
    return int(number)


class _PoolFields(Schema):
    @field_validator("type", mode="before", check_fields=False)
    @classmethod
    def _type(cls, v: Any) -> str:
        if v is None:
            raise ValueError("Please select a pool type")
        if v not in POOL_TYPES:
            raise ValueError("Please select a valid pool type")
        return v

    @field_validator("surface_type", mode="before", check_fields=False)
    @classmethod
    def _surface(cls, v: Any) -> Any:
        v = blank_to_none(v)
        if v is not None and v not in POOL_SURFACES:
            raise ValueError("Please select a valid surface type")
        return v

    @field_validator(*DIMENSION_FIELDS, mode="before", check_fields=False)
    @classmethod
    def _dimension(cls, v: Any) -> float | None:
        return parse_dimension(v)

    @field_validator("volume_gallons", mode="before", check_fields=False)
    @classmethod
    def _volume(cls, v: Any) -> int | None:
        return parse_volume(v)

    @field_validator("equipment_notes", mode="before", check_fields=False)
    @classmethod
    def _notes(cls, v: Any) -> str | None:
        return optional_text(
            v, max_length=1000, too_long="Equipment notes must be 1000 characters or less"
        )

    @model_validator(mode="after")
    def _depth_order(self):
        shallow = getattr(self, "depth_shallow_ft", None)
        deep = getattr(self, "depth_deep_ft", None)
        if shallow is not None and deep is not None and shallow > deep:
            raise ValueError("Shallow end depth cannot be greater than deep end depth")
        return self


class PoolCreate(_PoolFields):
    property_id: str
    type: Literal["inground", "above_ground", "spa", "other"]
    surface_type: Literal["plaster", "pebble", "tile", "vinyl", "fiberglass"] | None = None
    length_ft: float | None = None
    width_ft: float | None = None
    depth_shallow_ft: float | None = None
    depth_deep_ft: float | None = None
    volume_gallons: int | None = None
    equipment_notes: str | None = None

    @field_validator("property_id", mode="before")
    @classmethod
    def _property_id(cls, v: Any) -> str:
        return require_uuid(v, "Invalid property ID")


class PoolUpdate(_PoolFields):
    type: Literal["inground", "above_ground", "spa", "other"] | None = None
    surface_type: Literal["plaster", "pebble", "tile", "vinyl", "fiberglass"] | None = None
    length_ft: float | None = None
    width_ft: float | None = None
    depth_shallow_ft: float | None = None
    depth_deep_ft: float | None = None
    volume_gallons: int | None = None
    equipment_notes: str | None = None
