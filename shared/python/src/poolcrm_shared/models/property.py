"""
models/property.py — Pydantic models for the properties and pools tables.

A property is a service address owned by a customer; it has at most one
pool (UNIQUE(pools.property_id)).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar
from urllib.parse import quote_plus

from pydantic import Field

from poolcrm_shared.constants import (
    GALLONS_PER_CUBIC_FOOT,
    POOL_SURFACES,
    POOL_TYPES,
)
from poolcrm_shared.currency import round_half_up
from poolcrm_shared.models.base import RowModel

GOOGLE_MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="


def calculate_pool_volume(
    length_ft: float | Decimal | None,
    width_ft: float | Decimal | None,
    depth_shallow_ft: float | Decimal | None,
    depth_deep_ft: float | Decimal | None,
) -> int | None:
    """
    Approximate volume in gallons: L x W x average depth x 7.5.

    Average depth uses both depths when present, otherwise whichever one is
    known. Returns None when length, width or both depths are missing.
    """
    if not length_ft or not width_ft:
        return None
    depths = [Decimal(str(d)) for d in (depth_shallow_ft, depth_deep_ft) if d]
    if not depths:
        return None
    avg_depth = sum(depths) / len(depths)
    cubic_feet = Decimal(str(length_ft)) * Decimal(str(width_ft)) * avg_depth
    return round_half_up(cubic_feet * Decimal(str(GALLONS_PER_CUBIC_FOOT)))


class Pool(RowModel):
    """Matches the pools table row."""

    relations: ClassVar[frozenset[str]] = frozenset({"property_"})

    id: str | None = None
    property_id: str
    type: str
    surface_type: str | None = None
    length_ft: float | None = None
    width_ft: float | None = None
    depth_shallow_ft: float | None = None
    depth_deep_ft: float | None = None
    volume_gallons: int | None = None
    equipment_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    property_: dict[str, Any] | None = Field(default=None, alias="property")

    @property
    def type_label(self) -> str:
        return POOL_TYPES.get(self.type, self.type)

    @property
    def surface_label(self) -> str | None:
        if self.surface_type is None:
            return None
        return POOL_SURFACES.get(self.surface_type, self.surface_type)

    def format_dimensions(self) -> str | None:
        """E.g. "32' x 16', 3.5'-8' deep"."""
        if not self.length_ft or not self.width_ft:
            return None
        text = f"{self.length_ft:g}' x {self.width_ft:g}'"
        shallow, deep = self.depth_shallow_ft, self.depth_deep_ft
        if shallow and deep:
            text += f", {shallow:g}'-{deep:g}' deep"
        elif shallow or deep:
            text += f", {(shallow or deep):g}' deep"
        return text


class Property(RowModel):
    """Matches the properties table row, optionally with its pool."""

    relations: ClassVar[frozenset[str]] = frozenset({"pool"})

    id: str | None = None
    customer_id: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    zip_code: str
    gate_code: str | None = None
    access_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    pool: Pool | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Property":
        # PostgREST returns a one-to-many embed as a list even with the 1:1 constraint
        row = dict(row)
        pools = row.pop("pools", None)
        if isinstance(pools, list):
            row["pool"] = pools[0] if pools else None
        elif isinstance(row.get("pool"), list):
            row["pool"] = row["pool"][0] if row["pool"] else None
        return cls.model_validate(row)

    def address_lines(self) -> list[str]:
        lines = [self.address_line1]
        if self.address_line2:
            lines.append(self.address_line2)
        lines.append(f"{self.city}, {self.state} {self.zip_code}")
        return lines

    def format_address(self) -> str:
        return ", ".join(self.address_lines())

    def google_maps_url(self) -> str:
        return GOOGLE_MAPS_SEARCH_URL + quote_plus(self.format_address())
