"""
models/customer.py — Pydantic models for the admins, customers and tag tables.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import Field

from poolcrm_shared.models.base import RowModel


class Admin(RowModel):
    """Matches the admins table row (one per staff login)."""

    id: str
    email: str
    full_name: str


class CustomerTag(RowModel):
    id: str
    name: str
    color: str | None = None


class Customer(RowModel):
    """Matches the customers table row."""

    id: str | None = None
    phone: str
    phone_normalized: str
    name: str
    email: str | None = None
    source: str | None = None
    deleted_at: datetime | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class CustomerSummary(RowModel):
    """Lightweight projection used by search results and duplicate checks."""

    id: str
    name: str
    phone: str
    phone_normalized: str | None = None
    email: str | None = None
    source: str | None = None
    created_at: datetime | None = None


class CustomerDetails(Customer):
    """A customer with everything the detail view shows."""

    relations: ClassVar[frozenset[str]] = frozenset(
        {"tags", "properties", "communications", "estimates", "notes"}
    )

    tags: list[CustomerTag] = Field(default_factory=list)
    properties: list[dict[str, Any]] = Field(default_factory=list)
    communications: list[dict[str, Any]] = Field(default_factory=list)
    estimates: list[dict[str, Any]] = Field(default_factory=list)
    notes: list[dict[str, Any]] = Field(default_factory=list)
