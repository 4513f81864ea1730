"""
models/estimate.py — Pydantic models for the estimates table and its JSONB
line items, plus the totals arithmetic.

Money is integer cents. Line totals and tax are rounded half-up.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, ClassVar
from uuid import uuid4

from pydantic import Field

from poolcrm_shared.constants import (
    ESTIMATE_NUMBER_PREFIX,
    ESTIMATE_STATUS_TRANSITIONS,
    ESTIMATE_STATUSES,
    ESTIMATE_VALID_DAYS,
)
from poolcrm_shared.currency import calculate_tax, round_half_up
from poolcrm_shared.models.base import RowModel

_ESTIMATE_NUMBER_RE = re.compile(rf"^{ESTIMATE_NUMBER_PREFIX}(\d+)$")


class LineItem(RowModel):
    """One element of estimates.line_items (stored snake_case in JSONB)."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    description: str
    quantity: float
    unit_price_cents: int
    total_cents: int = 0

    def with_total(self) -> "LineItem":
        return self.model_copy(
            update={"total_cents": line_item_total(self.quantity, self.unit_price_cents)}
        )


class EstimateTotals(RowModel):
    subtotal_cents: int
    tax_amount_cents: int
    total_cents: int


class Estimate(RowModel):
    """Matches the estimates table row."""

    relations: ClassVar[frozenset[str]] = frozenset({"customer", "pool", "created_by_admin"})

    id: str | None = None
    estimate_number: str
    customer_id: str
    pool_id: str | None = None
    status: str = "draft"
    line_items: list[LineItem] = Field(default_factory=list)
    subtotal_cents: int = 0
    tax_rate: float = 0
    tax_amount_cents: int = 0
    total_cents: int = 0
    notes: str | None = None
    valid_until: date | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    customer: dict[str, Any] | None = None
    pool: dict[str, Any] | None = None
    created_by_admin: dict[str, Any] | None = None

    @property
    def status_label(self) -> str:
        return ESTIMATE_STATUSES.get(self.status, self.status)

    def can_transition_to(self, status: str) -> bool:
        return is_valid_status_transition(self.status, status)


def line_item_total(quantity: float, unit_price_cents: int) -> int:
    return round_half_up(Decimal(str(quantity)) * unit_price_cents)


def calculate_totals(line_items: list[LineItem], tax_rate: float) -> EstimateTotals:
    subtotal = sum(line_item_total(i.quantity, i.unit_price_cents) for i in line_items)
    tax = calculate_tax(subtotal, tax_rate)
    return EstimateTotals(
        subtotal_cents=subtotal,
        tax_amount_cents=tax,
        total_cents=subtotal + tax,
    )


def is_valid_status_transition(current: str, new: str) -> bool:
    return new in ESTIMATE_STATUS_TRANSITIONS.get(current, ())


def next_estimate_number(last_number: str | None) -> str:
    """EST-0001 for the first estimate, otherwise the last sequence + 1."""
    sequence = 1
    if last_number:
        match = _ESTIMATE_NUMBER_RE.match(last_number)
        if match:
            sequence = int(match.group(1)) + 1
    return f"{ESTIMATE_NUMBER_PREFIX}{sequence:04d}"


def highest_estimate_number(numbers: Iterable[str]) -> str | None:
    """The number with the largest sequence; text order breaks past EST-9999."""
    best: tuple[int, str] | None = None
    for number in numbers:
        match = _ESTIMATE_NUMBER_RE.match(number or "")
        if match and (best is None or int(match.group(1)) > best[0]):
            best = (int(match.group(1)), number)
    return best[1] if best else None


def default_valid_until(today: date | None = None) -> date:
    return (today or date.today()) + timedelta(days=ESTIMATE_VALID_DAYS)
