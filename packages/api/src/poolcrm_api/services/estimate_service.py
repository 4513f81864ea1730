"""Estimate (quote) data service.

Line items live in a JSONB column; subtotal, tax and total are always
recomputed from them on write so the stored totals never drift.
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from poolcrm_shared.constants import ESTIMATE_NUMBER_PREFIX
from poolcrm_shared.models import Estimate, LineItem
from poolcrm_shared.models.estimate import (
    calculate_totals,
    highest_estimate_number,
    is_valid_status_transition,
    next_estimate_number,
)

from poolcrm_api.errors import NotFoundError, ValidationError
from poolcrm_api.responses import Page
from poolcrm_api.services.base import BaseService
from poolcrm_api.utils.filtering import apply_cursor_filter
from poolcrm_api.utils.pagination import build_page, cursor_value
from poolcrm_api.validation import (
    EstimateCreate,
    EstimateListParams,
    EstimateUpdate,
    LineItemInput,
)

DETAIL_SELECT = """
    *,
    customer:customers!estimates_customer_id_fkey(id, name, phone, phone_normalized, email),
    pool:pools!estimates_pool_id_fkey(
        id, property_id, type, surface_type, volume_gallons,
        property:properties!pools_property_id_fkey(
            id, address_line1, address_line2, city, state, zip_code
        )
    ),
    created_by_admin:admins!estimates_created_by_fkey(id, full_name, email)
"""

LIST_SELECT = (
    "id, estimate_number, customer_id, pool_id, status, total_cents, valid_until, "
    "created_at, updated_at, customer:customers!estimates_customer_id_fkey(id, name, phone)"
)


def _priced(items: list[LineItemInput] | list[LineItem]) -> list[LineItem]:
    return [
        LineItem(
            id=item.id,
            description=item.description,
            quantity=item.quantity,
            unit_price_cents=item.unit_price_cents,
        ).with_total()
        for item in items
    ]


def _money_fields(items: list[LineItem], tax_rate: float) -> dict[str, Any]:
    totals = calculate_totals(items, tax_rate)
    return {
        "line_items": [i.model_dump(mode="json") for i in items],
        "tax_rate": tax_rate,
        "subtotal_cents": totals.subtotal_cents,
        "tax_amount_cents": totals.tax_amount_cents,
        "total_cents": totals.total_cents,
    }


class EstimateService(BaseService):
    table = "estimates"

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def generate_estimate_number(self) -> str:
        result = (
            self._query()
            .select("estimate_number")
            .like("estimate_number", f"{ESTIMATE_NUMBER_PREFIX}%")
            .execute()
        )
        numbers = (r["estimate_number"] for r in result.data or [])
        return next_estimate_number(highest_estimate_number(numbers))

    def create(self, data: EstimateCreate, created_by: str) -> Estimate:
        row = {
            "estimate_number": self.generate_estimate_number(),
            "customer_id": data.customer_id,
            "pool_id": data.pool_id,
            "status": "draft",
            "notes": data.notes,
            "valid_until": data.valid_until.isoformat() if data.valid_until else None,
            "created_by": created_by,
            **_money_fields(_priced(data.line_items), data.tax_rate),
        }
        result = self._query().insert(row).execute()
        estimate = Estimate.from_db_row(result.data[0])
        self._log.info(
            "estimate_created",
            estimate_id=estimate.id,
            estimate_number=estimate.estimate_number,
            total_cents=estimate.total_cents,
        )
        return estimate

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, estimate_id: str) -> Estimate | None:
        row = self._first(
            self._query().select(DETAIL_SELECT).eq("id", estimate_id).limit(1).execute()
        )
        return Estimate.from_db_row(row) if row else None

    def get_by_number(self, estimate_number: str) -> Estimate | None:
        row = self._first(
            self._query()
            .select(DETAIL_SELECT)
            .eq("estimate_number", estimate_number)
            .limit(1)
            .execute()
        )
        return Estimate.from_db_row(row) if row else None

    def list(self, params: EstimateListParams) -> Page[dict[str, Any]]:
        """Newest first; optional customer and status filters."""
        query = self._query().select(LIST_SELECT, count="exact")
        if params.customer_id:
            query = query.eq("customer_id", params.customer_id)
        if params.status:
            query = query.eq("status", params.status)
        query = apply_cursor_filter(query, "created_at", cursor_value(params.cursor, "createdAt"))
        result = query.order("created_at", desc=True).limit(params.limit + 1).execute()

        page = build_page(
            result.data or [],
            params.limit,
            sort_key="createdAt",
            sort_column="created_at",
            total=result.count,
        )
        page.items = [_summary(r) for r in page.items]
        return page

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(self, estimate_id: str, data: EstimateUpdate) -> Estimate:
        """
        Partial update. Changing line items or the tax rate recomputes totals.

        Raises:
            NotFoundError: no estimate with this id.
        """
        current = self.get_by_id(estimate_id)
        if current is None:
            raise NotFoundError("Estimate")

        sent = data.model_fields_set
        changes: dict[str, Any] = {}
        if "pool_id" in sent:
            changes["pool_id"] = data.pool_id
        if "notes" in sent:
            changes["notes"] = data.notes
        if "valid_until" in sent:
            changes["valid_until"] = data.valid_until.isoformat() if data.valid_until else None

        if data.line_items is not None or data.tax_rate is not None:
            items = _priced(data.line_items if data.line_items is not None else current.line_items)
            tax_rate = data.tax_rate if data.tax_rate is not None else current.tax_rate
            changes.update(_money_fields(items, tax_rate))

        if not changes:
            return current

        row = self._first(self._query().update(changes).eq("id", estimate_id).execute())
        if row is None:
            raise NotFoundError("Estimate")
        self._log.info("estimate_updated", estimate_id=estimate_id, fields=sorted(changes))
        return Estimate.from_db_row(row)

    def update_status(self, estimate_id: str, new_status: str) -> Estimate:
        """
        Move an estimate along its lifecycle.

        Raises:
            NotFoundError: no estimate with this id.
            ValidationError: the transition is not allowed from the current status.
        """
        current = self._first(
            self._query().select("status").eq("id", estimate_id).limit(1).execute()
        )
        if current is None:
            raise NotFoundError("Estimate")
        if not is_valid_status_transition(current["status"], new_status):
            raise ValidationError(
                f"Invalid status transition from '{current['status']}' to '{new_status}'",
                details={"currentStatus": current["status"], "requestedStatus": new_status},
            )

        row = self._first(
            self._query().update({"status": new_status}).eq("id", estimate_id).execute()
        )
        if row is None:
            raise NotFoundError("Estimate")
        self._log.info(
            "estimate_status_changed",
            estimate_id=estimate_id,
            from_status=current["status"],
            to_status=new_status,
        )
        return Estimate.from_db_row(row)

    def duplicate(self, estimate_id: str, created_by: str) -> Estimate:
        """Copy an estimate as a new draft with fresh line item ids and no expiry."""
        source = self.get_by_id(estimate_id)
        if source is None:
            raise NotFoundError("Estimate")

        items = [item.model_copy(update={"id": str(uuid4())}) for item in source.line_items]
        row = {
            "estimate_number": self.generate_estimate_number(),
            "customer_id": source.customer_id,
            "pool_id": source.pool_id,
            "status": "draft",
            "notes": source.notes,
            "valid_until": None,
            "created_by": created_by,
            **_money_fields(_priced(items), source.tax_rate),
        }
        result = self._query().insert(row).execute()
        copy = Estimate.from_db_row(result.data[0])
        self._log.info("estimate_duplicated", source_id=estimate_id, estimate_id=copy.id)
        return copy

    def delete(self, estimate_id: str) -> bool:
        result = self._query().delete().eq("id", estimate_id).execute()
        deleted = bool(result.data)
        if deleted:
            self._log.info("estimate_deleted", estimate_id=estimate_id)
        return deleted

    # ------------------------------------------------------------------
    # Ownership checks
    # ------------------------------------------------------------------

    def customer_exists(self, customer_id: str) -> bool:
        result = (
            self._query("customers")
            .select("id")
            .eq("id", customer_id)
            .is_("deleted_at", "null")
            .limit(1)
            .execute()
        )
        return bool(result.data)

    def pool_belongs_to_customer(self, pool_id: str, customer_id: str) -> bool:
        row = self._first(
            self._query("pools")
            .select("id, property:properties!pools_property_id_fkey(customer_id)")
            .eq("id", pool_id)
            .limit(1)
            .execute()
        )
        if row is None:
            return False
        prop = row.get("property") or {}
        return prop.get("customer_id") == customer_id

    def get_pools_for_customer(self, customer_id: str) -> list[dict[str, Any]]:
        result = (
            self._query("pools")
            .select("id, type, properties!inner(id, address_line1, city, state, customer_id)")
            .eq("properties.customer_id", customer_id)
            .execute()
        )
        return [
            {"id": p["id"], "type": p["type"], "property": p.get("properties")}
            for p in result.data or []
        ]


def _summary(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row["id"],
        "estimateNumber": row["estimate_number"],
        "customerId": row["customer_id"],
        "poolId": row.get("pool_id"),
        "status": row["status"],
        "totalCents": row.get("total_cents", 0),
        "validUntil": row.get("valid_until"),
        "createdAt": row.get("created_at"),
        "updatedAt": row.get("updated_at"),
        "customer": row.get("customer"),
    }
