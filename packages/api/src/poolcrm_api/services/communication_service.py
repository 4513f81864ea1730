"""Communication log data service (calls, texts and emails with a customer)."""

from __future__ import annotations

from typing import Any

from poolcrm_shared.constants import COMMUNICATION_DIRECTIONS, COMMUNICATION_TYPES
from poolcrm_shared.models import Communication

from poolcrm_api.errors import NotFoundError
from poolcrm_api.responses import Page
from poolcrm_api.services.base import BaseService
from poolcrm_api.utils.filtering import (
    apply_cursor_filter,
    apply_date_filters,
    apply_full_text_search,
)
from poolcrm_api.utils.pagination import build_page, cursor_value
from poolcrm_api.validation import (
    CommunicationCreate,
    CommunicationListParams,
    CommunicationSearchParams,
    CommunicationUpdate,
)

WITH_LOGGER = "*, logged_by_admin:admins!communications_logged_by_fkey(id, email, full_name)"
WITH_CUSTOMER = (
    "*, customer:customers!communications_customer_id_fkey(id, name, phone), "
    "logged_by_admin:admins!communications_logged_by_fkey(id, email, full_name)"
)


class CommunicationService(BaseService):
    table = "communications"

    def create(self, data: CommunicationCreate, logged_by: str) -> Communication:
        row = data.model_dump(mode="json")
        row["logged_by"] = logged_by
        result = self._query().insert(row).execute()
        communication = Communication.from_db_row(result.data[0])
        self._log.info(
            "communication_logged",
            communication_id=communication.id,
            customer_id=communication.customer_id,
            type=communication.type,
        )
        return communication

    def get_by_id(self, communication_id: str) -> Communication | None:
        row = self._first(
            self._query().select(WITH_LOGGER).eq("id", communication_id).limit(1).execute()
        )
        return Communication.from_db_row(row) if row else None

    def list_by_customer(
        self, customer_id: str, params: CommunicationListParams
    ) -> Page[dict[str, Any]]:
        """Newest first; type, direction, date range and full-text filters."""
        query = self._query().select(WITH_LOGGER, count="exact").eq("customer_id", customer_id)
        if params.type:
            query = query.eq("type", params.type)
        if params.direction:
            query = query.eq("direction", params.direction)
        query = apply_date_filters(query, "occurred_at", params.date_from, params.date_to)
        query = apply_full_text_search(query, "search_vector", params.search)
        query = apply_cursor_filter(
            query, "occurred_at", cursor_value(params.cursor, "occurredAt")
        )
        result = query.order("occurred_at", desc=True).limit(params.limit + 1).execute()

        page = build_page(
            result.data or [],
            params.limit,
            sort_key="occurredAt",
            sort_column="occurred_at",
            total=result.count,
        )
        page.items = [Communication.from_db_row(r).to_api() for r in page.items]
        return page

    def search(self, params: CommunicationSearchParams) -> dict[str, Any]:
        """Full-text search across customers (or one customer)."""
        query = self._query().select(WITH_CUSTOMER, count="exact")
        query = apply_full_text_search(query, "search_vector", params.query)
        if params.customer_id:
            query = query.eq("customer_id", params.customer_id)
        result = query.order("occurred_at", desc=True).limit(params.limit).execute()
        return {
            "items": [Communication.from_db_row(r).to_api() for r in result.data or []],
            "total": result.count or 0,
        }

    def update(self, communication_id: str, data: CommunicationUpdate) -> Communication:
        changes = data.changes()
        if not changes:
            current = self.get_by_id(communication_id)
            if current is None:
                raise NotFoundError("Communication")
            return current
        row = self._first(self._query().update(changes).eq("id", communication_id).execute())
        if row is None:
            raise NotFoundError("Communication")
        self._log.info(
            "communication_updated", communication_id=communication_id, fields=sorted(changes)
        )
        return Communication.from_db_row(row)

    def delete(self, communication_id: str) -> bool:
        result = self._query().delete().eq("id", communication_id).execute()
        deleted = bool(result.data)
        if deleted:
            self._log.info("communication_deleted", communication_id=communication_id)
        return deleted

    def get_stats(self, customer_id: str) -> dict[str, Any]:
        """Counts of a customer's communications by type and by direction."""
        result = (
            self._query()
            .select("type, direction")
            .eq("customer_id", customer_id)
            .execute()
        )
        rows = result.data or []
        by_type = dict.fromkeys(COMMUNICATION_TYPES, 0)
        by_direction = dict.fromkeys(COMMUNICATION_DIRECTIONS, 0)
        for row in rows:
            if row.get("type") in by_type:
                by_type[row["type"]] += 1
            if row.get("direction") in by_direction:
                by_direction[row["direction"]] += 1
        return {"total": len(rows), "byType": by_type, "byDirection": by_direction}
