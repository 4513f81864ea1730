"""Base class for the per-entity Supabase services."""

from __future__ import annotations

from typing import Any

import structlog
from supabase import Client

log = structlog.get_logger(__name__)


class BaseService:
    """Wraps one Supabase client; subclasses group the queries for one table."""

    # Override in subclass; used for logging
    table: str = "unknown"

    def __init__(self, client: Client) -> None:
        self._client = client
        self._log = log.bind(table=self.table)

    def _query(self, table: str | None = None) -> Any:
        return self._client.table(table or self.table)

    @staticmethod
    def _first(result: Any) -> dict[str, Any] | None:
        data = result.data
        if isinstance(data, list):
            return data[0] if data else None
        return data or None

    def _exists(self, table: str, **filters: str) -> bool:
        query = self._client.table(table).select("id")
        for column, value in filters.items():
            query = query.eq(column, value)
        return bool(query.limit(1).execute().data)
