"""Pool data service. A property has at most one pool."""

from __future__ import annotations

from typing import Any

from postgrest.exceptions import APIError

from poolcrm_shared.db import is_unique_violation
from poolcrm_shared.models import Pool
from poolcrm_shared.models.property import calculate_pool_volume

from poolcrm_api.errors import ConflictError, NotFoundError, ValidationError
from poolcrm_api.services.base import BaseService
from poolcrm_api.validation import PoolCreate, PoolUpdate

POOL_EXISTS_MESSAGE = "A pool already exists for this property"
DEPTH_ORDER_MESSAGE = "Shallow end depth cannot be greater than deep end depth"
WITH_PROPERTY = "*, property:properties(*)"


class PoolService(BaseService):
    table = "pools"

    def create(self, data: PoolCreate) -> Pool:
        """
        Insert the pool for a property, filling volume from the dimensions.

        Raises:
            ConflictError: the property already has a pool.
        """
        if self.get_by_property_id(data.property_id) is not None:
            raise ConflictError(POOL_EXISTS_MESSAGE)

        row = data.model_dump(mode="json")
        if row.get("volume_gallons") is None:
            row["volume_gallons"] = calculate_pool_volume(
                data.length_ft, data.width_ft, data.depth_shallow_ft, data.depth_deep_ft
            )
        try:
            result = self._query().insert(row).execute()
        except APIError as exc:
            if is_unique_violation(exc):
                raise ConflictError(POOL_EXISTS_MESSAGE) from exc
            raise
        pool = Pool.from_db_row(result.data[0])
        self._log.info("pool_created", pool_id=pool.id, property_id=pool.property_id)
        return pool

    def get_by_id(self, pool_id: str) -> Pool | None:
        row = self._first(self._query().select("*").eq("id", pool_id).limit(1).execute())
        return Pool.from_db_row(row) if row else None

    def get_by_property_id(self, property_id: str) -> Pool | None:
        row = self._first(
            self._query().select("*").eq("property_id", property_id).limit(1).execute()
        )
        return Pool.from_db_row(row) if row else None

    def get_with_property(self, pool_id: str) -> Pool | None:
        row = self._first(
            self._query().select(WITH_PROPERTY).eq("id", pool_id).limit(1).execute()
        )
        return Pool.from_db_row(row) if row else None

    def update(self, pool_id: str, data: PoolUpdate) -> Pool:
        """Partial update; volume is recomputed when dimensions change and none is given."""
        changes: dict[str, Any] = data.changes()
        current = self.get_by_id(pool_id)
        if current is None:
            raise NotFoundError("Pool")
        if not changes:
            return current

        dimensions = ("length_ft", "width_ft", "depth_shallow_ft", "depth_deep_ft")
        merged = {d: changes.get(d, getattr(current, d)) for d in dimensions}
        shallow, deep = merged["depth_shallow_ft"], merged["depth_deep_ft"]
        if shallow is not None and deep is not None and shallow > deep:
            raise ValidationError(DEPTH_ORDER_MESSAGE)

        if "volume_gallons" not in changes and any(d in changes for d in dimensions):
            changes["volume_gallons"] = calculate_pool_volume(
                merged["length_ft"],
                merged["width_ft"],
                merged["depth_shallow_ft"],
                merged["depth_deep_ft"],
            )

        row = self._first(self._query().update(changes).eq("id", pool_id).execute())
        if row is None:
            raise NotFoundError("Pool")
        self._log.info("pool_updated", pool_id=pool_id, fields=sorted(changes))
        return Pool.from_db_row(row)

    def delete(self, pool_id: str) -> bool:
        result = self._query().delete().eq("id", pool_id).execute()
        deleted = bool(result.data)
        if deleted:
            self._log.info("pool_deleted", pool_id=pool_id)
        return deleted

    def property_exists(self, property_id: str) -> bool:
        return self._exists("properties", id=property_id)

    def get_customer_id_for_property(self, property_id: str) -> str | None:
        row = self._first(
            self._query("properties")
            .select("customer_id")
            .eq("id", property_id)
            .limit(1)
            .execute()
        )
        return row["customer_id"] if row else None

    def belongs_to_property(self, pool_id: str, property_id: str) -> bool:
        return self._exists(self.table, id=pool_id, property_id=property_id)
