"""Property (service address) data service."""

from __future__ import annotations

from poolcrm_shared.models import Property

from poolcrm_api.errors import NotFoundError
from poolcrm_api.services.base import BaseService
from poolcrm_api.validation import PropertyCreate, PropertyUpdate

WITH_POOL = "*, pool:pools(*)"


class PropertyService(BaseService):
    table = "properties"

    def create(self, data: PropertyCreate) -> Property:
        result = self._query().insert(data.model_dump(mode="json")).execute()
        prop = Property.from_db_row(result.data[0])
        self._log.info("property_created", property_id=prop.id, customer_id=prop.customer_id)
        return prop

    def get_by_id(self, property_id: str) -> Property | None:
        row = self._first(
            self._query().select(WITH_POOL).eq("id", property_id).limit(1).execute()
        )
        return Property.from_db_row(row) if row else None

    def list_by_customer(self, customer_id: str) -> list[Property]:
        result = (
            self._query()
            .select(WITH_POOL)
            .eq("customer_id", customer_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [Property.from_db_row(r) for r in result.data or []]

    def update(self, property_id: str, data: PropertyUpdate) -> Property:
        changes = data.changes()
        if not changes:
            prop = self.get_by_id(property_id)
            if prop is None:
                raise NotFoundError("Property")
            return prop
        row = self._first(self._query().update(changes).eq("id", property_id).execute())
        if row is None:
            raise NotFoundError("Property")
        self._log.info("property_updated", property_id=property_id, fields=sorted(changes))
        return Property.from_db_row(row)

    def delete(self, property_id: str) -> bool:
        """Delete a property and its pool."""
        self._query("pools").delete().eq("property_id", property_id).execute()
        result = self._query().delete().eq("id", property_id).execute()
        deleted = bool(result.data)
        if deleted:
            self._log.info("property_deleted", property_id=property_id)
        return deleted

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

    def belongs_to_customer(self, property_id: str, customer_id: str) -> bool:
        return self._exists(self.table, id=property_id, customer_id=customer_id)

    def google_maps_url(self, property_id: str) -> str | None:
        prop = self.get_by_id(property_id)
        return prop.google_maps_url() if prop else None
