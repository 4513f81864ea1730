"""Customer data service.

Customers are soft deleted (deleted_at) and deduplicated on the E.164 form of
their phone number.
"""

from __future__ import annotations

from typing import Any

from poolcrm_shared.constants import CUSTOMER_DETAIL_RELATED_LIMIT
from poolcrm_shared.models import (
    Communication,
    Customer,
    CustomerDetails,
    CustomerSummary,
    Estimate,
    Note,
    Property,
)
from poolcrm_shared.phone import extract_digits, format_for_search, normalize_phone
from poolcrm_shared.time_utils import to_iso, utc_now

from poolcrm_api.errors import DuplicatePhoneError, NotFoundError
from poolcrm_api.responses import Page
from poolcrm_api.services.base import BaseService
from poolcrm_api.utils.filtering import (
    apply_cursor_filter,
    apply_soft_delete_filter,
    apply_text_search,
    escape_like,
)
from poolcrm_api.utils.pagination import build_page, cursor_value
from poolcrm_api.validation import CustomerCreate, CustomerListParams, CustomerUpdate

SUMMARY_COLUMNS = "id, name, phone, phone_normalized, email, source, created_at"
DETAIL_SELECT = "*, tags:customer_tag_links(tag:customer_tags(*))"
ADMIN_EMBED = "id, email, full_name"

# Phone-looking queries need at least this many digits
MIN_PHONE_SEARCH_DIGITS = 4


class CustomerService(BaseService):
    table = "customers"

    # ------------------------------------------------------------------
    # Duplicate detection
    # ------------------------------------------------------------------

    def check_duplicate_phone(
        self, phone: str, exclude_id: str | None = None
    ) -> CustomerSummary | None:
        """Return the active customer already using this phone, if any."""
        normalized = normalize_phone(phone)
        if not normalized:
            return None
        query = (
            self._query()
            .select(SUMMARY_COLUMNS)
            .eq("phone_normalized", normalized)
            .is_("deleted_at", "null")
        )
        if exclude_id:
            query = query.neq("id", exclude_id)
        row = self._first(query.limit(1).execute())
        return CustomerSummary.from_db_row(row) if row else None

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, data: CustomerCreate, created_by: str) -> Customer:
        """
        Insert a customer after checking the phone is not already in use.

        Raises:
            DuplicatePhoneError: an active customer has the same phone.
        """
        existing = self.check_duplicate_phone(data.phone)
        if existing is not None:
            raise DuplicatePhoneError(existing.to_api())
        return self.create_allow_duplicate(data, created_by)

    def create_allow_duplicate(self, data: CustomerCreate, created_by: str) -> Customer:
        row = {
            "phone": data.phone,
            "phone_normalized": normalize_phone(data.phone),
            "name": data.name,
            "email": data.email,
            "source": data.source,
            "created_by": created_by,
        }
        result = self._query().insert(row).execute()
        customer = Customer.from_db_row(result.data[0])
        self._log.info("customer_created", customer_id=customer.id, created_by=created_by)
        return customer

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, customer_id: str, *, include_deleted: bool = False) -> Customer | None:
        query = self._query().select("*").eq("id", customer_id)
        query = apply_soft_delete_filter(query, include_deleted)
        row = self._first(query.limit(1).execute())
        return Customer.from_db_row(row) if row else None

    def exists(self, customer_id: str) -> bool:
        return self.get(customer_id) is not None

    def get_by_id(self, customer_id: str) -> CustomerDetails | None:
        """A customer with tags, properties (and pools) and recent activity."""
        row = self._first(
            self._query()
            .select(DETAIL_SELECT)
            .eq("id", customer_id)
            .is_("deleted_at", "null")
            .limit(1)
            .execute()
        )
        if row is None:
            return None

        row = dict(row)
        row["tags"] = [link["tag"] for link in row.pop("tags", None) or [] if link.get("tag")]

        properties = (
            self._query("properties")
            .select("*, pool:pools(*)")
            .eq("customer_id", customer_id)
            .order("created_at", desc=True)
            .execute()
        )
        communications = (
            self._query("communications")
            .select(f"*, logged_by_admin:admins!communications_logged_by_fkey({ADMIN_EMBED})")
            .eq("customer_id", customer_id)
            .order("occurred_at", desc=True)
            .limit(CUSTOMER_DETAIL_RELATED_LIMIT)
            .execute()
        )
        estimates = (
            self._query("estimates")
            .select("*")
            .eq("customer_id", customer_id)
            .order("created_at", desc=True)
            .limit(CUSTOMER_DETAIL_RELATED_LIMIT)
            .execute()
        )
        notes = (
            self._query("customer_notes")
            .select(f"*, author:admins!customer_notes_created_by_fkey({ADMIN_EMBED})")
            .eq("customer_id", customer_id)
            .order("created_at", desc=True)
            .limit(CUSTOMER_DETAIL_RELATED_LIMIT)
            .execute()
        )

        row["properties"] = [Property.from_db_row(p).to_api() for p in properties.data or []]
        row["communications"] = [
            Communication.from_db_row(c).to_api() for c in communications.data or []
        ]
        row["estimates"] = [Estimate.from_db_row(e).to_api() for e in estimates.data or []]
        row["notes"] = [Note.from_db_row(n).to_api() for n in notes.data or []]
        return CustomerDetails.from_db_row(row)

    def list(self, params: CustomerListParams) -> Page[dict[str, Any]]:
        """Most recently updated first, keyset-paginated on updated_at."""
        query = self._query().select("*", count="exact")
        query = apply_soft_delete_filter(query, params.include_deleted)

        if params.search:
            digits = format_for_search(params.search)
            if len(digits) >= MIN_PHONE_SEARCH_DIGITS:
                query = query.ilike("phone_normalized", f"%{digits[-10:]}%")
            else:
                query = apply_text_search(query, "name", params.search)

        if params.source:
            query = query.eq("source", params.source)

        query = apply_cursor_filter(
            query, "updated_at", cursor_value(params.cursor, "updatedAt")
        )
        result = query.order("updated_at", desc=True).limit(params.limit + 1).execute()

        page = build_page(
            result.data or [],
            params.limit,
            sort_key="updatedAt",
            sort_column="updated_at",
            total=result.count,
        )
        page.items = [Customer.from_db_row(r).to_api() for r in page.items]
        return page

    def search(self, query: str, limit: int = 10) -> list[CustomerSummary]:
        """Name or phone substring search over active customers."""
        term = escape_like(query)
        digits = extract_digits(term)
        filters = [f"name.ilike.%{term}%", f"phone.ilike.%{term}%"]
        if len(digits) >= MIN_PHONE_SEARCH_DIGITS:
            filters.append(f"phone_normalized.ilike.%{digits}%")
        result = (
            self._query()
            .select(SUMMARY_COLUMNS)
            .is_("deleted_at", "null")
            .or_(",".join(filters))
            .order("name")
            .limit(limit)
            .execute()
        )
        return [CustomerSummary.from_db_row(r) for r in result.data or []]

    def global_search(self, query: str, limit: int = 10) -> list[CustomerSummary]:
        """Header search box: phone digits when the query has 4+ digits, else name/phone."""
        trimmed = query.strip()
        if len(trimmed) < 2:
            return []

        base = self._query().select(SUMMARY_COLUMNS).is_("deleted_at", "null")
        digits = extract_digits(trimmed)
        if len(digits) >= MIN_PHONE_SEARCH_DIGITS:
            base = base.ilike("phone_normalized", f"%{digits}%")
        else:
            term = escape_like(trimmed)
            base = base.or_(f"name.ilike.%{term}%,phone.ilike.%{term}%")

        result = base.order("name").limit(limit).execute()
        return [CustomerSummary.from_db_row(r) for r in result.data or []]

    def get_count(self) -> int:
        result = (
            self._query()
            .select("id", count="exact")
            .is_("deleted_at", "null")
            .limit(1)
            .execute()
        )
        return result.count or 0

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    def update(self, customer_id: str, data: CustomerUpdate) -> Customer:
        """
        Apply a partial update; a phone change re-checks for duplicates.

        Raises:
            DuplicatePhoneError: the new phone belongs to another customer.
            NotFoundError: no active customer with this id.
        """
        changes = data.changes()
        if "phone" in changes and changes["phone"] is not None:
            existing = self.check_duplicate_phone(changes["phone"], exclude_id=customer_id)
            if existing is not None:
                raise DuplicatePhoneError(existing.to_api())
            changes["phone_normalized"] = normalize_phone(changes["phone"])
        if not changes:
            customer = self.get(customer_id)
            if customer is None:
                raise NotFoundError("Customer")
            return customer

        result = (
            self._query()
            .update(changes)
            .eq("id", customer_id)
            .is_("deleted_at", "null")
            .execute()
        )
        row = self._first(result)
        if row is None:
            raise NotFoundError("Customer")
        self._log.info("customer_updated", customer_id=customer_id, fields=sorted(changes))
        return Customer.from_db_row(row)

    def delete(self, customer_id: str) -> bool:
        """Soft delete. Returns False when there was no active customer."""
        result = (
            self._query()
            .update({"deleted_at": to_iso(utc_now())})
            .eq("id", customer_id)
            .is_("deleted_at", "null")
            .execute()
        )
        deleted = bool(result.data)
        if deleted:
            self._log.info("customer_deleted", customer_id=customer_id)
        return deleted

    def restore(self, customer_id: str) -> Customer:
        """
        Undo a soft delete.

        Raises:
            NotFoundError: no soft-deleted customer with this id.
            DuplicatePhoneError: the phone has since been reused.
        """
        current = self.get(customer_id, include_deleted=True)
        if current is None or not current.is_deleted:
            raise NotFoundError("Deleted customer")
        existing = self.check_duplicate_phone(current.phone, exclude_id=customer_id)
        if existing is not None:
            raise DuplicatePhoneError(existing.to_api())

        result = (
            self._query()
            .update({"deleted_at": None})
            .eq("id", customer_id)
            .not_.is_("deleted_at", "null")
            .execute()
        )
        row = self._first(result)
        if row is None:
            raise NotFoundError("Deleted customer")
        self._log.info("customer_restored", customer_id=customer_id)
        return Customer.from_db_row(row)
