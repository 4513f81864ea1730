"""Customer note data service.

Deleting a note also removes its attachments, both the storage objects and
their customer_attachments rows.
"""

from __future__ import annotations

from typing import Any

from poolcrm_shared.constants import ATTACHMENTS_BUCKET
from poolcrm_shared.models import Note

from poolcrm_api.errors import NotFoundError
from poolcrm_api.responses import Page
from poolcrm_api.services.base import BaseService
from poolcrm_api.utils.filtering import apply_cursor_filter
from poolcrm_api.utils.pagination import build_page, cursor_value
from poolcrm_api.validation import NoteCreate, NoteListParams, NoteUpdate

WITH_AUTHOR = "*, author:admins!customer_notes_created_by_fkey(id, email, full_name)"
WITH_DETAILS = WITH_AUTHOR + ", attachments:customer_attachments(*)"


class NoteService(BaseService):
    table = "customer_notes"

    def create(self, data: NoteCreate, created_by: str) -> Note:
        row = {"customer_id": data.customer_id, "content": data.content, "created_by": created_by}
        result = self._query().insert(row).execute()
        note = Note.from_db_row(result.data[0])
        self._log.info("note_created", note_id=note.id, customer_id=note.customer_id)
        return note

    def get_by_id(self, note_id: str) -> Note | None:
        row = self._first(
            self._query().select(WITH_DETAILS).eq("id", note_id).limit(1).execute()
        )
        return Note.from_db_row(row) if row else None

    def list_by_customer(self, customer_id: str, params: NoteListParams) -> Page[dict[str, Any]]:
        query = (
            self._query()
            .select(WITH_DETAILS, count="exact")
            .eq("customer_id", customer_id)
        )
        query = apply_cursor_filter(query, "created_at", cursor_value(params.cursor, "createdAt"))
        result = query.order("created_at", desc=True).limit(params.limit + 1).execute()

        page = build_page(
            result.data or [],
            params.limit,
            sort_key="createdAt",
            sort_column="created_at",
            total=result.count,
        )
        page.items = [Note.from_db_row(r).to_api() for r in page.items]
        return page

    def update(self, note_id: str, data: NoteUpdate) -> Note:
        row = self._first(
            self._query().update({"content": data.content}).eq("id", note_id).execute()
        )
        if row is None:
            raise NotFoundError("Note")
        self._log.info("note_updated", note_id=note_id)
        return Note.from_db_row(row)

    def delete(self, note_id: str) -> bool:
        attachments = (
            self._query("customer_attachments")
            .select("storage_path")
            .eq("note_id", note_id)
            .execute()
        )
        paths = [a["storage_path"] for a in attachments.data or []]
        if paths:
            self._client.storage.from_(ATTACHMENTS_BUCKET).remove(paths)
            self._query("customer_attachments").delete().eq("note_id", note_id).execute()
            self._log.info("note_attachments_removed", note_id=note_id, count=len(paths))

        result = self._query().delete().eq("id", note_id).execute()
        deleted = bool(result.data)
        if deleted:
            self._log.info("note_deleted", note_id=note_id)
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

    def belongs_to_customer(self, note_id: str, customer_id: str) -> bool:
        return self._exists(self.table, id=note_id, customer_id=customer_id)

    def get_customer_id(self, note_id: str) -> str | None:
        row = self._first(
            self._query().select("customer_id").eq("id", note_id).limit(1).execute()
        )
        return row["customer_id"] if row else None
