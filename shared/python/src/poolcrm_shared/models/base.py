"""
models/base.py — Common base for table row models.

Rows come back from PostgREST with snake_case column names; API consumers
get camelCase keys. Both spellings are accepted on input.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RowModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    # Embedded relations that never go back to the table on insert/update
    relations: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def from_db_row(cls, row: dict[str, Any]):
        return cls.model_validate(row)

    def to_insert_dict(self) -> dict[str, Any]:
        return self.model_dump(
            mode="json",
            exclude={"id", "created_at", "updated_at", *self.relations},
            exclude_none=True,
        )

    def to_api(self) -> dict[str, Any]:
        """camelCase JSON-ready dict for API responses."""
        return self.model_dump(mode="json", by_alias=True)
