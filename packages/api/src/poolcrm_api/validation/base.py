"""Shared pieces of the input schemas."""

from __future__ import annotations

from typing import Any, TypeVar
from uuid import UUID

import pydantic
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from poolcrm_api.errors import ValidationError

S = TypeVar("S", bound=BaseModel)


class Schema(BaseModel):
    """Input schema accepting camelCase or snake_case keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def changes(self) -> dict[str, Any]:
        """Only the fields the caller actually sent (partial updates)."""
        return self.model_dump(mode="json", exclude_unset=True)


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def require_text(value: Any, *, max_length: int, required: str, too_long: str) -> str:
    text = value.strip() if isinstance(value, str) else value
    if not text:
        raise ValueError(required)
    if len(text) > max_length:
        raise ValueError(too_long)
    return text


def optional_text(value: Any, *, max_length: int, too_long: str) -> str | None:
    value = blank_to_none(value)
    if value is None:
        return None
    if len(value) > max_length:
        raise ValueError(too_long)
    return value


def require_uuid(value: Any, message: str) -> str:
    try:
        return str(UUID(str(value)))
    except (ValueError, TypeError, AttributeError):
        raise ValueError(message) from None


def optional_uuid(value: Any, message: str) -> str | None:
    value = blank_to_none(value)
    if value is None:
        return None
    return require_uuid(value, message)


def error_messages(exc: pydantic.ValidationError) -> list[str]:
    """Human-readable messages, without pydantic's "Value error, " prefix."""
    messages = []
    for err in exc.errors():
        if err["type"] == "value_error" and "error" in err.get("ctx", {}):
            messages.append(str(err["ctx"]["error"]))
        else:
            loc = ".".join(str(p) for p in err["loc"] if p != "__root__")
            messages.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return messages


def validate_input(schema: type[S], data: Any) -> S:
    """
    Validate raw input against a schema.

    Raises:
        ValidationError: with every message joined by ", ".
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data or {})
    except pydantic.ValidationError as exc:
        messages = error_messages(exc)
        raise ValidationError(
            ", ".join(messages) or "Validation failed",
            details={"errors": messages},
        ) from exc
