"""Action result envelope and its HTTP rendering."""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar, Union

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from poolcrm_api.errors import ERROR_STATUS, AppError, ErrorCode

T = TypeVar("T")


class ActionSuccess(BaseModel, Generic[T]):
    success: Literal[True] = True
    data: T


class ActionFailure(BaseModel):
    success: Literal[False] = False
    error: str
    code: ErrorCode
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.code]


ActionResult = Union[ActionSuccess[T], ActionFailure]


class Page(BaseModel, Generic[T]):
    """One page of a cursor-paginated list."""

    items: list[T]
    next_cursor: str | None = Field(default=None, serialization_alias="nextCursor")
    has_more: bool = Field(default=False, serialization_alias="hasMore")
    total: int | None = None

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def ok(data: Any) -> ActionSuccess[Any]:
    return ActionSuccess[Any](data=data)


def fail(
    code: ErrorCode,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> ActionFailure:
    return ActionFailure(error=message, code=code, details=details or {})


def fail_from(exc: AppError) -> ActionFailure:
    return fail(exc.code, exc.message, details=exc.details)


def error_response(
    code: ErrorCode,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a standardized failure body."""
    body: dict[str, Any] = {"success": False, "error": message, "code": code}
    if details:
        body["details"] = details
    return body


def to_response(
    result: ActionSuccess[Any] | ActionFailure,
    *,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render an action result; failures use the status of their code."""
    if isinstance(result, ActionFailure):
        return JSONResponse(
            status_code=result.status_code,
            content=error_response(result.code, result.error, details=result.details),
            headers=headers,
        )
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json", by_alias=True),
        headers=headers,
    )
