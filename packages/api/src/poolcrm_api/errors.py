"""Application error hierarchy.

Every failure surfaced to a caller carries one code from a closed set. Services
raise these; actions and the app-level exception handler turn them into
failure envelopes.
"""

from __future__ import annotations

from typing import Any, Literal

ErrorCode = Literal[
    "VALIDATION_ERROR",
    "UNAUTHORIZED",
    "FORBIDDEN",
    "NOT_FOUND",
    "CONFLICT",
    "DUPLICATE_PHONE",
    "RATE_LIMITED",
    "INTERNAL_ERROR",
]

ERROR_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "DUPLICATE_PHONE": 409,
    "RATE_LIMITED": 429,
    "INTERNAL_ERROR": 500,
}


class AppError(Exception):
    code: ErrorCode = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.code]


class ValidationError(AppError):
    code = "VALIDATION_ERROR"


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Authentication required", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ForbiddenError(AppError):
    code = "FORBIDDEN"

    def __init__(self, message: str = "Permission denied", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class NotFoundError(AppError):
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", message: str | None = None) -> None:
        super().__init__(message or f"{resource} not found", details={"resource": resource})
        self.resource = resource


class ConflictError(AppError):
    code = "CONFLICT"


class DuplicatePhoneError(AppError):
    code = "DUPLICATE_PHONE"

    def __init__(self, existing_customer: dict[str, Any]) -> None:
        super().__init__(
            "A customer with this phone number already exists",
            details={
                "existingCustomerId": existing_customer.get("id"),
                "existingCustomer": existing_customer,
            },
        )
        self.existing_customer = existing_customer


class RateLimitError(AppError):
    code = "RATE_LIMITED"

    def __init__(self, retry_after: int, message: str | None = None) -> None:
        super().__init__(
            message or f"Too many requests. Retry in {retry_after} seconds.",
            details={"retryAfter": retry_after},
        )
        self.retry_after = retry_after


class InternalError(AppError):
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "An unexpected error occurred", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
