"""
utils/retry.py — Backoff for the outbound HTTP calls (Resend, manufacturer pages).

Only failures worth repeating are retried: connection problems, and for
callers that raise on status, 429 and 5xx answers. A 4xx such as a missing
product page or a rejected recipient fails on the first attempt.

Usage:
    from poolcrm_api.utils.retry import is_retryable_http_error, with_retry

    @with_retry(max_attempts=3, base_delay=1.0, retry_if=is_retryable_http_error)
    async def fetch_page(client: httpx.AsyncClient, url: str) -> str:
        response = await client.get(url)
        response.raise_for_status()
        return response.text
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Coroutine[Any, Any, Any]])

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def is_retryable_http_error(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS
    return False


def with_retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    retry_if: Callable[[BaseException], bool] = is_retryable_http_error,
) -> Callable[[F], F]:
    """
    Retry an async call with exponential backoff, re-raising the last error.

    Args:
        max_attempts: Total attempts, the first one included.
        base_delay:   Seconds before the second attempt; doubles after that.
        max_delay:    Upper bound on any single wait.
        retry_if:     Predicate deciding whether an exception is transient.
    """

    def decorator(fn: F) -> F:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            call_log = log.bind(call=fn.__qualname__)
            retrying = AsyncRetrying(
                stop=stop_after_attempt(max_attempts),
                wait=wait_exponential(multiplier=base_delay, max=max_delay),
                retry=retry_if_exception(retry_if),
                reraise=True,
            )
            number = 0
            try:
                async for attempt in retrying:
                    with attempt:
                        number = attempt.retry_state.attempt_number
                        if number > 1:
                            call_log.warning(
                                "http_retry", attempt=number, max_attempts=max_attempts
                            )
                        return await fn(*args, **kwargs)
            except Exception as exc:
                call_log.warning(
                    "http_call_gave_up",
                    attempts=number,
                    error=str(exc),
                    retryable=retry_if(exc),
                )
                raise

        return wrapper  # type: ignore[return-value]

    return decorator
