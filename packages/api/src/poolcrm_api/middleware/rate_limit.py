"""Per-client fixed-window rate limiting middleware."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

from poolcrm_shared.config import settings

from poolcrm_api.errors import RateLimitError
from poolcrm_api.responses import error_response

PERIOD_SECONDS = 60
EXEMPT_PATHS = frozenset({"/health", "/ready"})


@dataclass
class RateBucket:
    count: int = 0
    period_start: float = 0.0
    burst_count: int = 0
    burst_second: float = 0.0


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        *,
        per_minute: int | None = None,
        burst: int | None = None,
    ) -> None:
        super().__init__(app)
        self._per_minute = per_minute or settings.rate_limit_per_minute
        self._burst = burst or settings.rate_limit_burst
        self._buckets: dict[str, RateBucket] = {}
        self._lock = threading.Lock()

    def _get_key(self, request: Request) -> str:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            return f"token:{auth_header[7:]}"
        client = request.client
        ip = client.host if client else "unknown"
        return f"ip:{ip}"

    def _prune(self, now: float) -> int:
        """Drop buckets whose minute window has lapsed. Caller holds the lock."""
        stale = [k for k, b in self._buckets.items() if now - b.period_start >= PERIOD_SECONDS]
        for k in stale:
            del self._buckets[k]
        return len(stale)

    @staticmethod
    def _limited(exc: RateLimitError, headers: dict[str, str]) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.code, exc.message, details=exc.details),
            headers={"Retry-After": str(exc.retry_after), **headers},
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        key = self._get_key(request)
        now = time.monotonic()

        with self._lock:
            self._prune(now)
            bucket = self._buckets.setdefault(key, RateBucket(period_start=now, burst_second=now))

            if now - bucket.period_start >= PERIOD_SECONDS:
                bucket.count = 0
                bucket.period_start = now

            if now - bucket.burst_second >= 1.0:
                bucket.burst_count = 0
                bucket.burst_second = now

            reset_at = bucket.period_start + PERIOD_SECONDS
            if bucket.count >= self._per_minute:
                retry_after = max(1, int(reset_at - now))
                return self._limited(
                    RateLimitError(retry_after),
                    {
                        "X-RateLimit-Limit": str(self._per_minute),
                        "X-RateLimit-Remaining": "0",
                    },
                )

            if bucket.burst_count >= self._burst:
                return self._limited(
                    RateLimitError(
                        1, f"Burst limit exceeded. Max {self._burst} requests/second."
                    ),
                    {},
                )

            bucket.count += 1
            bucket.burst_count += 1
            remaining = self._per_minute - bucket.count

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self._per_minute)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
