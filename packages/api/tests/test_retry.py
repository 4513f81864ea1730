"""Tests for outbound HTTP retries and log redaction."""

from __future__ import annotations

import httpx
import pytest

from poolcrm_api.utils.retry import is_retryable_http_error, with_retry
from poolcrm_shared.logging import REDACTED, redact_sensitive


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://example.com/product")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


@pytest.mark.parametrize(
    "exc,retryable",
    [
        (httpx.ConnectError("refused"), True),
        (httpx.ReadTimeout("slow"), True),
        (_status_error(503), True),
        (_status_error(429), True),
        (_status_error(404), False),
        (_status_error(422), False),
        (ValueError("bad parse"), False),
    ],
)
def test_is_retryable_http_error(exc, retryable):
    assert is_retryable_http_error(exc) is retryable


@pytest.mark.asyncio
async def test_transient_failure_is_retried():
    calls = []

    @with_retry(max_attempts=3, base_delay=0)
    async def fetch():
        calls.append(1)
        if len(calls) < 3:
            raise httpx.ConnectError("refused")
        return "ok"

    assert await fetch() == "ok"
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_client_error_fails_on_first_attempt():
    calls = []

    @with_retry(max_attempts=3, base_delay=0)
    async def fetch():
        calls.append(1)
        raise _status_error(404)

    with pytest.raises(httpx.HTTPStatusError):
        await fetch()
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts():
    calls = []

    @with_retry(max_attempts=2, base_delay=0)
    async def fetch():
        calls.append(1)
        raise _status_error(502)

    with pytest.raises(httpx.HTTPStatusError):
        await fetch()
    assert len(calls) == 2


def test_redact_sensitive():
    event = {"event": "login_rejected", "email": "owner@example.com", "password": "hunter22"}
    assert redact_sensitive(None, "info", event) == {
        "event": "login_rejected",
        "email": "owner@example.com",
        "password": REDACTED,
    }
