"""Tests for the rate limiting middleware."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from poolcrm_api.middleware.rate_limit import PERIOD_SECONDS, RateBucket, RateLimitMiddleware


def _app(per_minute: int, burst: int) -> TestClient:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, per_minute=per_minute, burst=burst)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return TestClient(app)


def test_headers_count_down():
    client = _app(per_minute=5, burst=5)
    first = client.get("/ping")
    second = client.get("/ping")
    assert first.headers["X-RateLimit-Limit"] == "5"
    assert first.headers["X-RateLimit-Remaining"] == "4"
    assert second.headers["X-RateLimit-Remaining"] == "3"


def test_per_minute_limit():
    client = _app(per_minute=2, burst=10)
    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 200

    response = client.get("/ping")
    assert response.status_code == 429
    body = response.json()
    assert body["code"] == "RATE_LIMITED"
    assert int(response.headers["Retry-After"]) >= 1
    assert body["details"]["retryAfter"] == int(response.headers["Retry-After"])


def test_burst_limit():
    client = _app(per_minute=100, burst=1)
    assert client.get("/ping").status_code == 200
    response = client.get("/ping")
    assert response.status_code == 429
    assert "Burst limit exceeded" in response.json()["error"]


def test_tokens_are_limited_separately():
    client = _app(per_minute=1, burst=10)
    assert client.get("/ping", headers={"Authorization": "Bearer a"}).status_code == 200
    assert client.get("/ping", headers={"Authorization": "Bearer b"}).status_code == 200
    assert client.get("/ping", headers={"Authorization": "Bearer a"}).status_code == 429


def test_health_is_exempt():
    client = _app(per_minute=1, burst=1)
    for _ in range(3):
        assert client.get("/health").status_code == 200


def test_lapsed_buckets_are_pruned():
    middleware = RateLimitMiddleware(FastAPI(), per_minute=5, burst=5)
    middleware._buckets = {
        "ip:10.0.0.1": RateBucket(count=3, period_start=100.0),
        "ip:10.0.0.2": RateBucket(count=1, period_start=130.0),
    }

    dropped = middleware._prune(100.0 + PERIOD_SECONDS)

    assert dropped == 1
    assert list(middleware._buckets) == ["ip:10.0.0.2"]


def test_one_time_clients_do_not_accumulate():
    client = _app(per_minute=5, burst=5)
    for n in range(3):
        client.get("/ping", headers={"Authorization": f"Bearer token-{n}"})

    middleware = client.app.middleware_stack
    while not isinstance(middleware, RateLimitMiddleware):
        middleware = middleware.app
    for bucket in middleware._buckets.values():
        bucket.period_start -= PERIOD_SECONDS

    client.get("/ping")
    assert list(middleware._buckets) == ["ip:testclient"]
