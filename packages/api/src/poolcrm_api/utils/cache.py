"""Thread-safe in-memory TTL cache with prefix invalidation.

Read paths cache by keys shaped like "customers:{id}" or "estimates:{id}";
write actions call `revalidate("customers")` / `revalidate("customers", id)`
to drop everything under those prefixes.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

logger = structlog.get_logger(__name__)

V = TypeVar("V")


class TTLCache:
    """Simple dict-based cache with per-key TTL expiry."""

    def __init__(self, default_ttl: float = 300.0, sweep_interval: float = 60.0) -> None:
        self._store: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._default_ttl = default_ttl
        self._sweep_interval = sweep_interval
        self._next_sweep = time.monotonic() + sweep_interval

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if time.monotonic() > expires_at:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        now = time.monotonic()
        with self._lock:
            # periodic sweep of expired entries
            if now >= self._next_sweep:
                self._drop_expired(now)
                self._next_sweep = now + self._sweep_interval
            expires_at = now + (ttl if ttl is not None else self._default_ttl)
            self._store[key] = (value, expires_at)

    def get_or_set(self, key: str, factory: Callable[[], V], ttl: float | None = None) -> V:
        cached = self.get(key)
        if cached is not None:
            return cached
        value = factory()
        if value is not None:
            self.set(key, value, ttl)
        return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def invalidate_prefix(self, prefix: str) -> int:
        """Drop every key starting with prefix. Returns count of dropped keys."""
        with self._lock:
            doomed = [k for k in self._store if k.startswith(prefix)]
            for k in doomed:
                del self._store[k]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def evict_expired(self) -> int:
        """Remove all expired entries. Returns count of evicted keys."""
        with self._lock:
            return self._drop_expired(time.monotonic())

    def _drop_expired(self, now: float) -> int:
        expired = [k for k, (_, exp) in self._store.items() if now > exp]
        for k in expired:
            del self._store[k]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


# Domain-specific caches
record_cache = TTLCache(default_ttl=120)       # 2 min, detail views and counts
pool_specs_cache = TTLCache(default_ttl=3600)  # 1 hr


def cache_key(*parts: object) -> str:
    return ":".join(str(p) for p in parts)


def revalidate(*parts: object) -> None:
    """Invalidate cached reads under the given key prefix."""
    prefix = cache_key(*parts)
    dropped = record_cache.invalidate_prefix(prefix)
    logger.debug("cache_revalidated", prefix=prefix, dropped=dropped)
