"""Time-boxed memoisation of raw response fetches.

The cache is an explicit object owned by the application and injected
where needed. Entries are checked against the TTL when read; an expired
entry is dropped and the next access fetches fresh data.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from opensurvey.models.types import CacheStats

logger = logging.getLogger(__name__)

# Expired entries are swept on write once the cache holds this many keys
CLEANUP_THRESHOLD = 100


@dataclass(frozen=True)
class CacheEntry:
    """Cached value with the clock reading at which it was stored."""

    data: Any
    stored_at: float


def make_key(prefix: str, params: Mapping[str, Any]) -> str:
    """Build a cache key from a prefix and sorted query parameters.

    Example:
        make_key("responses", {"offset": 0, "limit": 50})
        -> "responses:limit=50|offset=0"
    """
    parts = "|".join(f"{name}={params[name]}" for name in sorted(params))
    return f"{prefix}:{parts}"


class ResponseCache:
    """Thread-safe in-memory TTL cache for fetched response snapshots.

    One instance is shared by every request thread. All access to the
    entries and counters happens under a lock; the clock is read before
    the lock is taken.

    Args:
        ttl_seconds: Lifetime of an entry. Zero or negative disables caching.
        clock: Monotonic time source in seconds (injectable for tests).
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at >= self.ttl_seconds

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if self._expired(entry, now):
                self._entries.pop(key, None)
                self._misses += 1
                return None

            self._hits += 1
            return entry.data

    def set(self, key: str, data: Any) -> None:
        """Store *data* under *key*."""
        if self.ttl_seconds <= 0:
            return
        now = self._clock()
        with self._lock:
            self._entries[key] = CacheEntry(data=data, stored_at=now)
            if len(self._entries) > CLEANUP_THRESHOLD:
                self._cleanup(now)

    def invalidate_prefix(self, prefix: str) -> int:
        """Drop every key starting with *prefix*. Returns the number dropped."""
        with self._lock:
            keys = [key for key in self._entries if key.startswith(prefix)]
            for key in keys:
                self._entries.pop(key, None)
        if keys:
            logger.debug(f"Invalidated {len(keys)} cache entries with prefix {prefix!r}")
        return len(keys)

    def stats(self) -> CacheStats:
        """Return hit/miss counters and current keys."""
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                size=len(self._entries),
                keys=list(self._entries),
            )

    def _cleanup(self, now: float) -> None:
        # Caller holds the lock
        expired = [key for key, entry in self._entries.items() if self._expired(entry, now)]
        for key in expired:
            self._entries.pop(key, None)
