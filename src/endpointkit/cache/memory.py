"""In-memory TTL cache.

Entries are stored with the monotonic time they were written.  An entry is
live while ``now - stored_at <= ttl_seconds``; once older it behaves exactly
like an absent key.  Expired entries are evicted lazily: the one being read
on :meth:`TTLCache.get`, and all of them on :meth:`TTLCache.set`.

There is no capacity bound.  All operations hold a :class:`threading.Lock`,
which makes the cache safe to share between coroutines on one loop as well
as between threads.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from endpointkit.cache.base import BaseCache


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    stored_at: float


class TTLCache(BaseCache):
    """Thread-safe in-memory cache with per-entry expiry.

    Args:
        ttl_seconds: Maximum age of a returned value.
        clock: Monotonic time source in seconds; injectable for tests.

    Example::

        cache = TTLCache(ttl_seconds=60)
        cache.set("user:42", user)
        cache.get("user:42")  # -> user, for the next 60 seconds
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _is_live(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at <= self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._is_live(entry, self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if not self._is_live(e, now)]
            for k in expired:
                del self._entries[k]
            self._entries[key] = CacheEntry(value=value, stored_at=now)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict[str, Any]:
        with self._lock:
            now = self._clock()
            live = sum(1 for e in self._entries.values() if self._is_live(e, now))
            return {
                "backend": "memory",
                "size": live,
                "ttl_seconds": self.ttl_seconds,
            }

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return self.stats()["size"]
