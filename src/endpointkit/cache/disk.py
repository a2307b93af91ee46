"""Disk-backed TTL cache.

Uses :mod:`diskcache` to persist cached values on the filesystem so that
several processes (for example successive CLI invocations) share the same
entries.  Expiry is delegated to diskcache's per-key ``expire`` argument;
values must be picklable.

See Also:
    :class:`~endpointkit.models.CacheConfig` -- ``backend="disk"`` selects
    this implementation in :func:`~endpointkit.cache.create_cache`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import diskcache

from endpointkit.cache.base import BaseCache


class DiskTTLCache(BaseCache):
    """Disk-backed cache with the same contract as :class:`~endpointkit.cache.TTLCache`.

    Args:
        cache_dir: Root directory for the cache.  A ``responses/``
            subdirectory is created inside it.
        ttl_seconds: Maximum age of a returned value.

    Example::

        cache = DiskTTLCache("/tmp/endpointkit-cache", ttl_seconds=300)
        cache.set("user:42", {"id": 42})
        hit = cache.get("user:42")
    """

    def __init__(self, cache_dir: str | Path, ttl_seconds: float = 300) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._cache_dir = Path(cache_dir)
        self._cache: Optional[diskcache.Cache] = diskcache.Cache(
            str(self._cache_dir / "responses")
        )

    @property
    def _store(self) -> diskcache.Cache:
        if self._cache is None:
            raise RuntimeError("DiskTTLCache is closed")
        return self._cache

    def get(self, key: str) -> Optional[Any]:
        return self._store.get(key)

    def set(self, key: str, value: Any) -> None:
        self._store.set(key, value, expire=self.ttl_seconds)

    def invalidate(self, key: str) -> None:
        self._store.delete(key)

    def clear(self) -> None:
        self._store.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``backend``, ``size`` (entries not yet culled,
            expired ones are removed first), ``directory`` and ``ttl_seconds``.
        """
        self._store.expire()
        return {
            "backend": "disk",
            "size": len(self._store),
            "directory": str(self._cache_dir / "responses"),
            "ttl_seconds": self.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()
            self._cache = None
