"""TTL caching for endpointkit.

This package provides two interchangeable stores behind
:class:`~endpointkit.cache.base.BaseCache`:

* :class:`TTLCache` -- in-memory, lock-guarded, lazily evicting.
* :class:`DiskTTLCache` -- persisted with :mod:`diskcache`, shared across
  processes.

The :class:`~endpointkit.client.async_client.ApiClient` reads and writes the
cache only for GET endpoints called with an explicit ``cache_key``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from endpointkit.cache.base import BaseCache
from endpointkit.cache.disk import DiskTTLCache
from endpointkit.cache.memory import CacheEntry, TTLCache
from endpointkit.models import CacheConfig


def create_cache(
    config: CacheConfig, cache_dir: Optional[str | Path] = None
) -> Optional[BaseCache]:
    """Build the cache described by *config*, or ``None`` when caching is disabled.

    Args:
        config: Cache settings from a :class:`~endpointkit.models.ClientConfig`.
        cache_dir: Directory for the disk backend; defaults to
            :func:`~endpointkit.config.get_cache_dir`.
    """
    if not config.enabled:
        return None
    if config.backend == "disk":
        if cache_dir is None:
            from endpointkit.config import get_cache_dir

            cache_dir = get_cache_dir()
        return DiskTTLCache(cache_dir, ttl_seconds=config.ttl_seconds)
    return TTLCache(ttl_seconds=config.ttl_seconds)


__all__ = ["BaseCache", "CacheEntry", "DiskTTLCache", "TTLCache", "create_cache"]
