"""Tests for the TTL cache backends."""

from __future__ import annotations

import threading
import time

import pytest

from endpointkit.cache import DiskTTLCache, TTLCache, create_cache
from endpointkit.models import CacheConfig


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(ttl_seconds=60, clock=clock)


@pytest.fixture()
def disk_cache(tmp_path):
    c = DiskTTLCache(tmp_path, ttl_seconds=300)
    yield c
    c.close()


# ------------------------------------------------------------------ #
# In-memory cache
# ------------------------------------------------------------------ #


class TestTTLCache:
    def test_set_and_get(self, cache: TTLCache) -> None:
        cache.set("user:1", {"id": 1})
        assert cache.get("user:1") == {"id": 1}

    def test_miss_returns_none(self, cache: TTLCache) -> None:
        assert cache.get("missing") is None

    def test_live_at_exact_ttl(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("k", "v")
        clock.advance(60)
        assert cache.get("k") == "v"

    def test_expired_after_ttl(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("k", "v")
        clock.advance(60.001)
        assert cache.get("k") is None
        assert "k" not in cache

    def test_overwrite_resets_timestamp(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("k", "old")
        clock.advance(50)
        cache.set("k", "new")
        clock.advance(50)
        assert cache.get("k") == "new"

    def test_set_evicts_expired_entries(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("a", 1)
        cache.set("b", 2)
        clock.advance(61)
        cache.set("c", 3)
        assert cache._entries.keys() == {"c"}

    def test_invalidate(self, cache: TTLCache) -> None:
        cache.set("k", "v")
        cache.invalidate("k")
        cache.invalidate("never-set")
        assert cache.get("k") is None

    def test_clear(self, cache: TTLCache) -> None:
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0

    def test_stats_count_live_entries_only(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("a", 1)
        clock.advance(30)
        cache.set("b", 2)
        clock.advance(31)
        assert cache.stats() == {"backend": "memory", "size": 1, "ttl_seconds": 60}

    def test_non_positive_ttl_rejected(self) -> None:
        with pytest.raises(ValueError):
            TTLCache(ttl_seconds=0)

    def test_concurrent_writers(self) -> None:
        cache = TTLCache(ttl_seconds=60)

        def writer(prefix: str) -> None:
            for i in range(200):
                cache.set(f"{prefix}:{i}", i)
                cache.get(f"{prefix}:{i}")

        threads = [threading.Thread(target=writer, args=(str(n),)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(cache) == 8 * 200


# ------------------------------------------------------------------ #
# Disk cache
# ------------------------------------------------------------------ #


class TestDiskTTLCache:
    def test_set_and_get(self, disk_cache: DiskTTLCache) -> None:
        disk_cache.set("user:1", {"id": 1, "name": "Ada"})
        assert disk_cache.get("user:1") == {"id": 1, "name": "Ada"}

    def test_persists_across_instances(self, tmp_path) -> None:
        first = DiskTTLCache(tmp_path, ttl_seconds=300)
        first.set("k", [1, 2, 3])
        first.close()

        second = DiskTTLCache(tmp_path, ttl_seconds=300)
        try:
            assert second.get("k") == [1, 2, 3]
        finally:
            second.close()

    def test_expiry(self, tmp_path) -> None:
        c = DiskTTLCache(tmp_path, ttl_seconds=0.1)
        try:
            c.set("k", "v")
            time.sleep(0.3)
            assert c.get("k") is None
        finally:
            c.close()

    def test_invalidate_and_clear(self, disk_cache: DiskTTLCache) -> None:
        disk_cache.set("a", 1)
        disk_cache.set("b", 2)
        disk_cache.invalidate("a")
        assert disk_cache.get("a") is None
        assert disk_cache.get("b") == 2
        disk_cache.clear()
        assert disk_cache.stats()["size"] == 0

    def test_stats(self, disk_cache: DiskTTLCache, tmp_path) -> None:
        disk_cache.set("a", 1)
        stats = disk_cache.stats()
        assert stats["backend"] == "disk"
        assert stats["size"] == 1
        assert stats["directory"] == str(tmp_path / "responses")
        assert stats["ttl_seconds"] == 300

    def test_close_is_idempotent(self, tmp_path) -> None:
        c = DiskTTLCache(tmp_path)
        c.close()
        c.close()
        with pytest.raises(RuntimeError, match="closed"):
            c.get("k")


# ------------------------------------------------------------------ #
# Factory
# ------------------------------------------------------------------ #


class TestCreateCache:
    def test_disabled(self) -> None:
        assert create_cache(CacheConfig(enabled=False)) is None

    def test_memory(self) -> None:
        c = create_cache(CacheConfig(ttl_seconds=10))
        assert isinstance(c, TTLCache)
        assert c.ttl_seconds == 10

    def test_disk(self, tmp_path) -> None:
        c = create_cache(CacheConfig(backend="disk"), cache_dir=tmp_path)
        try:
            assert isinstance(c, DiskTTLCache)
            assert (tmp_path / "responses").is_dir()
        finally:
            c.close()

    def test_disk_defaults_to_cache_dir(self, isolated_config) -> None:
        c = create_cache(CacheConfig(backend="disk"))
        try:
            assert c.stats()["directory"].startswith(str(isolated_config / "cache"))
        finally:
            c.close()
