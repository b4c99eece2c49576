"""
Tests for SnapshotCache.

These tests verify:
- TTL-bounded hits and misses
- Fallback to the previous snapshot when a refresh fails
- Empty default on a cold failure, never stored
- Single-flight loading for concurrent misses
- Invalidation semantics, including races with in-flight loads
"""

import asyncio

import pytest

from vault.core.exceptions import UpstreamUnavailableError
from vault.services.cache import SnapshotCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedLoader:
    """Loader returning queued results; exceptions in the queue are raised."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    async def __call__(self, key: str):
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class TestSnapshotCacheTTL:
    """Tests for hit/miss behavior."""

    @pytest.mark.asyncio
    async def test_fresh_snapshot_served_without_fetch(self):
        clock = FakeClock()
        loader = ScriptedLoader(["a"], ["b"])
        cache = SnapshotCache("test", loader, ttl_seconds=60, clock=clock)

        assert await cache.get() == ["a"]
        clock.advance(30)
        assert await cache.get() == ["a"]
        assert loader.calls == 1

    @pytest.mark.asyncio
    async def test_expired_snapshot_refetched(self):
        clock = FakeClock()
        loader = ScriptedLoader(["a"], ["b"])
        cache = SnapshotCache("test", loader, ttl_seconds=60, clock=clock)

        await cache.get()
        clock.advance(61)

        assert await cache.get() == ["b"]
        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        loader = ScriptedLoader(["a"], ["b"])
        cache = SnapshotCache("test", loader, ttl_seconds=60)

        assert await cache.get("one") == ["a"]
        assert await cache.get("two") == ["b"]
        assert cache.peek("one") == ["a"]


class TestSnapshotCacheFailures:
    """Tests for the availability-first failure policy."""

    @pytest.mark.asyncio
    async def test_failed_refresh_serves_previous_snapshot(self):
        clock = FakeClock()
        loader = ScriptedLoader(["a"], UpstreamUnavailableError("down"))
        cache = SnapshotCache("test", loader, ttl_seconds=60, clock=clock)

        await cache.get()
        clock.advance(120)

        assert await cache.get() == ["a"]

    @pytest.mark.asyncio
    async def test_cold_failure_returns_default_and_does_not_store_it(self):
        loader = ScriptedLoader(UpstreamUnavailableError("down"), ["a"])
        cache = SnapshotCache("test", loader, ttl_seconds=60)

        assert await cache.get() == []
        assert cache.peek() is None
        # Next call retries instead of serving the cached empty default
        assert await cache.get() == ["a"]
        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_failure_logged_as_warning_with_fallback(self, caplog):
        clock = FakeClock()
        loader = ScriptedLoader(["a"], UpstreamUnavailableError("boom"))
        cache = SnapshotCache("services", loader, ttl_seconds=1, clock=clock)

        await cache.get()
        clock.advance(5)
        with caplog.at_level("WARNING"):
            await cache.get()

        assert "serving previous snapshot" in caplog.text


class TestSnapshotCacheConcurrency:
    """Tests for single-flight and invalidation."""

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_fetch(self):
        release = asyncio.Event()
        calls = 0

        async def slow_loader(key):
            nonlocal calls
            calls += 1
            await release.wait()
            return ["a"]

        cache = SnapshotCache("test", slow_loader, ttl_seconds=60)
        waiters = [asyncio.create_task(cache.get()) for _ in range(5)]
        await asyncio.sleep(0)
        release.set()

        results = await asyncio.gather(*waiters)

        assert calls == 1
        assert all(r == ["a"] for r in results)

    @pytest.mark.asyncio
    async def test_invalidate_forces_refetch(self):
        loader = ScriptedLoader(["a"], ["b"])
        cache = SnapshotCache("test", loader, ttl_seconds=60)

        await cache.get()
        cache.invalidate()

        assert await cache.get() == ["b"]

    @pytest.mark.asyncio
    async def test_invalidated_value_kept_as_fallback(self):
        loader = ScriptedLoader(["a"], UpstreamUnavailableError("down"))
        cache = SnapshotCache("test", loader, ttl_seconds=60)

        await cache.get()
        cache.invalidate()

        assert await cache.get() == ["a"]

    @pytest.mark.asyncio
    async def test_fetch_started_before_invalidate_is_not_stored(self):
        release = asyncio.Event()
        results = [["old"], ["new"]]

        async def loader(key):
            value = results.pop(0)
            if value == ["old"]:
                await release.wait()
            return value

        cache = SnapshotCache("test", loader, ttl_seconds=60)
        stale_waiter = asyncio.create_task(cache.get())
        await asyncio.sleep(0)

        cache.invalidate()
        release.set()
        await stale_waiter

        assert cache.peek() is None
        assert await cache.get() == ["new"]
