"""Tests for the in-process permission set cache."""

import asyncio

import pytest

from booka_authz.features.cache import PermissionSetCache


class CountingLoader:
    """Loader that blocks until released and counts its calls."""

    def __init__(self, value="value", error=None):
        self.value = value
        self.error = error
        self.calls = 0
        self.release = asyncio.Event()

    async def __call__(self):
        self.calls += 1
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.value


class TestSingleFlight:
    """Concurrent misses share one load."""

    @pytest.mark.asyncio
    async def test_concurrent_misses_load_once(self, cache):
        loader = CountingLoader()
        tasks = [asyncio.create_task(cache.get_or_load("U1", "T1", loader)) for _ in range(10)]
        await asyncio.sleep(0)
        loader.release.set()

        results = await asyncio.gather(*tasks)

        assert results == ["value"] * 10
        assert loader.calls == 1
        assert cache.stats.loads == 1
        assert cache.stats.coalesced == 9

    @pytest.mark.asyncio
    async def test_failure_reaches_every_waiter(self, cache):
        loader = CountingLoader(error=RuntimeError("db down"))
        tasks = [asyncio.create_task(cache.get_or_load("U1", "T1", loader)) for _ in range(3)]
        await asyncio.sleep(0)
        loader.release.set()

        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert all(isinstance(r, RuntimeError) for r in results)
        assert loader.calls == 1
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_failed_load_is_retried(self, cache):
        failing = CountingLoader(error=RuntimeError("db down"))
        failing.release.set()
        with pytest.raises(RuntimeError):
            await cache.get_or_load("U1", "T1", failing)

        working = CountingLoader()
        working.release.set()
        assert await cache.get_or_load("U1", "T1", working) == "value"

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_load(self, cache):
        loader = CountingLoader()
        first = asyncio.create_task(cache.get_or_load("U1", "T1", loader))
        second = asyncio.create_task(cache.get_or_load("U1", "T1", loader))
        await asyncio.sleep(0)

        first.cancel()
        await asyncio.sleep(0)
        loader.release.set()

        assert await second == "value"
        assert first.cancelled()
        assert loader.calls == 1
        assert cache.peek("U1", "T1") == "value"

    @pytest.mark.asyncio
    async def test_distinct_keys_load_separately(self, cache):
        loader = CountingLoader()
        loader.release.set()
        await cache.get_or_load("U1", "T1", loader)
        await cache.get_or_load("U1", "T2", loader)
        assert loader.calls == 2


class TestExpiry:
    """TTL handling."""

    @pytest.mark.asyncio
    async def test_hit_within_ttl(self, cache):
        loader = CountingLoader()
        loader.release.set()
        await cache.get_or_load("U1", "T1", loader)
        await cache.get_or_load("U1", "T1", loader)
        assert loader.calls == 1
        assert cache.stats.hits == 1

    @pytest.mark.asyncio
    async def test_reload_after_ttl(self, cache, timer):
        loader = CountingLoader()
        loader.release.set()
        await cache.get_or_load("U1", "T1", loader)

        timer.advance(600)
        await cache.get_or_load("U1", "T1", loader)

        assert loader.calls == 2
        assert cache.stats.expirations == 1

    @pytest.mark.asyncio
    async def test_per_call_ttl(self, cache, timer):
        loader = CountingLoader()
        loader.release.set()
        await cache.get_or_load("U1", "T1", loader, ttl=5)
        timer.advance(6)
        assert cache.peek("U1", "T1") is None

    @pytest.mark.asyncio
    async def test_none_is_not_cached(self, cache):
        loader = CountingLoader(value=None)
        loader.release.set()
        assert await cache.get_or_load("U1", "T1", loader) is None
        assert await cache.get_or_load("U1", "T1", loader) is None
        assert loader.calls == 2

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError):
            PermissionSetCache(default_ttl=0)


class TestInvalidation:
    """Explicit invalidation."""

    @pytest.mark.asyncio
    async def test_invalidate_single_entry(self, cache):
        loader = CountingLoader()
        loader.release.set()
        await cache.get_or_load("U1", "T1", loader)
        await cache.get_or_load("U1", "T2", loader)

        assert cache.invalidate("U1", "T1") == 1
        assert cache.peek("U1", "T1") is None
        assert cache.peek("U1", "T2") == "value"

    @pytest.mark.asyncio
    async def test_invalidate_all_tenants_of_user(self, cache):
        loader = CountingLoader()
        loader.release.set()
        await cache.get_or_load("U1", "T1", loader)
        await cache.get_or_load("U1", "T2", loader)
        await cache.get_or_load("U2", "T1", loader)

        assert cache.invalidate("U1") == 2
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_invalidate_tenant(self, cache):
        loader = CountingLoader()
        loader.release.set()
        await cache.get_or_load("U1", "T1", loader)
        await cache.get_or_load("U2", "T1", loader)
        await cache.get_or_load("U3", "T2", loader)

        assert cache.invalidate_tenant("T1") == 2
        assert cache.peek("U3", "T2") == "value"

    @pytest.mark.asyncio
    async def test_load_started_before_invalidation_is_not_stored(self, cache):
        loader = CountingLoader(value="stale")
        pending = asyncio.create_task(cache.get_or_load("U1", "T1", loader))
        await asyncio.sleep(0)

        cache.invalidate("U1", "T1")
        loader.release.set()

        assert await pending == "stale"
        assert cache.peek("U1", "T1") is None

    @pytest.mark.asyncio
    async def test_invalidate_if_sees_values(self, cache):
        for user, value in (("U1", "keep"), ("U2", "drop")):
            loader = CountingLoader(value=value)
            loader.release.set()
            await cache.get_or_load(user, "T1", loader)

        removed = cache.invalidate_if(lambda key, value: value == "drop")

        assert removed == 1
        assert cache.peek("U1", "T1") == "keep"

    @pytest.mark.asyncio
    async def test_clear(self, cache):
        loader = CountingLoader()
        loader.release.set()
        await cache.get_or_load("U1", "T1", loader)
        cache.clear()
        assert len(cache) == 0

    def test_generation_advances_on_every_invalidation(self, cache):
        start = cache.generation
        cache.invalidate("U1", "T1")
        cache.invalidate_tenant("T9")
        assert cache.generation == start + 2


class TestEviction:
    """Size bound."""

    @pytest.mark.asyncio
    async def test_least_recently_used_is_evicted(self, timer):
        cache = PermissionSetCache(default_ttl=600, max_entries=2, timer=timer)
        loader = CountingLoader()
        loader.release.set()

        await cache.get_or_load("U1", "T1", loader)
        await cache.get_or_load("U2", "T1", loader)
        await cache.get_or_load("U1", "T1", loader)
        await cache.get_or_load("U3", "T1", loader)

        assert len(cache) == 2
        assert cache.peek("U2", "T1") is None
        assert cache.peek("U1", "T1") == "value"
        assert cache.stats.evictions == 1
