"""Tests for the signal-type allow-list TTL cache."""
import asyncio

import pytest

from pulse.config import settings
from pulse.domain.concepts.models import SignalTypeOption
from pulse.services.signal_type_cache import SignalTypeOptionsCache
from tests.unit.concept_fakes import FakeClock, FakeSignalTypeStore, StoreUnavailableError

OPTIONS = [
    SignalTypeOption(id=1, name="Feature Launch", description="New product capability"),
    SignalTypeOption(id=2, name="Pricing Change"),
]


@pytest.fixture
def store():
    return FakeSignalTypeStore(OPTIONS)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.mark.asyncio
async def test_second_read_within_ttl_hits_cache(store, clock):
    cache = SignalTypeOptionsCache(store, ttl_seconds=60, clock=clock)

    first = await cache.get_allowed()
    clock.advance(59)
    second = await cache.get_allowed()

    assert first == tuple(OPTIONS)
    assert second is first
    assert store.calls == 1


@pytest.mark.asyncio
async def test_entry_expires_at_ttl(store, clock):
    cache = SignalTypeOptionsCache(store, ttl_seconds=60, clock=clock)
    await cache.get_allowed()

    clock.advance(60)
    store.options = OPTIONS[:1]
    refreshed = await cache.get_allowed()

    assert refreshed == (OPTIONS[0],)
    assert store.calls == 2


@pytest.mark.asyncio
async def test_force_refresh_always_queries(store, clock):
    cache = SignalTypeOptionsCache(store, ttl_seconds=60, clock=clock)

    await cache.get_allowed()
    await cache.get_allowed(force_refresh=True)
    await cache.get_allowed(force_refresh=True)

    assert store.calls == 3


@pytest.mark.asyncio
async def test_force_refresh_restarts_ttl(store, clock):
    cache = SignalTypeOptionsCache(store, ttl_seconds=60, clock=clock)
    await cache.get_allowed()

    clock.advance(50)
    await cache.get_allowed(force_refresh=True)
    clock.advance(50)
    await cache.get_allowed()

    assert store.calls == 2


@pytest.mark.asyncio
async def test_invalidate_forces_reload(store, clock):
    cache = SignalTypeOptionsCache(store, ttl_seconds=60, clock=clock)
    await cache.get_allowed()

    cache.invalidate()
    await cache.get_allowed()

    assert store.calls == 2


@pytest.mark.asyncio
async def test_concurrent_cold_reads_query_once(store, clock):
    cache = SignalTypeOptionsCache(store, ttl_seconds=60, clock=clock)

    results = await asyncio.gather(*(cache.get_allowed() for _ in range(10)))

    assert store.calls == 1
    assert all(result is results[0] for result in results)


@pytest.mark.asyncio
async def test_failure_propagates_and_caches_nothing(store, clock):
    cache = SignalTypeOptionsCache(store, ttl_seconds=60, clock=clock)
    store.fail = True

    with pytest.raises(StoreUnavailableError):
        await cache.get_allowed()

    store.fail = False
    assert await cache.get_allowed() == tuple(OPTIONS)
    assert store.calls == 2


@pytest.mark.asyncio
async def test_empty_allow_list_is_cached(clock):
    store = FakeSignalTypeStore([])
    cache = SignalTypeOptionsCache(store, ttl_seconds=60, clock=clock)

    assert await cache.get_allowed() == ()
    assert await cache.get_allowed() == ()
    assert store.calls == 1


def test_ttl_defaults_to_settings(store):
    cache = SignalTypeOptionsCache(store)

    assert cache.ttl_seconds == float(settings.signal_type_cache_ttl_seconds)
