"""Unit tests for TenantCache (identity, single-flight, LRU, invalidation)."""

import asyncio
import threading
from unittest.mock import AsyncMock, MagicMock

import pytest

from tenantbridge.domain.entities import TenantContext
from tenantbridge.domain.enums import TenantStatus
from tenantbridge.infrastructure.tenancy import TenantCache, TenantContextBuilder

from tests.conftest import FakeConfigReader, config_source, settings_document


@pytest.fixture
def configured_reader(reader: FakeConfigReader) -> FakeConfigReader:
    for tenant_id in (1, 2, 3, 42):
        reader.sources[tenant_id] = config_source(
            tenant_id, settings_document(type="postgres", name=f"grafana_{tenant_id}")
        )
    return reader


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


async def test_repeated_lookups_return_identical_context(
    configured_reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    """Sequential requests for one tenant share the same context object."""
    cache = TenantCache(builder)
    first = await cache.get_or_build(42)
    second = await cache.get_or_build(42)
    assert first is second
    assert first.status == TenantStatus.READY
    assert configured_reader.calls == [42]


async def test_concurrent_cold_lookups_build_once(
    configured_reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    """Concurrent first requests for a tenant are served by a single build."""
    configured_reader.gate = threading.Event()
    cache = TenantCache(builder)
    tasks = [asyncio.create_task(cache.get_or_build(1)) for _ in range(10)]
    await _settle()
    configured_reader.gate.set()
    results = await asyncio.gather(*tasks)
    assert all(r is results[0] for r in results)
    assert configured_reader.calls == [1]
    assert len(cache) == 1


async def test_distinct_tenants_get_distinct_contexts(
    configured_reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    cache = TenantCache(builder)
    one, two = await asyncio.gather(cache.get_or_build(1), cache.get_or_build(2))
    assert one.tenant_id == 1
    assert two.tenant_id == 2
    assert one.session is not two.session
    assert sorted(cache.tenant_ids()) == [1, 2]


async def test_unconfigured_tenant_is_cached_without_session(
    reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    """A tenant with no config still gets a (session-less) cached context."""
    cache = TenantCache(builder)
    context = await cache.get_or_build(7)
    assert context.session is None
    assert context.status == TenantStatus.UNCONFIGURED
    assert await cache.get_or_build(7) is context
    assert reader.calls == [7]


async def test_cancelled_caller_does_not_cancel_shared_build(
    configured_reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    """Cancelling one waiter leaves the build running for the others."""
    configured_reader.gate = threading.Event()
    cache = TenantCache(builder)
    first = asyncio.create_task(cache.get_or_build(1))
    second = asyncio.create_task(cache.get_or_build(1))
    await _settle()
    first.cancel()
    configured_reader.gate.set()
    context = await second
    assert context.status == TenantStatus.READY
    assert cache.get(1) is context
    with pytest.raises(asyncio.CancelledError):
        await first


async def test_lru_eviction_drops_least_recently_used(
    configured_reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    """Over capacity, the least recently used tenant is evicted and released."""
    evicted: list[int] = []
    cache = TenantCache(builder, max_entries=2)
    cache.on_evicted = lambda ctx: evicted.append(ctx.tenant_id)
    one = await cache.get_or_build(1)
    two = await cache.get_or_build(2)
    await cache.get_or_build(1)
    await cache.get_or_build(3)
    assert evicted == [2]
    assert 2 not in cache
    assert 1 in cache and 3 in cache
    await cache.close()
    assert two.session.disposed
    assert one.session.disposed


async def test_on_cached_fires_once_per_build(
    configured_reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    cached: list[TenantContext] = []
    cache = TenantCache(builder)
    cache.on_cached = cached.append
    context = await cache.get_or_build(1)
    await cache.get_or_build(1)
    assert cached == [context]


async def test_failing_hook_does_not_break_lookup(
    configured_reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    cache = TenantCache(builder)
    cache.on_cached = MagicMock(side_effect=RuntimeError("boom"))
    context = await cache.get_or_build(1)
    assert context.status == TenantStatus.READY
    assert cache.get(1) is context


async def test_invalidate_forces_rebuild(
    configured_reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    """After invalidation the next lookup builds a new context."""
    cache = TenantCache(builder)
    old = await cache.get_or_build(1)
    assert cache.invalidate(1) is old
    assert 1 not in cache
    new = await cache.get_or_build(1)
    assert new is not old
    assert configured_reader.calls == [1, 1]
    await _settle()
    assert old.session.disposed


async def test_invalidate_unknown_tenant_is_noop(builder: TenantContextBuilder) -> None:
    cache = TenantCache(builder)
    assert cache.invalidate(99) is None


async def test_invalidate_during_build_discards_result(
    configured_reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    """A build invalidated in flight still answers its waiters but is not cached."""
    configured_reader.gate = threading.Event()
    cache = TenantCache(builder)
    task = asyncio.create_task(cache.get_or_build(1))
    await _settle()
    cache.invalidate(1)
    configured_reader.gate.set()
    stale = await task
    assert stale.status == TenantStatus.READY
    assert 1 not in cache
    configured_reader.gate = None
    fresh = await cache.get_or_build(1)
    assert fresh is not stale
    assert cache.get(1) is fresh
    await cache.close()
    assert stale.session.disposed


async def test_unexpected_builder_error_yields_degraded_context() -> None:
    builder = MagicMock(spec=TenantContextBuilder)
    builder.build = AsyncMock(side_effect=RuntimeError("unexpected"))
    cache = TenantCache(builder)
    context = await cache.get_or_build(5)
    assert context.tenant_id == 5
    assert context.session is None
    assert context.status == TenantStatus.DEGRADED


async def test_close_releases_all_sessions(
    configured_reader: FakeConfigReader, builder: TenantContextBuilder
) -> None:
    cache = TenantCache(builder)
    contexts = [await cache.get_or_build(t) for t in (1, 2, 3)]
    await cache.close()
    assert len(cache) == 0
    assert all(c.session.disposed for c in contexts)
