"""In-process cache of TenantContext objects, one per tenant.

get_or_build() is single-flight per tenant: the first caller for a cold
tenant starts one build task and every concurrent caller awaits that same
task through asyncio.shield, so a cancelled request never cancels a build
other requests depend on. Readers see either no entry or a complete,
immutable TenantContext.

The cache is owned by the event loop; all mutation happens between awaits
on that loop, so no lock is needed. Capacity is bounded (LRU). Removed
contexts have their session stores disposed in the background.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Callable
from typing import TYPE_CHECKING

from tenantbridge.domain.entities import TenantContext
from tenantbridge.domain.enums import TenantStatus
from tenantbridge.domain.value_objects import TenantId
from tenantbridge.infrastructure.tenancy.builder import release_context

if TYPE_CHECKING:
    from tenantbridge.infrastructure.tenancy.builder import TenantContextBuilder

logger = logging.getLogger(__name__)

CacheHook = Callable[[TenantContext], None]


class TenantCache:
    """LRU-bounded, single-flight tenant context cache.

    Hooks:
        on_cached: called after a freshly built context is stored.
        on_evicted: called when a context is dropped for capacity.
        Explicit invalidate() does not fire on_evicted.
    """

    def __init__(self, builder: "TenantContextBuilder", max_entries: int = 1024) -> None:
        self._builder = builder
        self._max_entries = max_entries
        self._entries: OrderedDict[TenantId, TenantContext] = OrderedDict()
        self._inflight: dict[TenantId, asyncio.Task[TenantContext]] = {}
        self._background: set[asyncio.Task[None]] = set()
        self.on_cached: CacheHook | None = None
        self.on_evicted: CacheHook | None = None

    async def get_or_build(self, tenant_id: TenantId) -> TenantContext:
        """Return the cached context for tenant_id, building it once on a miss.

        Never raises for build failures; those yield a context without a session.
        """
        context = self._entries.get(tenant_id)
        if context is not None:
            self._entries.move_to_end(tenant_id)
            return context
        task = self._inflight.get(tenant_id)
        if task is None:
            task = asyncio.create_task(
                self._populate(tenant_id), name=f"tenant-build-{tenant_id}"
            )
            self._inflight[tenant_id] = task
        return await asyncio.shield(task)

    async def _populate(self, tenant_id: TenantId) -> TenantContext:
        task = asyncio.current_task()
        owner = False
        try:
            context = await self._build(tenant_id)
        finally:
            owner = self._inflight.get(tenant_id) is task
            if owner:
                del self._inflight[tenant_id]
        if owner:
            self._store(context)
        else:
            # Invalidated while building: hand the result to waiters, don't cache it.
            logger.debug("Discarding tenant %s build invalidated in flight", tenant_id)
            self._schedule_release(context)
        return context

    async def _build(self, tenant_id: TenantId) -> TenantContext:
        try:
            return await self._builder.build(tenant_id)
        except Exception:
            logger.exception("Unexpected error building tenant %s context", tenant_id)
            return TenantContext(tenant_id, None, TenantStatus.DEGRADED)

    def _store(self, context: TenantContext) -> None:
        previous = self._entries.pop(context.tenant_id, None)
        if previous is not None and previous is not context:
            self._schedule_release(previous)
        self._entries[context.tenant_id] = context
        self._notify(self.on_cached, context)
        while len(self._entries) > self._max_entries:
            _, evicted = self._entries.popitem(last=False)
            logger.info("Evicting tenant %s (cache full: %d)", evicted.tenant_id, self._max_entries)
            self._notify(self.on_evicted, evicted)
            self._schedule_release(evicted)

    def _notify(self, hook: CacheHook | None, context: TenantContext) -> None:
        if hook is None:
            return
        try:
            hook(context)
        except Exception:
            logger.exception("Tenant cache hook failed for tenant %s", context.tenant_id)

    def _schedule_release(self, context: TenantContext) -> None:
        if context.session is None:
            return
        task = asyncio.get_running_loop().create_task(release_context(context))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    def invalidate(self, tenant_id: TenantId) -> TenantContext | None:
        """Drop tenant_id's entry and detach any in-flight build.

        The next get_or_build() rebuilds. Returns the removed context, if any.
        """
        if self._inflight.pop(tenant_id, None) is not None:
            logger.debug("Detached in-flight build for tenant %s", tenant_id)
        context = self._entries.pop(tenant_id, None)
        if context is not None:
            logger.info("Invalidated tenant %s context", tenant_id)
            self._schedule_release(context)
        return context

    def get(self, tenant_id: TenantId) -> TenantContext | None:
        """Peek at the cached context without building or touching LRU order."""
        return self._entries.get(tenant_id)

    def tenant_ids(self) -> list[TenantId]:
        return list(self._entries)

    def __contains__(self, tenant_id: object) -> bool:
        return tenant_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def close(self) -> None:
        """Cancel in-flight builds and dispose every cached session store."""
        for task in list(self._inflight.values()):
            task.cancel()
        self._inflight.clear()
        contexts = list(self._entries.values())
        self._entries.clear()
        for context in contexts:
            await release_context(context)
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        logger.info("Tenant cache closed (%d contexts released)", len(contexts))
