"""Fan-in of per-tenant config watches into one cache-invalidation loop.

One subscription per cached tenant. Each subscription's blocking watch runs
in its own daemon pump thread that forwards events, in source order, into
a single asyncio queue. One invalidation loop owns the right to evict
cache entries on watch events:

    ACTIVE --ADDED/MODIFIED--> ACTIVE   (entry invalidated)
    ACTIVE --DELETED/ERROR---> CLOSED   (entry invalidated, watch released)

CLOSED is terminal; the next cache population opens a new subscription.
Events from a subscription that is no longer current are ignored.

shutdown() is the single cancellation signal: it stops every watch, waits
(bounded) for the pumps to finish, then lets the loop drain the queue and
return.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tenantbridge.domain.entities import ConfigEvent, TenantContext
from tenantbridge.domain.enums import ConfigEventType, WatchState
from tenantbridge.domain.value_objects import TenantId

if TYPE_CHECKING:
    from tenantbridge.infrastructure.tenancy.config_source import (
        ConfigWatch,
        ConfigWatchSource,
    )
    from tenantbridge.infrastructure.tenancy.tenant_cache import TenantCache

logger = logging.getLogger(__name__)

_SHUTDOWN = object()


@dataclass(eq=False)
class WatchSubscription:
    """A tenant's live config watch, owned by the aggregator."""

    tenant_id: TenantId
    handle: "ConfigWatch"
    state: WatchState = WatchState.ACTIVE
    finished: asyncio.Event = field(default_factory=asyncio.Event, repr=False)

    def close(self) -> None:
        """Stop the watch. Idempotent."""
        if self.state == WatchState.CLOSED:
            return
        self.state = WatchState.CLOSED
        self.handle.stop()


class ConfigWatchAggregator:
    """Multiplexes tenant config watches and invalidates the tenant cache."""

    def __init__(self, source: "ConfigWatchSource", cache: "TenantCache") -> None:
        self._source = source
        self._cache = cache
        self._subscriptions: dict[TenantId, WatchSubscription] = {}
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self._closing = False

    # -- subscriptions (event loop thread only) --

    def subscribe(
        self, tenant_id: TenantId, resource_version: str | None = None
    ) -> WatchSubscription | None:
        """Open a watch for tenant_id unless one is already ACTIVE.

        Returns the active subscription, or None once shutdown has begun.
        """
        if self._closing:
            return None
        current = self._subscriptions.get(tenant_id)
        if current is not None and current.state == WatchState.ACTIVE:
            return current
        loop = asyncio.get_running_loop()
        subscription = WatchSubscription(
            tenant_id, self._source.open(tenant_id, resource_version)
        )
        self._subscriptions[tenant_id] = subscription
        threading.Thread(
            target=self._pump,
            args=(subscription, loop),
            name=f"config-watch-{tenant_id}",
            daemon=True,
        ).start()
        logger.info("Watching config for tenant %s from version %s", tenant_id, resource_version)
        return subscription

    def unsubscribe(self, tenant_id: TenantId) -> None:
        """Release tenant_id's watch, if any."""
        subscription = self._subscriptions.pop(tenant_id, None)
        if subscription is not None:
            subscription.close()
            logger.info("Stopped config watch for tenant %s", tenant_id)

    def tenant_cached(self, context: TenantContext) -> None:
        """TenantCache.on_cached hook."""
        self.subscribe(context.tenant_id, context.config_version)

    def tenant_evicted(self, context: TenantContext) -> None:
        """TenantCache.on_evicted hook."""
        self.unsubscribe(context.tenant_id)

    @property
    def subscriptions(self) -> dict[TenantId, WatchSubscription]:
        return dict(self._subscriptions)

    # -- pump (one thread per subscription) --

    def _pump(self, subscription: WatchSubscription, loop: asyncio.AbstractEventLoop) -> None:
        closed_by_event = False
        try:
            for event in subscription.handle:
                self._call(loop, self._queue.put_nowait, (subscription, event))
                if event.type.closes_subscription:
                    closed_by_event = True
                    break
            if not closed_by_event and subscription.state == WatchState.ACTIVE:
                raise RuntimeError("watch stream ended")
        except Exception as e:
            if subscription.state == WatchState.ACTIVE:
                logger.warning("Config watch for tenant %s failed: %s", subscription.tenant_id, e)
                error = ConfigEvent(subscription.tenant_id, ConfigEventType.ERROR, message=str(e))
                self._call(loop, self._queue.put_nowait, (subscription, error))
        finally:
            self._call(loop, subscription.finished.set)

    @staticmethod
    def _call(loop: asyncio.AbstractEventLoop, fn: Any, *args: Any) -> None:
        try:
            loop.call_soon_threadsafe(fn, *args)
        except RuntimeError:
            logger.debug("Event loop closed; dropping watch callback")

    # -- invalidation loop --

    def start(self) -> asyncio.Task[None]:
        """Run the invalidation loop as a background task."""
        if self._task is None:
            self._task = asyncio.create_task(self.run(), name="config-watch-invalidation")
        return self._task

    async def run(self) -> None:
        """Consume events until shutdown; returns after the queue is drained."""
        while True:
            item = await self._queue.get()
            try:
                if item is _SHUTDOWN:
                    return
                subscription, event = item
                self._apply(subscription, event)
            except Exception:
                logger.exception("Failed to apply config event %r", item)
            finally:
                self._queue.task_done()

    def _apply(self, subscription: WatchSubscription, event: ConfigEvent) -> None:
        tenant_id = event.tenant_id
        if self._subscriptions.get(tenant_id) is not subscription:
            logger.debug("Ignoring %s for tenant %s from a stale watch", event.type.value, tenant_id)
            return
        logger.info(
            "Config %s for tenant %s (version %s)",
            event.type.value,
            tenant_id,
            event.resource_version,
        )
        self._cache.invalidate(tenant_id)
        if event.type.closes_subscription:
            subscription.close()
            del self._subscriptions[tenant_id]

    async def shutdown(self, grace_seconds: float = 5.0) -> None:
        """Close all watches, wait for pumps, drain the queue, stop the loop."""
        if self._closing:
            return
        self._closing = True
        subscriptions = list(self._subscriptions.values())
        for subscription in subscriptions:
            subscription.close()
        if subscriptions:
            waiters = [asyncio.create_task(s.finished.wait()) for s in subscriptions]
            _, pending = await asyncio.wait(waiters, timeout=grace_seconds)
            for waiter in pending:
                waiter.cancel()
            if pending:
                logger.warning(
                    "%d config watches did not stop within %.1fs", len(pending), grace_seconds
                )
        self._queue.put_nowait(_SHUTDOWN)
        if self._task is not None:
            await self._task
        else:
            await self.run()
        self._subscriptions.clear()
        logger.info("Config watch aggregator stopped (%d watches)", len(subscriptions))
