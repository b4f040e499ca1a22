"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (cluster client, schema
registry, resource resolver, tenant cache, config watch aggregator).
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from kubernetes.config import ConfigException

from tenantbridge.core.config import Settings, get_settings
from tenantbridge.infrastructure.cluster import (
    ClusterClient,
    ResourceResolver,
    SchemaRegistry,
)
from tenantbridge.infrastructure.tenancy import (
    ClusterTenantConfigSource,
    ConfigWatchAggregator,
    TenantCache,
    TenantContextBuilder,
)

logger = logging.getLogger(__name__)


async def _connect_cluster(settings: Settings) -> ClusterClient | None:
    """Return a cluster client, or None when disabled or unreachable."""
    if settings.cluster_mode == "disabled":
        logger.info("Cluster access disabled; running without schema registry or tenant configs")
        return None
    try:
        return await asyncio.to_thread(ClusterClient.from_settings, settings)
    except ConfigException as e:
        logger.warning("No usable cluster configuration (%s); running without cluster", e)
    except Exception:
        logger.exception("Failed to create cluster client; running without cluster")
    return None


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: cluster client, schema registry (+ configured CRD
    manifests), resource resolver, tenant cache, watch aggregator.
    Shutdown order: watch aggregator, tenant cache, cluster client.
    """
    settings = get_settings()

    # ---- Startup ----
    cluster = await _connect_cluster(settings)
    app.state.cluster = cluster

    if cluster is not None:
        registry = SchemaRegistry(cluster)
        if settings.manifest_paths:
            recorded = await asyncio.to_thread(
                registry.register_manifests, settings.manifest_paths
            )
            logger.info("Registered %d schemas from manifests", len(recorded))
        app.state.schema_registry = registry
        app.state.resource_resolver = ResourceResolver(cluster.dynamic)
        config_source: ClusterTenantConfigSource | None = (
            ClusterTenantConfigSource.from_settings(cluster, settings)
        )
    else:
        app.state.schema_registry = None
        app.state.resource_resolver = None
        config_source = None

    builder = TenantContextBuilder.from_settings(config_source, settings)
    cache = TenantCache(builder, max_entries=settings.tenant_cache_max_entries)
    app.state.tenant_cache = cache

    if config_source is not None and settings.watch_enabled:
        aggregator = ConfigWatchAggregator(config_source, cache)
        cache.on_cached = aggregator.tenant_cached
        cache.on_evicted = aggregator.tenant_evicted
        aggregator.start()
        app.state.watch_aggregator = aggregator
    else:
        app.state.watch_aggregator = None

    yield

    # ---- Shutdown ----
    aggregator = getattr(app.state, "watch_aggregator", None)
    if aggregator is not None:
        await aggregator.shutdown(settings.watch_shutdown_grace_seconds)
        app.state.watch_aggregator = None

    if getattr(app.state, "tenant_cache", None) is not None:
        await app.state.tenant_cache.close()
        app.state.tenant_cache = None

    if getattr(app.state, "cluster", None) is not None:
        app.state.cluster.close()
        app.state.cluster = None
