"""Tenant resolution: config source, context builder, cache, and watch fan-in."""

from tenantbridge.infrastructure.tenancy.builder import (
    TenantContextBuilder,
    release_context,
)
from tenantbridge.infrastructure.tenancy.config_source import (
    ClusterTenantConfigSource,
    ConfigMapWatch,
    tenant_config_name,
)
from tenantbridge.infrastructure.tenancy.tenant_cache import TenantCache
from tenantbridge.infrastructure.tenancy.tenant_settings import (
    SettingsDocumentError,
    TenantDatabaseSettings,
    parse_settings_document,
)
from tenantbridge.infrastructure.tenancy.watch_aggregator import (
    ConfigWatchAggregator,
    WatchSubscription,
)

__all__ = [
    "ClusterTenantConfigSource",
    "ConfigMapWatch",
    "ConfigWatchAggregator",
    "SettingsDocumentError",
    "TenantCache",
    "TenantContextBuilder",
    "TenantDatabaseSettings",
    "WatchSubscription",
    "parse_settings_document",
    "release_context",
    "tenant_config_name",
]
