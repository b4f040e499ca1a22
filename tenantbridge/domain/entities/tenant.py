"""Tenant entities: the fetched config object and the cached tenant context."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from tenantbridge.domain.enums import TenantStatus
from tenantbridge.domain.value_objects.core import TenantId


@dataclass(frozen=True)
class TenantConfigSource:
    """Raw tenant configuration object (a ConfigMap) fetched from the cluster."""

    name: str
    namespace: str
    data: Mapping[str, str] = field(default_factory=dict)
    resource_version: str | None = None


@dataclass(frozen=True)
class TenantContext:
    """Immutable per-tenant context shared by all requests of that tenant.

    session is the tenant's session store, or None when the config is
    absent or could not be turned into one; status says which. A config
    change produces a new TenantContext; this one is never mutated.
    """

    tenant_id: TenantId
    session: Any = field(default=None, compare=False)
    status: TenantStatus = TenantStatus.UNCONFIGURED
    config_version: str | None = None

    @property
    def has_session(self) -> bool:
        return self.session is not None
