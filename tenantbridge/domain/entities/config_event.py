"""Config change notification delivered by a tenant config watch."""

from dataclasses import dataclass

from tenantbridge.domain.enums import ConfigEventType
from tenantbridge.domain.value_objects.core import TenantId


@dataclass(frozen=True)
class ConfigEvent:
    """One watch event for a tenant's config object."""

    tenant_id: TenantId
    type: ConfigEventType
    resource_version: str | None = None
    message: str | None = None
