"""Domain enumerations for tenantbridge.

Enums represent fixed sets of domain values (resource scope, tenant
context status, watch event types and subscription state).
"""

from enum import Enum


class ResourceScope(str, Enum):
    """Scope of a resource kind as reported by discovery.

    Namespaced handles are bound to one namespace; cluster handles never are.
    """

    CLUSTER = "Cluster"
    NAMESPACED = "Namespaced"


class TenantStatus(str, Enum):
    """How far the tenant context could be built.

    READY: session store built from the tenant's config.
    UNCONFIGURED: no config object exists for the tenant.
    DEGRADED: the config could not be fetched, parsed, or turned into a session.
    """

    READY = "ready"
    UNCONFIGURED = "unconfigured"
    DEGRADED = "degraded"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]


class ConfigEventType(str, Enum):
    """Change notification types delivered by a config watch."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    ERROR = "ERROR"

    @property
    def closes_subscription(self) -> bool:
        """True for events after which the subscription is released."""
        return self in (ConfigEventType.DELETED, ConfigEventType.ERROR)


class WatchState(str, Enum):
    """Per-tenant watch subscription state. CLOSED is terminal."""

    ACTIVE = "active"
    CLOSED = "closed"
