"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by the
infrastructure, middleware and API layers.
"""

from tenantbridge.domain.entities import (
    ConfigEvent,
    CustomResourceSchema,
    RegisteredSchema,
    TenantConfigSource,
    TenantContext,
)
from tenantbridge.domain.enums import (
    ConfigEventType,
    ResourceScope,
    TenantStatus,
    WatchState,
)
from tenantbridge.domain.exceptions import (
    BridgeException,
    ClusterUnavailableException,
    InvalidGroupVersionException,
    MappingAmbiguousException,
    MappingNotFoundException,
    NamespaceRequiredException,
    SchemaAlreadyRegisteredException,
    TenantConfigUnavailableException,
    TenantExtractionException,
    TenantNotResolvedException,
)
from tenantbridge.domain.value_objects import GroupKind, GroupVersion, TenantId

__all__ = [
    # Entities
    "ConfigEvent",
    "CustomResourceSchema",
    "RegisteredSchema",
    "TenantConfigSource",
    "TenantContext",
    # Enums
    "ConfigEventType",
    "ResourceScope",
    "TenantStatus",
    "WatchState",
    # Exceptions
    "BridgeException",
    "ClusterUnavailableException",
    "InvalidGroupVersionException",
    "MappingAmbiguousException",
    "MappingNotFoundException",
    "NamespaceRequiredException",
    "SchemaAlreadyRegisteredException",
    "TenantConfigUnavailableException",
    "TenantExtractionException",
    "TenantNotResolvedException",
    # Value objects
    "GroupKind",
    "GroupVersion",
    "TenantId",
]
