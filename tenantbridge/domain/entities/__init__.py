"""Domain entities.

Pure domain models; no cluster client or SQLAlchemy concerns.
"""

from tenantbridge.domain.entities.config_event import ConfigEvent
from tenantbridge.domain.entities.schema import CustomResourceSchema, RegisteredSchema
from tenantbridge.domain.entities.tenant import TenantConfigSource, TenantContext

__all__ = [
    "ConfigEvent",
    "CustomResourceSchema",
    "RegisteredSchema",
    "TenantConfigSource",
    "TenantContext",
]
