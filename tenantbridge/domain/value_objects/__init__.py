"""Domain value objects and shared value types."""

from tenantbridge.domain.value_objects.core import GroupKind, GroupVersion, TenantId

__all__ = [
    "GroupKind",
    "GroupVersion",
    "TenantId",
]
