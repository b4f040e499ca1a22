"""Domain exceptions for tenantbridge.

Registry and resolver errors are raised to their direct callers. Tenant
build errors never leave the tenant cache: the builder raises
TenantConfigUnavailableException internally and degrades the context.
Presentation layer maps these to HTTP responses in exception handlers.
"""

from typing import Any


class BridgeException(Exception):
    """Base exception for all tenantbridge errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. group_version, tenant_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidGroupVersionException(BridgeException):
    """Raised when a schema does not carry a well-formed group/version."""

    def __init__(self, group: str, version: str) -> None:
        super().__init__(
            f"Invalid group/version: {group!r}/{version!r}",
            "INVALID_GROUP_VERSION",
            {"group": group, "version": version},
        )


class SchemaAlreadyRegisteredException(BridgeException):
    """Raised when a schema is already registered in this process's registry.

    Local-state error: the remote cluster is not consulted. A remote
    "already exists" is not an error and never raises this.
    """

    def __init__(self, group_version: str) -> None:
        """Initialize with the duplicate group/version.

        Args:
            group_version: String form of the GroupVersion (group/version).
        """
        super().__init__(
            f"Schema already registered: {group_version}",
            "SCHEMA_ALREADY_REGISTERED",
            {"group_version": group_version},
        )


class MappingNotFoundException(BridgeException):
    """Raised when discovery has no REST mapping for a group/kind (and versions)."""

    def __init__(self, group: str, kind: str, versions: tuple[str, ...] = ()) -> None:
        """Initialize with the group/kind that could not be mapped.

        Args:
            group: API group ("" for the core group).
            kind: Resource kind (e.g. 'Widget').
            versions: Acceptable versions that were tried, if any.
        """
        super().__init__(
            f"No REST mapping for kind {kind!r} in group {group!r}",
            "MAPPING_NOT_FOUND",
            {"group": group, "kind": kind, "versions": list(versions)},
        )


class MappingAmbiguousException(BridgeException):
    """Raised when discovery serves a kind at several versions and none is preferred."""

    def __init__(self, group: str, kind: str, versions: list[str]) -> None:
        super().__init__(
            f"Kind {kind!r} in group {group!r} is served at several versions; pass one explicitly",
            "MAPPING_AMBIGUOUS",
            {"group": group, "kind": kind, "versions": versions},
        )


class NamespaceRequiredException(BridgeException):
    """Raised when a namespaced kind is resolved without a namespace."""

    def __init__(self, group: str, kind: str) -> None:
        super().__init__(
            f"Kind {kind!r} in group {group!r} is namespaced; a namespace is required",
            "NAMESPACE_REQUIRED",
            {"group": group, "kind": kind},
        )


class TenantConfigUnavailableException(BridgeException):
    """Raised inside the tenant builder when a config stage fails.

    Never surfaced to the request path; the builder catches it and
    returns a degraded TenantContext.
    """

    def __init__(self, tenant_id: int, reason: str) -> None:
        super().__init__(
            f"Tenant {tenant_id} configuration unavailable: {reason}",
            "TENANT_CONFIG_UNAVAILABLE",
            {"tenant_id": tenant_id, "reason": reason},
        )


class TenantExtractionException(BridgeException):
    """Raised when the caller's tenant cannot be determined from the request.

    The tenant middleware catches it and lets the request proceed
    without tenant context.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Cannot determine tenant: {reason}",
            "TENANT_EXTRACTION_FAILED",
            {"reason": reason},
        )


class TenantNotResolvedException(BridgeException):
    """Raised by tenant-only endpoints when the request carries no tenant context."""

    def __init__(self) -> None:
        super().__init__("No tenant resolved for this request", "TENANT_NOT_RESOLVED")


class ClusterUnavailableException(BridgeException):
    """Raised when a cluster-backed operation runs while cluster access is disabled."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Cluster access is not configured (operation: {operation})",
            "CLUSTER_UNAVAILABLE",
            {"operation": operation},
        )
