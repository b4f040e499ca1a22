"""Domain value objects for tenantbridge.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

# DNS-1123 subdomain (API groups) and label (versions) formats.
_GROUP_RE = re.compile(
    r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$"
)
_VERSION_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_GROUP_MAX_LENGTH = 253
_VERSION_MAX_LENGTH = 63

# Tenant IDs are stack IDs: non-negative integers.
TenantId = int


@dataclass(frozen=True)
class GroupVersion:
    """API group and version; identity key of a registered schema.

    An empty group denotes the core API group. Use is_well_formed() to
    check a group/version before registering a custom schema (custom
    schemas always need a non-empty group).
    """

    group: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @property
    def api_version(self) -> str:
        """Wire apiVersion string (e.g. 'example.com/v1' or 'v1')."""
        return str(self)

    def is_well_formed(self) -> bool:
        """Return True if group and version are non-empty and DNS-compatible."""
        if not self.group or len(self.group) > _GROUP_MAX_LENGTH:
            return False
        if not self.version or len(self.version) > _VERSION_MAX_LENGTH:
            return False
        return bool(_GROUP_RE.match(self.group) and _VERSION_RE.match(self.version))


@dataclass(frozen=True)
class GroupKind:
    """API group and kind, the input of a REST mapping lookup."""

    group: str
    kind: str

    def __post_init__(self) -> None:
        if not self.kind:
            raise ValueError("GroupKind.kind must be a non-empty string")

    def __str__(self) -> str:
        return f"{self.kind}.{self.group}" if self.group else self.kind
