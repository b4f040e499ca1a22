"""Custom resource schema entities.

CustomResourceSchema is what callers hand to the schema registry (a CRD
manifest plus its derived identity). RegisteredSchema is what the registry
stores after the cluster accepted or already had the CRD.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tenantbridge.domain.exceptions import InvalidGroupVersionException
from tenantbridge.domain.value_objects.core import GroupVersion


def _storage_version(versions: list[dict[str, Any]]) -> str:
    """Return the storage version, else the first served version, else ''."""
    for ver in versions:
        if ver.get("storage"):
            return ver.get("name", "")
    for ver in versions:
        if ver.get("served", True):
            return ver.get("name", "")
    return ""


@dataclass(frozen=True)
class CustomResourceSchema:
    """A CRD manifest and the GroupVersion it registers.

    definition is the full apiextensions.k8s.io/v1 CustomResourceDefinition
    body as a dict, sent to the cluster unchanged.
    """

    group_version: GroupVersion
    kind: str
    plural: str
    definition: dict[str, Any] = field(compare=False, repr=False)

    @property
    def name(self) -> str:
        """CRD object name (<plural>.<group>)."""
        return f"{self.plural}.{self.group_version.group}"

    @classmethod
    def from_manifest(cls, manifest: dict[str, Any]) -> CustomResourceSchema:
        """Build from a CRD manifest dict.

        Raises:
            InvalidGroupVersionException: If group or version is missing/malformed.
        """
        spec = manifest.get("spec") or {}
        names = spec.get("names") or {}
        group = spec.get("group") or ""
        version = _storage_version(spec.get("versions") or [])
        gv = GroupVersion(group=group, version=version)
        if not gv.is_well_formed():
            raise InvalidGroupVersionException(group, version)
        return cls(
            group_version=gv,
            kind=names.get("kind", ""),
            plural=names.get("plural", ""),
            definition=manifest,
        )


@dataclass(frozen=True)
class RegisteredSchema:
    """Server-side CRD recorded in the registry (one per GroupVersion)."""

    group_version: GroupVersion
    kind: str
    definition: dict[str, Any] = field(compare=False, repr=False)

    @property
    def name(self) -> str:
        return (self.definition.get("metadata") or {}).get("name", "")

    @property
    def accepted(self) -> bool:
        """True once the API server reports NamesAccepted for this CRD."""
        conditions = (self.definition.get("status") or {}).get("conditions") or []
        return any(
            c.get("type") == "NamesAccepted" and c.get("status") == "True"
            for c in conditions
        )
