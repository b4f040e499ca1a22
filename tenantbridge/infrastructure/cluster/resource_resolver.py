"""Resolve a group/kind to a scope-correct handle on its instances.

Discovery (the dynamic client's discoverer) is the single source of truth
for scope: namespaced kinds get a handle bound to the caller's namespace,
cluster-scoped kinds get a handle with no namespace at all. Discovery
results are cached by the dynamic client, which refreshes its cache on a
miss; this module keeps no mapping cache of its own so CRDs registered
mid-process are picked up.
"""

from __future__ import annotations

import logging
from typing import Any

from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.exceptions import ResourceNotFoundError
from kubernetes.dynamic.resource import Resource, ResourceList

from tenantbridge.domain.enums import ResourceScope
from tenantbridge.domain.exceptions import (
    MappingAmbiguousException,
    MappingNotFoundException,
    NamespaceRequiredException,
)
from tenantbridge.domain.value_objects import GroupKind

logger = logging.getLogger(__name__)

MERGE_PATCH = "application/merge-patch+json"


class ResourceHandle:
    """Operations on instances of one resource kind (and namespace, if namespaced).

    Results are returned as plain dicts.
    """

    def __init__(
        self,
        dynamic: DynamicClient,
        resource: Resource,
        scope: ResourceScope,
        namespace: str | None = None,
    ) -> None:
        self._dynamic = dynamic
        self._resource = resource
        self.scope = scope
        self.namespace = namespace if scope == ResourceScope.NAMESPACED else None

    @property
    def plural(self) -> str:
        return self._resource.name

    @property
    def kind(self) -> str:
        return self._resource.kind

    @property
    def api_version(self) -> str:
        return self._resource.group_version

    def _scoped(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        if self.namespace is not None:
            kwargs["namespace"] = self.namespace
        return kwargs

    def get(self, name: str, **kwargs: Any) -> dict[str, Any]:
        return self._dynamic.get(self._resource, name=name, **self._scoped(kwargs)).to_dict()

    def list(self, **kwargs: Any) -> dict[str, Any]:
        """List instances (label_selector / field_selector pass through)."""
        return self._dynamic.get(self._resource, **self._scoped(kwargs)).to_dict()

    def create(self, body: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        return self._dynamic.create(self._resource, body=body, **self._scoped(kwargs)).to_dict()

    def replace(self, body: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        return self._dynamic.replace(self._resource, body=body, **self._scoped(kwargs)).to_dict()

    def patch(self, name: str, body: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        kwargs.setdefault("content_type", MERGE_PATCH)
        return self._dynamic.patch(
            self._resource, body=body, name=name, **self._scoped(kwargs)
        ).to_dict()

    def delete(self, name: str, **kwargs: Any) -> dict[str, Any]:
        return self._dynamic.delete(self._resource, name=name, **self._scoped(kwargs)).to_dict()

    def __repr__(self) -> str:
        return (
            f"ResourceHandle({self.api_version}/{self.plural}, scope={self.scope.value}, "
            f"namespace={self.namespace!r})"
        )


class ResourceResolver:
    """Maps (group, kind, versions) plus a namespace to a ResourceHandle."""

    def __init__(self, dynamic: DynamicClient) -> None:
        self._dynamic = dynamic

    def resolve(
        self,
        group_kind: GroupKind,
        namespace: str | None = None,
        *versions: str,
    ) -> ResourceHandle:
        """Return a handle for group_kind, bound to namespace when namespaced.

        Args:
            group_kind: API group ("" for core) and kind.
            namespace: Namespace for namespaced kinds; ignored for cluster kinds.
            versions: Acceptable versions in preference order; empty means
                the server's preferred version.

        Raises:
            MappingNotFoundException: No mapping for the kind/versions.
            MappingAmbiguousException: Several versions served and none preferred.
            NamespaceRequiredException: Kind is namespaced and namespace is empty.
        """
        resource = self._mapping(group_kind, versions)
        scope = ResourceScope.NAMESPACED if resource.namespaced else ResourceScope.CLUSTER
        if scope == ResourceScope.NAMESPACED and not namespace:
            raise NamespaceRequiredException(group_kind.group, group_kind.kind)
        if scope == ResourceScope.CLUSTER and namespace:
            logger.debug("Ignoring namespace %r for cluster-scoped %s", namespace, group_kind)
        return ResourceHandle(self._dynamic, resource, scope, namespace)

    def _mapping(self, group_kind: GroupKind, versions: tuple[str, ...]) -> Resource:
        resources = self._dynamic.resources
        if versions:
            for version in versions:
                try:
                    return resources.get(
                        group=group_kind.group, api_version=version, kind=group_kind.kind
                    )
                except ResourceNotFoundError:
                    continue
            raise MappingNotFoundException(group_kind.group, group_kind.kind, versions)

        try:
            found = resources.search(group=group_kind.group, kind=group_kind.kind)
        except ResourceNotFoundError:
            found = []
        candidates = [r for r in found if not isinstance(r, ResourceList)]
        if not candidates:
            raise MappingNotFoundException(group_kind.group, group_kind.kind)
        preferred = [r for r in candidates if getattr(r, "preferred", False)]
        if len(preferred) == 1:
            return preferred[0]
        if len(candidates) == 1:
            return candidates[0]
        raise MappingAmbiguousException(
            group_kind.group,
            group_kind.kind,
            sorted(r.api_version for r in candidates),
        )
