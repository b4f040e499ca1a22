"""Tenant config objects in the cluster: naming, fetch, and change watches.

Each tenant's settings live in a ConfigMap named "{tenant_id}-mt-config"
in one fixed namespace. Fetch and watch are blocking kubernetes client
calls; the builder runs fetches in a worker thread and the watch
aggregator runs each watch in its own pump thread.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Protocol

from kubernetes import watch as k8s_watch

from tenantbridge.domain.entities import ConfigEvent, TenantConfigSource
from tenantbridge.domain.enums import ConfigEventType
from tenantbridge.domain.value_objects import TenantId

if TYPE_CHECKING:
    from kubernetes.client import CoreV1Api

    from tenantbridge.core.config import Settings
    from tenantbridge.infrastructure.cluster.client import ClusterClient

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_SUFFIX = "-mt-config"


def tenant_config_name(tenant_id: TenantId, suffix: str = DEFAULT_CONFIG_SUFFIX) -> str:
    """Deterministic config object name for a tenant (e.g. '42-mt-config')."""
    return f"{tenant_id}{suffix}"


class TenantConfigReader(Protocol):
    """Fetches a tenant's config object; None when it does not exist."""

    def fetch(self, tenant_id: TenantId) -> TenantConfigSource | None: ...


class ConfigWatch(Protocol):
    """Blocking iterator of one tenant's config events; stop() ends it from any thread."""

    def __iter__(self) -> Iterator[ConfigEvent]: ...

    def stop(self) -> None: ...


class ConfigWatchSource(Protocol):
    """Opens config watches for tenants."""

    def open(self, tenant_id: TenantId, resource_version: str | None = None) -> ConfigWatch: ...


class ConfigMapWatch:
    """Watch on a single ConfigMap, reconnecting until stopped.

    Starts from resource_version when given, so the object the caller
    already fetched is not replayed as ADDED. Each server-side watch lasts
    timeout_seconds; the loop then reconnects from the last seen version.
    """

    def __init__(
        self,
        core: "CoreV1Api",
        tenant_id: TenantId,
        name: str,
        namespace: str,
        resource_version: str | None = None,
        timeout_seconds: int = 30,
    ) -> None:
        self.tenant_id = tenant_id
        self._core = core
        self._name = name
        self._namespace = namespace
        self._resource_version = resource_version
        self._timeout_seconds = timeout_seconds
        self._watch = k8s_watch.Watch()
        self._stopped = threading.Event()

    def __iter__(self) -> Iterator[ConfigEvent]:
        while not self._stopped.is_set():
            kwargs: dict[str, Any] = {
                "field_selector": f"metadata.name={self._name}",
                "timeout_seconds": self._timeout_seconds,
            }
            if self._resource_version:
                kwargs["resource_version"] = self._resource_version
            for raw in self._watch.stream(
                self._core.list_namespaced_config_map, self._namespace, **kwargs
            ):
                event = self._to_event(raw)
                if event is None:
                    continue
                if event.resource_version:
                    self._resource_version = event.resource_version
                yield event
                if event.type.closes_subscription or self._stopped.is_set():
                    return

    def _to_event(self, raw: dict[str, Any]) -> ConfigEvent | None:
        try:
            event_type = ConfigEventType(raw.get("type"))
        except ValueError:
            logger.debug("Ignoring %s event for %s", raw.get("type"), self._name)
            return None
        obj = raw.get("raw_object") or {}
        if event_type == ConfigEventType.ERROR:
            return ConfigEvent(self.tenant_id, event_type, message=obj.get("message"))
        metadata = obj.get("metadata") or {}
        return ConfigEvent(self.tenant_id, event_type, metadata.get("resourceVersion"))

    def stop(self) -> None:
        self._stopped.set()
        self._watch.stop()


class ClusterTenantConfigSource:
    """Reads and watches tenant ConfigMaps through a ClusterClient."""

    def __init__(
        self,
        cluster: "ClusterClient",
        namespace: str,
        suffix: str = DEFAULT_CONFIG_SUFFIX,
        watch_timeout_seconds: int = 30,
    ) -> None:
        self._cluster = cluster
        self.namespace = namespace
        self.suffix = suffix
        self._watch_timeout_seconds = watch_timeout_seconds

    @classmethod
    def from_settings(
        cls, cluster: "ClusterClient", settings: "Settings"
    ) -> ClusterTenantConfigSource:
        return cls(
            cluster,
            namespace=settings.tenant_config_namespace,
            suffix=settings.tenant_config_suffix,
            watch_timeout_seconds=settings.cluster_watch_timeout_seconds,
        )

    def name_for(self, tenant_id: TenantId) -> str:
        return tenant_config_name(tenant_id, self.suffix)

    def fetch(self, tenant_id: TenantId) -> TenantConfigSource | None:
        """Fetch the tenant's ConfigMap. Raises ApiException on non-404 failures."""
        return self._cluster.read_config_map(self.name_for(tenant_id), self.namespace)

    def open(self, tenant_id: TenantId, resource_version: str | None = None) -> ConfigMapWatch:
        return ConfigMapWatch(
            self._cluster.core,
            tenant_id,
            self.name_for(tenant_id),
            self.namespace,
            resource_version=resource_version,
            timeout_seconds=self._watch_timeout_seconds,
        )
