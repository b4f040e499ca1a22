"""Kubernetes API client wrapper.

One isolated ApiClient per ClusterClient (new_client_from_config for
kubeconfig, an explicit Configuration for in-cluster), so the global
kubernetes SDK configuration is never mutated. Calls are blocking; async
callers run them with asyncio.to_thread.
"""

from __future__ import annotations

import logging
from functools import cached_property
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.client.rest import ApiException
from kubernetes.config import new_client_from_config
from kubernetes.dynamic import DynamicClient

from tenantbridge.domain.entities import TenantConfigSource

if TYPE_CHECKING:
    from tenantbridge.core.config import Settings

logger = logging.getLogger(__name__)


def load_api_client(settings: "Settings") -> k8s_client.ApiClient:
    """Create an isolated ApiClient for the configured cluster mode.

    Raises:
        kubernetes.config.ConfigException: If no usable config is found.
        ValueError: If cluster_mode is 'disabled'.
    """
    if settings.cluster_mode == "disabled":
        raise ValueError("Cluster access is disabled (CLUSTER_MODE=disabled)")
    if settings.cluster_mode == "incluster":
        configuration = k8s_client.Configuration()
        k8s_config.load_incluster_config(client_configuration=configuration)
        return k8s_client.ApiClient(configuration)
    return new_client_from_config(
        config_file=settings.kubeconfig_path,
        context=settings.kube_context,
    )


class ClusterClient:
    """Cluster API surface used by the registry, resolver and tenant layers."""

    def __init__(self, api_client: k8s_client.ApiClient) -> None:
        self.api_client = api_client
        self.core = k8s_client.CoreV1Api(api_client)
        self.extensions = k8s_client.ApiextensionsV1Api(api_client)

    @classmethod
    def from_settings(cls, settings: "Settings") -> ClusterClient:
        return cls(load_api_client(settings))

    @cached_property
    def dynamic(self) -> DynamicClient:
        """Dynamic client; discovery runs on first access and is cached by the client."""
        return DynamicClient(self.api_client)

    def _serialize(self, obj: Any) -> dict[str, Any]:
        return self.api_client.sanitize_for_serialization(obj)

    def create_custom_resource_definition(self, body: dict[str, Any]) -> dict[str, Any]:
        """Create a CRD. Raises ApiException (409 when it already exists)."""
        created = self.extensions.create_custom_resource_definition(body)
        return self._serialize(created)

    def read_custom_resource_definition(self, name: str) -> dict[str, Any]:
        """Read a CRD by name. Raises ApiException."""
        return self._serialize(self.extensions.read_custom_resource_definition(name))

    def read_config_map(self, name: str, namespace: str) -> TenantConfigSource | None:
        """Read a ConfigMap; None when it does not exist.

        Raises:
            ApiException: For any failure other than 404.
        """
        try:
            config_map = self.core.read_namespaced_config_map(name, namespace)
        except ApiException as e:
            if e.status == HTTPStatus.NOT_FOUND:
                return None
            raise
        metadata = config_map.metadata
        return TenantConfigSource(
            name=name,
            namespace=namespace,
            data=dict(config_map.data or {}),
            resource_version=metadata.resource_version if metadata else None,
        )

    def close(self) -> None:
        """Close the underlying connection pool."""
        self.api_client.close()
        logger.info("Cluster API client closed")
