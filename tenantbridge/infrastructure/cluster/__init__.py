"""Cluster API bridging: client wrapper, schema registry, resource resolver."""

from tenantbridge.infrastructure.cluster.client import ClusterClient, load_api_client
from tenantbridge.infrastructure.cluster.resource_resolver import (
    ResourceHandle,
    ResourceResolver,
)
from tenantbridge.infrastructure.cluster.schema_registry import SchemaRegistry

__all__ = [
    "ClusterClient",
    "ResourceHandle",
    "ResourceResolver",
    "SchemaRegistry",
    "load_api_client",
]
