"""GET /api/v1/schemas and GET /api/v1/resources/{group}/{kind}."""

from unittest.mock import MagicMock

from fastapi import FastAPI
from httpx import AsyncClient

from tenantbridge.domain.entities import CustomResourceSchema
from tenantbridge.domain.enums import ResourceScope
from tenantbridge.domain.exceptions import (
    MappingAmbiguousException,
    MappingNotFoundException,
    NamespaceRequiredException,
)
from tenantbridge.domain.value_objects import GroupKind
from tenantbridge.infrastructure.cluster import SchemaRegistry

from tests.unit.test_schema_registry import crd_manifest, server_copy


async def test_schemas_unavailable_without_cluster(client: AsyncClient) -> None:
    response = await client.get("/api/v1/schemas")
    assert response.status_code == 503
    assert response.json()["error"] == "CLUSTER_UNAVAILABLE"


async def test_list_registered_schemas(app: FastAPI, client: AsyncClient) -> None:
    cluster = MagicMock()
    cluster.create_custom_resource_definition.side_effect = server_copy
    registry = SchemaRegistry(cluster)
    registry.register(CustomResourceSchema.from_manifest(crd_manifest()))
    app.state.schema_registry = registry

    response = await client.get("/api/v1/schemas")
    assert response.status_code == 200
    assert response.json() == {
        "items": [
            {
                "group": "example.com",
                "version": "v1",
                "kind": "Widget",
                "name": "widgets.example.com",
                "accepted": True,
            }
        ],
        "total": 1,
    }


def _handle(namespace: str | None) -> MagicMock:
    handle = MagicMock()
    handle.api_version = "v1"
    handle.kind = "Pod"
    handle.plural = "pods"
    handle.scope = ResourceScope.NAMESPACED
    handle.namespace = namespace
    handle.list.return_value = {"items": [{"metadata": {"name": "p1"}}]}
    return handle


async def test_list_resources_in_core_group(app: FastAPI, client: AsyncClient) -> None:
    """The 'core' path segment resolves against the core ('') group."""
    resolver = MagicMock()
    resolver.resolve.return_value = _handle("team-a")
    app.state.resource_resolver = resolver

    response = await client.get(
        "/api/v1/resources/core/Pod",
        params={"namespace": "team-a", "version": "v1", "label_selector": "app=web"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["scope"] == "Namespaced"
    assert data["namespace"] == "team-a"
    assert data["items"] == [{"metadata": {"name": "p1"}}]
    resolver.resolve.assert_called_once_with(GroupKind("", "Pod"), "team-a", "v1")
    resolver.resolve.return_value.list.assert_called_once_with(label_selector="app=web")


async def test_namespaced_kind_without_namespace_is_400(
    app: FastAPI, client: AsyncClient
) -> None:
    resolver = MagicMock()
    resolver.resolve.side_effect = NamespaceRequiredException("", "Pod")
    app.state.resource_resolver = resolver
    response = await client.get("/api/v1/resources/core/Pod")
    assert response.status_code == 400
    assert response.json()["error"] == "NAMESPACE_REQUIRED"


async def test_unknown_kind_is_404(app: FastAPI, client: AsyncClient) -> None:
    resolver = MagicMock()
    resolver.resolve.side_effect = MappingNotFoundException("example.com", "Gizmo")
    app.state.resource_resolver = resolver
    response = await client.get("/api/v1/resources/example.com/Gizmo", params={"namespace": "x"})
    assert response.status_code == 404
    assert response.json()["details"]["kind"] == "Gizmo"


async def test_ambiguous_kind_is_409(app: FastAPI, client: AsyncClient) -> None:
    resolver = MagicMock()
    resolver.resolve.side_effect = MappingAmbiguousException("example.com", "Widget", ["v1", "v2"])
    app.state.resource_resolver = resolver
    response = await client.get("/api/v1/resources/example.com/Widget", params={"namespace": "x"})
    assert response.status_code == 409
    assert response.json()["error"] == "MAPPING_AMBIGUOUS"
    assert response.json()["details"]["versions"] == ["v1", "v2"]


async def test_resources_unavailable_without_cluster(client: AsyncClient) -> None:
    response = await client.get("/api/v1/resources/core/Pod")
    assert response.status_code == 503
