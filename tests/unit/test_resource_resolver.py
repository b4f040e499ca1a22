"""Unit tests for ResourceResolver and ResourceHandle (scope-correct handles)."""

from unittest.mock import MagicMock

import pytest
from kubernetes.dynamic.exceptions import ResourceNotFoundError
from kubernetes.dynamic.resource import Resource, ResourceList

from tenantbridge.domain.enums import ResourceScope
from tenantbridge.domain.exceptions import (
    MappingAmbiguousException,
    MappingNotFoundException,
    NamespaceRequiredException,
)
from tenantbridge.domain.value_objects import GroupKind
from tenantbridge.infrastructure.cluster import ResourceResolver
from tenantbridge.infrastructure.cluster.resource_resolver import MERGE_PATCH


def make_resource(
    kind: str = "Widget",
    group: str = "example.com",
    version: str = "v1",
    namespaced: bool = True,
    preferred: bool = True,
) -> Resource:
    return Resource(
        prefix="apis" if group else "api",
        group=group,
        api_version=version,
        kind=kind,
        namespaced=namespaced,
        name=kind.lower() + "s",
        preferred=preferred,
    )


@pytest.fixture
def dynamic() -> MagicMock:
    dynamic = MagicMock()
    dynamic.get.return_value.to_dict.return_value = {"items": []}
    return dynamic


def test_namespaced_kind_binds_handle_to_namespace(dynamic: MagicMock) -> None:
    dynamic.resources.search.return_value = [make_resource(namespaced=True)]
    handle = ResourceResolver(dynamic).resolve(GroupKind("example.com", "Widget"), "team-a")
    assert handle.scope == ResourceScope.NAMESPACED
    assert handle.namespace == "team-a"
    assert handle.api_version == "example.com/v1"
    assert handle.plural == "widgets"


def test_namespaced_kind_without_namespace_is_rejected(dynamic: MagicMock) -> None:
    dynamic.resources.search.return_value = [make_resource(namespaced=True)]
    with pytest.raises(NamespaceRequiredException):
        ResourceResolver(dynamic).resolve(GroupKind("example.com", "Widget"))


def test_cluster_scoped_kind_ignores_namespace(dynamic: MagicMock) -> None:
    """A cluster-scoped handle never carries a namespace, even if one was given."""
    dynamic.resources.search.return_value = [
        make_resource(kind="Namespace", group="", namespaced=False)
    ]
    handle = ResourceResolver(dynamic).resolve(GroupKind("", "Namespace"), "team-a")
    assert handle.scope == ResourceScope.CLUSTER
    assert handle.namespace is None
    handle.list()
    assert "namespace" not in dynamic.get.call_args.kwargs


def test_versions_are_tried_in_preference_order(dynamic: MagicMock) -> None:
    v1 = make_resource(version="v1")

    def lookup(group: str, api_version: str, kind: str) -> Resource:
        if api_version == "v1":
            return v1
        raise ResourceNotFoundError(f"{kind} {api_version}")

    dynamic.resources.get.side_effect = lookup
    handle = ResourceResolver(dynamic).resolve(
        GroupKind("example.com", "Widget"), "team-a", "v2", "v1"
    )
    assert handle.api_version == "example.com/v1"
    versions = [c.kwargs["api_version"] for c in dynamic.resources.get.call_args_list]
    assert versions == ["v2", "v1"]


def test_no_matching_version_raises_mapping_not_found(dynamic: MagicMock) -> None:
    dynamic.resources.get.side_effect = ResourceNotFoundError("nope")
    with pytest.raises(MappingNotFoundException) as exc_info:
        ResourceResolver(dynamic).resolve(GroupKind("example.com", "Widget"), "ns", "v3")
    assert exc_info.value.details["versions"] == ["v3"]
    assert exc_info.value.error_code == "MAPPING_NOT_FOUND"


@pytest.mark.parametrize("search_result", [[], ResourceNotFoundError("missing")])
def test_unknown_kind_raises_mapping_not_found(
    dynamic: MagicMock, search_result: object
) -> None:
    if isinstance(search_result, Exception):
        dynamic.resources.search.side_effect = search_result
    else:
        dynamic.resources.search.return_value = search_result
    with pytest.raises(MappingNotFoundException):
        ResourceResolver(dynamic).resolve(GroupKind("example.com", "Gizmo"), "ns")


def test_preferred_version_wins_without_explicit_versions(dynamic: MagicMock) -> None:
    dynamic.resources.search.return_value = [
        make_resource(version="v1beta1", preferred=False),
        make_resource(version="v1", preferred=True),
    ]
    handle = ResourceResolver(dynamic).resolve(GroupKind("example.com", "Widget"), "ns")
    assert handle.api_version == "example.com/v1"


def test_ambiguous_versions_without_preference_raise(dynamic: MagicMock) -> None:
    dynamic.resources.search.return_value = [
        make_resource(version="v1", preferred=False),
        make_resource(version="v2", preferred=False),
    ]
    with pytest.raises(MappingAmbiguousException) as exc_info:
        ResourceResolver(dynamic).resolve(GroupKind("example.com", "Widget"), "ns")
    assert exc_info.value.details["versions"] == ["v1", "v2"]


def test_list_resources_are_not_candidates(dynamic: MagicMock) -> None:
    listing = ResourceList(MagicMock(), group="example.com", api_version="v1", base_kind="Widget")
    dynamic.resources.search.return_value = [listing, make_resource(preferred=False)]
    handle = ResourceResolver(dynamic).resolve(GroupKind("example.com", "Widget"), "ns")
    assert handle.kind == "Widget"


def test_handle_operations_pass_namespace(dynamic: MagicMock) -> None:
    dynamic.resources.search.return_value = [make_resource()]
    handle = ResourceResolver(dynamic).resolve(GroupKind("example.com", "Widget"), "team-a")

    assert handle.list(label_selector="app=x") == {"items": []}
    assert dynamic.get.call_args.kwargs == {"namespace": "team-a", "label_selector": "app=x"}

    handle.patch("w1", {"spec": {"size": 2}})
    kwargs = dynamic.patch.call_args.kwargs
    assert kwargs["name"] == "w1"
    assert kwargs["namespace"] == "team-a"
    assert kwargs["content_type"] == MERGE_PATCH

    handle.delete("w1")
    assert dynamic.delete.call_args.kwargs == {"name": "w1", "namespace": "team-a"}
