"""Presentation-layer dependency injection.

Collaborators are built once in the lifespan and stored on app.state;
these dependencies hand them to routes, raising the domain exception for
a missing collaborator so the exception handlers pick the status code.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from tenantbridge.core.tenant_context import get_tenant
from tenantbridge.domain.entities import TenantContext
from tenantbridge.domain.exceptions import (
    ClusterUnavailableException,
    TenantNotResolvedException,
)
from tenantbridge.infrastructure.cluster import ResourceResolver, SchemaRegistry


def get_current_tenant(request: Request) -> TenantContext:
    """Tenant context resolved by the tenant middleware (404 when none)."""
    context = get_tenant() or getattr(request.state, "tenant", None)
    if context is None:
        raise TenantNotResolvedException()
    return context


def get_schema_registry(request: Request) -> SchemaRegistry:
    registry = getattr(request.app.state, "schema_registry", None)
    if registry is None:
        raise ClusterUnavailableException("list schemas")
    return registry


def get_resource_resolver(request: Request) -> ResourceResolver:
    resolver = getattr(request.app.state, "resource_resolver", None)
    if resolver is None:
        raise ClusterUnavailableException("resolve resource")
    return resolver


CurrentTenant = Annotated[TenantContext, Depends(get_current_tenant)]
Registry = Annotated[SchemaRegistry, Depends(get_schema_registry)]
Resolver = Annotated[ResourceResolver, Depends(get_resource_resolver)]
