"""Pydantic response schemas for the API."""

from tenantbridge.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)
from tenantbridge.schemas.resource import ResourceListResponse
from tenantbridge.schemas.schema import SchemaListResponse, SchemaResponse
from tenantbridge.schemas.tenant import TenantResponse

__all__ = [
    "HealthResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "ResourceListResponse",
    "SchemaListResponse",
    "SchemaResponse",
    "TenantResponse",
]
