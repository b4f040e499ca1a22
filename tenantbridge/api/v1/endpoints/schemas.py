"""Registered schema endpoints."""

from fastapi import APIRouter

from tenantbridge.api.v1.dependencies import Registry
from tenantbridge.schemas.schema import SchemaListResponse, SchemaResponse

router = APIRouter()


@router.get("", response_model=SchemaListResponse)
def list_schemas(registry: Registry) -> SchemaListResponse:
    """List custom resource schemas registered by this process."""
    items = [SchemaResponse.from_entity(s) for s in registry.list_schemas()]
    return SchemaListResponse(items=items, total=len(items))
