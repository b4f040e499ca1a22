"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes get
their collaborators from tenantbridge.api.v1.dependencies.
"""

from fastapi import APIRouter

from tenantbridge.api.v1.endpoints import health, resources, schemas, tenant

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(tenant.router, prefix="/tenant", tags=["tenant"])
api_router.include_router(schemas.router, prefix="/schemas", tags=["schemas"])
api_router.include_router(resources.router, prefix="/resources", tags=["resources"])
