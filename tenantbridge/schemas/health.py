"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")
    cluster: str = Field(
        default="disabled", description="Cluster access: connected or disabled"
    )
    cached_tenants: int = Field(default=0, description="Tenant contexts in cache")
    watched_tenants: int = Field(default=0, description="Active tenant config watches")


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready when ready."""

    status: str = Field(default="ok", description="Readiness status")


class ReadinessErrorResponse(BaseModel):
    """Response for GET /health/ready when a required collaborator is missing (503)."""

    status: str = Field(default="not_ready", description="Readiness status")
    message: str = Field(..., description="Reason (e.g. cluster client unavailable)")
