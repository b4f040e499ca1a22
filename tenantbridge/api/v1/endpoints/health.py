"""Health check endpoints; used for liveness and readiness probes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from tenantbridge.core.config import get_settings
from tenantbridge.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return ok plus cluster and tenant cache counters."""
    state = request.app.state
    cache = getattr(state, "tenant_cache", None)
    aggregator = getattr(state, "watch_aggregator", None)
    return HealthResponse(
        cluster="connected" if getattr(state, "cluster", None) is not None else "disabled",
        cached_tenants=len(cache) if cache is not None else 0,
        watched_tenants=len(aggregator.subscriptions) if aggregator is not None else 0,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Cluster client unavailable", "model": ReadinessErrorResponse}},
)
def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 if ready; 503 if cluster access is configured but not connected."""
    if get_settings().cluster_mode == "disabled":
        return ReadinessResponse()
    if getattr(request.app.state, "cluster", None) is not None:
        return ReadinessResponse()
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(
            message="cluster client unavailable",
        ).model_dump(),
    )
