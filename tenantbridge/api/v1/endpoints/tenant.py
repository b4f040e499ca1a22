"""Current tenant endpoint (inspect the context resolved for the caller)."""

from fastapi import APIRouter

from tenantbridge.api.v1.dependencies import CurrentTenant
from tenantbridge.schemas.tenant import TenantResponse

router = APIRouter()


@router.get("", response_model=TenantResponse)
def get_current_tenant_info(tenant: CurrentTenant) -> TenantResponse:
    """Return the caller's tenant context: status, config version, masked database URL."""
    return TenantResponse.from_context(tenant)
