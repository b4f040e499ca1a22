"""Tenant API schemas."""

from pydantic import BaseModel, Field

from tenantbridge.domain.entities import TenantContext
from tenantbridge.domain.enums import TenantStatus


class TenantResponse(BaseModel):
    """The tenant context resolved for the current request."""

    tenant_id: int
    status: TenantStatus
    has_session: bool
    config_version: str | None = Field(
        default=None, description="Resource version of the config the context was built from"
    )
    database: str | None = Field(
        default=None, description="Session store URL with the password masked"
    )

    @classmethod
    def from_context(cls, context: TenantContext) -> "TenantResponse":
        return cls(
            tenant_id=context.tenant_id,
            status=context.status,
            has_session=context.has_session,
            config_version=context.config_version,
            database=getattr(context.session, "url", None),
        )
