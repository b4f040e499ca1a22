"""Tenant context for the current request.

The tenant middleware sets the resolved TenantContext in this context
variable so that endpoints and services can reach the tenant's session
store without threading it through every call.
"""

from contextvars import ContextVar, Token

from tenantbridge.domain.entities import TenantContext

# Current tenant context for the request (set by middleware).
current_tenant: ContextVar[TenantContext | None] = ContextVar(
    "current_tenant", default=None
)


def set_tenant(context: TenantContext | None) -> Token[TenantContext | None]:
    """Set the current tenant context; returns a token for reset_tenant()."""
    return current_tenant.set(context)


def get_tenant() -> TenantContext | None:
    """Return the current tenant context if set."""
    return current_tenant.get()


def reset_tenant(token: Token[TenantContext | None]) -> None:
    current_tenant.reset(token)
