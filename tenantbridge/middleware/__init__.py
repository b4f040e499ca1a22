"""HTTP middleware: bearer authentication and tenant resolution.

Applied in main app; order matters (last added = outermost), and
authentication must run before tenant resolution.
"""

from tenantbridge.middleware.authentication import (
    AuthenticatedUser,
    AuthenticationMiddleware,
    BearerTokenBackend,
)
from tenantbridge.middleware.tenant_context import (
    TenantContextMiddleware,
    tenant_id_from_user,
)

__all__ = [
    "AuthenticatedUser",
    "AuthenticationMiddleware",
    "BearerTokenBackend",
    "TenantContextMiddleware",
    "tenant_id_from_user",
]
