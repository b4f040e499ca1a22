"""Security: bearer token verification for the upstream authentication layer."""

from tenantbridge.infrastructure.security.jwt import create_access_token, verify_token

__all__ = [
    "create_access_token",
    "verify_token",
]
