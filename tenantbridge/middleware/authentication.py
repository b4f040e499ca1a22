"""Bearer token authentication (upstream of tenant resolution).

Starlette AuthenticationMiddleware with a backend that decodes the
Authorization bearer JWT into an AuthenticatedUser. Requests without a
bearer token stay anonymous; the tenant middleware treats them as having
no tenant. An invalid token is rejected with 401.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from starlette.authentication import (
    AuthCredentials,
    AuthenticationBackend,
    AuthenticationError,
    BaseUser,
)
from starlette.middleware.authentication import AuthenticationMiddleware as _StarletteAuth
from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse, Response

from tenantbridge.infrastructure.security.jwt import verify_token

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseUser):
    """Identity from a verified access token.

    tenant_id is the raw claim value; the tenant middleware validates it.
    """

    def __init__(self, user_id: str, tenant_id: Any = None) -> None:
        self.user_id = user_id
        self.tenant_id = tenant_id

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self.user_id

    @property
    def identity(self) -> str:
        return self.user_id


class BearerTokenBackend(AuthenticationBackend):
    async def authenticate(
        self, conn: HTTPConnection
    ) -> tuple[AuthCredentials, BaseUser] | None:
        auth = conn.headers.get("Authorization")
        if not auth or not auth.startswith("Bearer "):
            return None
        try:
            payload = verify_token(auth[7:].strip())
        except ValueError as e:
            logger.debug("Rejected bearer token: %s", e)
            raise AuthenticationError("Invalid or expired token") from e
        user = AuthenticatedUser(str(payload["sub"]), payload.get("tenant_id"))
        return AuthCredentials(["authenticated"]), user


def _on_auth_error(conn: HTTPConnection, exc: AuthenticationError) -> Response:
    return JSONResponse(
        status_code=401,
        content={"error": "AUTHENTICATION_ERROR", "message": str(exc)},
    )


def AuthenticationMiddleware(app: Callable) -> Callable:
    """Populate request.user from the bearer token before routes run."""
    return _StarletteAuth(app, backend=BearerTokenBackend(), on_error=_on_auth_error)
