"""Tenant resolution middleware.

For API paths, reads the tenant (stack) ID of the authenticated user,
resolves its TenantContext through the tenant cache, and exposes it to the
route via a context variable and request.state.tenant. Tenant extraction
failures are not errors: the request continues without tenant context.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from tenantbridge.core.config import get_settings
from tenantbridge.core.tenant_context import reset_tenant, set_tenant
from tenantbridge.domain.exceptions import TenantExtractionException
from tenantbridge.domain.value_objects import TenantId

logger = logging.getLogger(__name__)


def tenant_id_from_user(user: Any) -> TenantId:
    """Return the non-negative integer tenant ID carried by user.

    Raises:
        TenantExtractionException: Anonymous user, missing or malformed claim.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        raise TenantExtractionException("request is not authenticated")
    raw = getattr(user, "tenant_id", None)
    if raw is None:
        raise TenantExtractionException("user has no tenant_id")
    if isinstance(raw, bool):
        raise TenantExtractionException(f"tenant_id {raw!r} is not an integer")
    if isinstance(raw, str) and raw.strip().isdigit():
        raw = int(raw.strip())
    if not isinstance(raw, int):
        raise TenantExtractionException(f"tenant_id {raw!r} is not an integer")
    if raw < 0:
        raise TenantExtractionException(f"tenant_id {raw} is negative")
    return raw


def TenantContextMiddleware(app: Callable) -> Callable:
    """Resolve tenant context from the authenticated user before route runs."""

    class _Middleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next: Callable) -> Response:
            cache = getattr(request.app.state, "tenant_cache", None)
            if cache is None or not request.url.path.startswith(
                get_settings().api_path_prefix
            ):
                return await call_next(request)
            user = request.scope.get("user")
            try:
                tenant_id = tenant_id_from_user(user)
            except TenantExtractionException as e:
                logger.debug("No tenant for %s: %s", request.url.path, e.message)
                return await call_next(request)

            context = await cache.get_or_build(tenant_id)
            request.state.tenant = context
            token = set_tenant(context)
            try:
                return await call_next(request)
            finally:
                reset_tenant(token)

    return _Middleware(app)
