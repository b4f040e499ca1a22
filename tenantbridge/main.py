"""FastAPI application entry point.

Wiring only: logging, lifespan, exception handlers, middleware, routers.
See tenantbridge.core.lifespan and tenantbridge.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before importing or calling create_app().
"""

from fastapi import FastAPI

from tenantbridge.api.v1 import api_router
from tenantbridge.core.config import get_settings
from tenantbridge.core.exception_handlers import register_exception_handlers
from tenantbridge.core.lifespan import create_lifespan
from tenantbridge.middleware import AuthenticationMiddleware, TenantContextMiddleware
from tenantbridge.shared.telemetry import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    register_exception_handlers(app)

    # Middleware: last added = outermost. Authentication must populate
    # request.user before tenant resolution reads it.
    app.add_middleware(TenantContextMiddleware)
    app.add_middleware(AuthenticationMiddleware)

    app.include_router(api_router, prefix=f"{settings.api_path_prefix}/v1")

    return app


app = create_app()
