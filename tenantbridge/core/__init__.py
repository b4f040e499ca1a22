"""Core: config, lifespan, exception handlers and request context.

Single place for settings and application bootstrap.
"""

from tenantbridge.core.config import get_settings

__all__ = ["get_settings"]
