"""Persistence: per-tenant SQLAlchemy session stores."""

from tenantbridge.infrastructure.persistence.session_store import (
    SessionStore,
    build_session_store,
)

__all__ = ["SessionStore", "build_session_store"]
