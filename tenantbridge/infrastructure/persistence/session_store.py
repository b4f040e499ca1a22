"""Per-tenant SQLAlchemy session stores.

build_session_store() is the session-store factory consumed by the tenant
builder: it turns a tenant's TenantDatabaseSettings into an async engine
and session factory. Engines connect lazily, so building a store does no
I/O; connection errors surface on first use.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tenantbridge.core.config import get_settings

if TYPE_CHECKING:
    from tenantbridge.core.config import Settings
    from tenantbridge.infrastructure.tenancy.tenant_settings import TenantDatabaseSettings

logger = logging.getLogger(__name__)


class SessionStore:
    """A tenant's async engine plus its session factory."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.sessionmaker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @property
    def url(self) -> str:
        """Engine URL with the password masked (safe to log)."""
        return self.engine.url.render_as_string(hide_password=True)

    def session(self) -> AsyncSession:
        """Open a new session; use as `async with store.session() as s:`."""
        return self.sessionmaker()

    async def dispose(self) -> None:
        """Close pooled connections. Checked-out connections close on return."""
        await self.engine.dispose()
        logger.debug("Disposed session store %s", self.url)

    def __repr__(self) -> str:
        return f"SessionStore({self.url})"


def build_session_store(
    db: "TenantDatabaseSettings",
    settings: "Settings | None" = None,
) -> SessionStore:
    """Create a SessionStore from a tenant's database settings.

    Pool sizes come from the tenant settings when present, else from the
    application defaults.

    Raises:
        sqlalchemy.exc.ArgumentError / NoSuchModuleError: Bad URL or missing driver.
    """
    s = settings or get_settings()
    kwargs: dict[str, Any] = {"echo": s.database_echo, "pool_pre_ping": True}
    connect_args: dict[str, Any] = {}
    if not db.is_sqlite:
        pool_size = db.max_idle_conn if db.max_idle_conn is not None else s.db_pool_size
        if db.max_open_conn is not None:
            max_overflow = max(db.max_open_conn - pool_size, 0)
        else:
            max_overflow = s.db_max_overflow
        kwargs.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=db.conn_max_lifetime or s.db_pool_recycle,
        )
        # asyncpg takes libpq-style sslmode names directly.
        if db.type.startswith("postgres") and db.ssl_mode and db.ssl_mode != "disable":
            connect_args["ssl"] = db.ssl_mode
    if connect_args:
        kwargs["connect_args"] = connect_args
    engine = create_async_engine(db.sqlalchemy_url(), **kwargs)
    return SessionStore(engine)
