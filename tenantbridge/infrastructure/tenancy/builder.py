"""Builds TenantContext objects from tenant config objects.

Every stage failure (fetch, parse, session store) is logged and degrades
the context to session=None; build() never raises. The status field
records why the session is missing.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from tenantbridge.domain.entities import TenantConfigSource, TenantContext
from tenantbridge.domain.enums import TenantStatus
from tenantbridge.domain.exceptions import TenantConfigUnavailableException
from tenantbridge.domain.value_objects import TenantId
from tenantbridge.infrastructure.persistence.session_store import build_session_store
from tenantbridge.infrastructure.tenancy.tenant_settings import (
    SettingsDocumentError,
    TenantDatabaseSettings,
    parse_settings_document,
)

if TYPE_CHECKING:
    from tenantbridge.core.config import Settings
    from tenantbridge.infrastructure.tenancy.config_source import TenantConfigReader

logger = logging.getLogger(__name__)

SessionFactory = Callable[[TenantDatabaseSettings], Any]


class TenantContextBuilder:
    """Fetch config -> parse settings -> build session store -> TenantContext."""

    def __init__(
        self,
        reader: "TenantConfigReader | None",
        session_factory: SessionFactory = build_session_store,
        config_key: str = "ini",
        settings_section: str = "database",
    ) -> None:
        self._reader = reader
        self._session_factory = session_factory
        self._config_key = config_key
        self._settings_section = settings_section

    @classmethod
    def from_settings(
        cls,
        reader: "TenantConfigReader | None",
        settings: "Settings",
        session_factory: SessionFactory = build_session_store,
    ) -> TenantContextBuilder:
        return cls(
            reader,
            session_factory=session_factory,
            config_key=settings.tenant_config_key,
            settings_section=settings.tenant_settings_section,
        )

    async def build(self, tenant_id: TenantId) -> TenantContext:
        """Build a fresh context for tenant_id. Never raises."""
        try:
            source = await self._fetch(tenant_id)
        except TenantConfigUnavailableException as e:
            logger.warning("%s; continuing without session", e.message)
            return TenantContext(tenant_id, None, TenantStatus.DEGRADED)

        if source is None:
            logger.info("No config object for tenant %s; continuing without session", tenant_id)
            return TenantContext(tenant_id, None, TenantStatus.UNCONFIGURED)

        try:
            session = self._build_session(tenant_id, source)
        except TenantConfigUnavailableException as e:
            logger.warning("%s; continuing without session", e.message)
            return TenantContext(
                tenant_id, None, TenantStatus.DEGRADED, source.resource_version
            )

        logger.info("Built tenant context for %s (config version %s)", tenant_id, source.resource_version)
        return TenantContext(tenant_id, session, TenantStatus.READY, source.resource_version)

    async def _fetch(self, tenant_id: TenantId) -> TenantConfigSource | None:
        if self._reader is None:
            return None
        try:
            return await asyncio.to_thread(self._reader.fetch, tenant_id)
        except Exception as e:
            raise TenantConfigUnavailableException(tenant_id, f"fetch failed: {e}") from e

    def _build_session(self, tenant_id: TenantId, source: TenantConfigSource) -> Any:
        raw = source.data.get(self._config_key)
        if raw is None:
            raise TenantConfigUnavailableException(
                tenant_id, f"config object {source.name} has no {self._config_key!r} key"
            )
        try:
            document = parse_settings_document(raw)
            db_settings = TenantDatabaseSettings.from_document(document, self._settings_section)
        except SettingsDocumentError as e:
            raise TenantConfigUnavailableException(tenant_id, str(e)) from e
        try:
            return self._session_factory(db_settings)
        except Exception as e:
            raise TenantConfigUnavailableException(
                tenant_id, f"session store build failed: {e}"
            ) from e


async def release_context(context: TenantContext) -> None:
    """Dispose the context's session store, if it has one. Never raises."""
    session = context.session
    dispose = getattr(session, "dispose", None)
    if dispose is None:
        return
    try:
        await dispose()
    except Exception:
        logger.exception("Failed to dispose session store for tenant %s", context.tenant_id)
