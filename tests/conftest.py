"""Pytest configuration and fixtures for tenantbridge.

Environment is set before tenantbridge is imported: a test secret and
cluster access disabled, so no kubeconfig is needed. HTTP tests use
tenantbridge.main:app through httpx ASGITransport, which does not run the
lifespan; fixtures put the collaborators on app.state directly.
"""

import json
import os
import threading
from collections.abc import AsyncIterator, Iterator
from typing import Any

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("CLUSTER_MODE", "disabled")
os.environ.setdefault("WATCH_ENABLED", "false")

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tenantbridge.domain.entities import TenantConfigSource
from tenantbridge.domain.value_objects import TenantId
from tenantbridge.infrastructure.security import create_access_token
from tenantbridge.infrastructure.tenancy import TenantCache, TenantContextBuilder
from tenantbridge.main import app as fastapi_app


def settings_document(**database: Any) -> str:
    """Serialized settings document with the given [database] keys."""
    return json.dumps({"database": {k: str(v) for k, v in database.items()}})


def config_source(
    tenant_id: TenantId,
    raw: str | None,
    resource_version: str = "1",
) -> TenantConfigSource:
    data = {} if raw is None else {"ini": raw}
    return TenantConfigSource(
        name=f"{tenant_id}-mt-config",
        namespace="hosted-grafana",
        data=data,
        resource_version=resource_version,
    )


class FakeConfigReader:
    """In-memory TenantConfigReader; counts fetches, optionally fails or blocks."""

    def __init__(self, sources: dict[TenantId, TenantConfigSource] | None = None) -> None:
        self.sources = dict(sources or {})
        self.calls: list[TenantId] = []
        self.error: Exception | None = None
        self.gate: threading.Event | None = None

    def fetch(self, tenant_id: TenantId) -> TenantConfigSource | None:
        self.calls.append(tenant_id)
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.sources.get(tenant_id)


class FakeSessionStore:
    """Stand-in session store recording the settings it was built from."""

    def __init__(self, db: Any) -> None:
        self.db = db
        self.url = f"{db.type}://{db.host}/{db.name}"
        self.disposed = False

    async def dispose(self) -> None:
        self.disposed = True


@pytest.fixture
def reader() -> FakeConfigReader:
    return FakeConfigReader()


@pytest.fixture
def builder(reader: FakeConfigReader) -> TenantContextBuilder:
    return TenantContextBuilder(reader, session_factory=FakeSessionStore)


@pytest.fixture
def app(builder: TenantContextBuilder) -> Iterator[FastAPI]:
    """The FastAPI app with a fresh tenant cache and no cluster."""
    state = fastapi_app.state
    state.cluster = None
    state.schema_registry = None
    state.resource_resolver = None
    state.watch_aggregator = None
    state.tenant_cache = TenantCache(builder)
    yield fastapi_app
    state.tenant_cache = None


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def auth_headers(tenant_id: Any = None, user_id: str = "user-1") -> dict[str, str]:
    """Authorization header for a token carrying the given tenant_id claim."""
    claims: dict[str, Any] = {"sub": user_id}
    if tenant_id is not None:
        claims["tenant_id"] = tenant_id
    return {"Authorization": f"Bearer {create_access_token(claims)}"}
