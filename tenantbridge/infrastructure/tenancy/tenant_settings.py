"""Tenant settings document parsing.

A tenant's ConfigMap carries an INI-style settings document serialized as
JSON under one data key: {"<section>": {"<key>": "<value>", ...}, ...}.
Values are strings. The database section is validated into
TenantDatabaseSettings, which the session store factory consumes.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError, field_validator
from sqlalchemy.engine import URL, make_url

# Settings database type -> SQLAlchemy async driver.
ASYNC_DRIVERS: dict[str, str] = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite3": "sqlite+aiosqlite",
    "sqlite": "sqlite+aiosqlite",
}

_DEFAULT_PORTS = {"postgres": 5432, "postgresql": 5432}


class SettingsDocumentError(ValueError):
    """The settings document or its database section is unusable."""


def parse_settings_document(raw: str) -> dict[str, dict[str, str]]:
    """Decode the JSON settings document into {section: {key: value}}.

    Raises:
        SettingsDocumentError: If raw is not JSON or not a map of maps.
    """
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SettingsDocumentError(f"settings document is not valid JSON: {e}") from e
    if not isinstance(document, dict) or not all(
        isinstance(v, dict) for v in document.values()
    ):
        raise SettingsDocumentError("settings document must map sections to key/value maps")
    return {
        str(section): {str(k): "" if v is None else str(v) for k, v in values.items()}
        for section, values in document.items()
    }


class TenantDatabaseSettings(BaseModel):
    """Database section of a tenant's settings document."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: str = "postgres"
    host: str = "127.0.0.1"
    port: int | None = None
    name: str = ""
    user: str = ""
    password: SecretStr = SecretStr("")
    url: SecretStr | None = None
    path: str = ""
    ssl_mode: str = ""
    max_open_conn: int | None = None
    max_idle_conn: int | None = None
    conn_max_lifetime: int | None = None

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ASYNC_DRIVERS:
            raise ValueError(f"unsupported database type {value!r}")
        return value

    @field_validator(
        "port", "max_open_conn", "max_idle_conn", "conn_max_lifetime", mode="before"
    )
    @classmethod
    def _empty_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_document(
        cls, document: dict[str, dict[str, str]], section: str = "database"
    ) -> TenantDatabaseSettings:
        """Validate the given section of a parsed settings document.

        Raises:
            SettingsDocumentError: Section missing or invalid.
        """
        values = document.get(section)
        if values is None:
            raise SettingsDocumentError(f"settings document has no [{section}] section")
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise SettingsDocumentError(f"invalid [{section}] section: {e}") from e

    @property
    def is_sqlite(self) -> bool:
        return ASYNC_DRIVERS[self.type].startswith("sqlite")

    def sqlalchemy_url(self) -> URL:
        """Build the async SQLAlchemy URL (explicit url wins over parts)."""
        driver = ASYNC_DRIVERS[self.type]
        if self.url is not None and self.url.get_secret_value():
            return make_url(self.url.get_secret_value()).set(drivername=driver)
        if self.is_sqlite:
            return URL.create(driver, database=self.path or self.name or None)
        # Port precedence: port key, then a host:port suffix, then the type default.
        host, _, host_port = self.host.partition(":")
        port = self.port
        if port is None:
            port = int(host_port) if host_port else _DEFAULT_PORTS.get(self.type)
        return URL.create(
            driver,
            username=self.user or None,
            password=self.password.get_secret_value() or None,
            host=host or None,
            port=port,
            database=self.name or None,
        )
