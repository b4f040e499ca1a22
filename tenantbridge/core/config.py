"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (SECRET_KEY) and the cluster mode are
validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CLUSTER_MODES = ("kubeconfig", "incluster", "disabled")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "tenantbridge"
    app_version: str = "1.0.0"
    debug: bool = False

    # Security (tokens are issued upstream; we only verify them)
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"

    # Tenant resolution runs only for requests under this prefix.
    api_path_prefix: str = "/api"

    # Cluster access: "kubeconfig", "incluster" or "disabled"
    cluster_mode: str = "kubeconfig"
    kubeconfig_path: str | None = None
    kube_context: str | None = None

    # Tenant configuration objects ("{tenant_id}-mt-config" in this namespace)
    tenant_config_namespace: str = "hosted-grafana"
    tenant_config_suffix: str = "-mt-config"
    tenant_config_key: str = "ini"
    tenant_settings_section: str = "database"

    # Tenant cache (LRU; the watch invalidates on change so there is no TTL)
    tenant_cache_max_entries: int = 1024

    # Config watch fan-in
    watch_enabled: bool = True
    cluster_watch_timeout_seconds: int = 30
    watch_shutdown_grace_seconds: float = 5.0

    # CRD manifests registered at startup (comma-separated files)
    crd_manifest_paths: str = ""

    # Tenant session stores: pool defaults when the tenant config omits them
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_recycle: int = 3600
    database_echo: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate SECRET_KEY and cluster mode."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required to verify bearer tokens. "
                "Generate with: openssl rand -hex 32."
            )
        if self.cluster_mode not in CLUSTER_MODES:
            raise ValueError(
                f"cluster_mode must be one of {CLUSTER_MODES}, got: {self.cluster_mode!r}"
            )
        if self.tenant_cache_max_entries < 1:
            raise ValueError("tenant_cache_max_entries must be at least 1")
        return self

    @property
    def manifest_paths(self) -> list[str]:
        """CRD manifest paths as a list (empty entries dropped)."""
        return [p.strip() for p in self.crd_manifest_paths.split(",") if p.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
