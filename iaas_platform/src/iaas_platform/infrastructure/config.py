"""Configuration management for the IaaS platform."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Storage configuration."""

    backend: Literal["file", "memory"] = Field(
        default="file", description="Server repository backend"
    )
    data_dir: Path = Field(default=Path("./storage"), description="Server record directory")
    fsync: bool = Field(
        default=True, description="fsync records and directory on every save"
    )


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8080, ge=1, le=65535, description="Server port")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")
    metrics_enabled: bool = Field(default=True, description="Start the Prometheus exporter")


class SecurityConfig(BaseModel):
    """API security configuration."""

    api_key: SecretStr = Field(
        default=SecretStr("iaas-secret-key-123"), description="Shared API secret"
    )
    api_key_header: str = Field(default="x-api-key", description="Header carrying the API key")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="iaas_platform", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the IaaS platform."""

    model_config = SettingsConfigDict(
        env_prefix="IAAS_PLATFORM_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the record directory exists when the file backend is used."""
        if self.storage.backend == "file":
            self.storage.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    config = Config()
    config.ensure_directories()
    return config
