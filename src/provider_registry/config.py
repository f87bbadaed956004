"""Configuration management for the provider registry."""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TransportMode(str, Enum):
    """MCP transport mode."""

    STDIO = "stdio"
    SSE = "sse"
    STREAMABLE_HTTP = "streamable-http"


class LogLevel(str, Enum):
    """Logging level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class RegistryConfig(BaseSettings):
    """Configuration for the provider registry.

    Configuration is loaded from environment variables with PROVIDER_REGISTRY_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROVIDER_REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Transport settings
    transport: TransportMode = Field(
        default=TransportMode.STDIO,
        description="MCP transport mode: stdio, sse, or streamable-http",
    )
    host: str = Field(
        default="127.0.0.1",
        description="Host to bind HTTP server to",
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port to bind HTTP server to",
    )

    # Storage
    database_url: str | None = Field(
        default=None,
        description=(
            "SQLAlchemy database URL, e.g. sqlite+aiosqlite:///catalog.db "
            "(None keeps the catalog in memory)"
        ),
    )

    # Provider adapter settings
    adapter_timeout: int = Field(
        default=30,
        ge=1,
        le=120,
        description="Timeout in seconds for calls to remote model providers",
    )
    client_referer: str = Field(
        default="https://dialoqbase.n4ze3m.com/",
        description="HTTP-Referer header sent to OpenAI-compatible endpoints",
    )
    client_title: str = Field(
        default="Dialoqbase",
        description="X-Title header sent to OpenAI-compatible endpoints",
    )
    replicate_api_url: str = Field(
        default="https://api.replicate.com/v1/models/",
        description="Replicate models endpoint",
    )

    # Catalog settings
    hide_default_models: bool = Field(
        default=False,
        description="Only list self-hosted providers, hiding built-in hosted models",
    )

    # Safety settings
    admin_access: bool = Field(
        default=True,
        description="Treat tool callers as registry administrators",
    )
    enable_dangerous_operations: bool = Field(
        default=False,
        description="Enable dangerous operations like delete",
    )
    read_only_mode: bool = Field(
        default=False,
        description="Disable all write operations",
    )

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )

    @field_validator("replicate_api_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Model names are appended directly to the Replicate URL."""
        return v if v.endswith("/") else f"{v}/"

    def is_operation_allowed(self, operation: str) -> tuple[bool, str | None]:
        """Check if an operation is allowed based on safety settings.

        Returns:
            Tuple of (allowed, reason_if_not_allowed)
        """
        if self.read_only_mode and operation in ("create", "update", "delete"):
            return False, "Read-only mode is enabled"

        if not self.enable_dangerous_operations and operation == "delete":
            return False, "Dangerous operations are disabled"

        return True, None


# Global configuration instance
_config: RegistryConfig | None = None


def get_config() -> RegistryConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = RegistryConfig()
    return _config


def configure(**kwargs: Any) -> RegistryConfig:
    """Configure the global settings.

    This should be called before get_config() if you want to override defaults.
    """
    global _config
    _config = RegistryConfig(**kwargs)
    return _config
