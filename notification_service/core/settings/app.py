"""Application settings for FastAPI configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """FastAPI application settings.

    Environment variables use APP_ prefix.
    Example: APP_DEBUG=true, APP_PORT=3003
    """

    # Service identity
    service_name: str = Field(
        default="notification-service",
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Service name for logging/tracing (lowercase, hyphens allowed)",
    )
    title: str = Field(
        default="Notification Service API",
        min_length=1,
        max_length=200,
        description="API title displayed in documentation",
    )
    description: str = Field(
        default="Notification fan-out, preferences and signed webhook delivery",
        description="API description (supports Markdown)",
    )
    version: str = Field(
        default="1.0.0",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$",
        description="API version (semver format)",
    )
    environment: Environment = Field(
        default="development", description="Environment: development|staging|production|test",
    )
    api_prefix: str = Field(
        default="/api/v1",
        max_length=255,
        pattern=r"^(/.*)?$",
        description="Base URL prefix for API routes (empty string mounts at root)",
    )

    # FastAPI toggles
    debug: bool = Field(default=False, description="Enable debug mode")
    docs_url: str | None = Field(default="/docs", description="Swagger UI path")
    openapi_url: str | None = Field(default="/openapi.json", description="OpenAPI schema path")
    disable_docs: bool = Field(default=False, description="Disable all API documentation")

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Bind address for uvicorn")
    port: int = Field(default=3003, ge=1, le=65535, description="Bind port for uvicorn")

    # CORS
    cors_origins: list[str] = Field(
        default_factory=list,
        description="Allowed CORS origins (JSON array); empty allows all",
    )

    @property
    def docs_disabled(self) -> bool:
        """Production never exposes interactive documentation."""
        return self.disable_docs or self.environment == "production"

    def get_docs_url(self) -> str | None:
        """Swagger UI URL, or None when docs are disabled."""
        return None if self.docs_disabled else self.docs_url

    def get_openapi_url(self) -> str | None:
        """OpenAPI schema URL, or None when docs are disabled."""
        return None if self.docs_disabled else self.openapi_url

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
