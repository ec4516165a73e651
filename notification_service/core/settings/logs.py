"""Logging configuration settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Structured logging configuration.

    Environment variables use LOG_ prefix.
    Example: LOG_LEVEL=DEBUG, LOG_JSON_LOGS=false, LOG_FILE_PATH=logs/notifications.jsonl
    """

    service_name: str = Field(
        default="notification-service",
        description="Service name included as a static field in JSON records",
    )
    level: LogLevel = Field(default="INFO", description="Root logger level")
    json_logs: bool = Field(
        default=True,
        description="Emit JSON Lines instead of human-readable text",
    )

    console_enabled: bool = Field(default=True, description="Log to stderr")
    console_level: LogLevel | None = Field(
        default=None, description="Console handler level. If None, uses root level.",
    )

    file_path: Path | None = Field(
        default=None, description="Rotating log file. None disables file logging.",
    )
    file_level: LogLevel | None = Field(
        default=None, description="File handler level. If None, uses root level.",
    )
    file_max_bytes: int = Field(
        default=10_485_760,  # 10 MiB
        ge=1024,
        description="Maximum log file size in bytes before rotation",
    )
    file_backup_count: int = Field(default=5, ge=0, le=100)

    include_context: bool = Field(
        default=True,
        description="Inject contextvars log context (request_id, user_id) into records",
    )
    capture_warnings: bool = Field(
        default=True, description="Forward `warnings` module output to logging",
    )
    include_request_id: bool = Field(
        default=True, description="Add X-Request-ID middleware and bind it into log context",
    )

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Return kwargs suitable for configure_logging(...)."""
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "console_enabled": self.console_enabled,
            "console_level": self.console_level,
            "file_path": str(self.file_path) if self.file_path else None,
            "file_level": self.file_level,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
        }

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )
