"""Webhook delivery configuration settings.

Controls the outbound HTTP timeout, attempt budget and fixed backoff schedule
for signed webhook deliveries.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WebhookSettings(BaseSettings):
    """Configuration for the webhook delivery engine.

    The signature header name is part of the wire contract with third-party
    consumers; changing it requires a versioned rollout.
    """

    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=300,
        description="Timeout for each webhook HTTP attempt (seconds)",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Total HTTP attempts per delivery before it is marked failed",
    )
    retry_delays_seconds: list[float] = Field(
        default_factory=lambda: [1.0, 5.0, 15.0],
        min_length=1,
        description="Wait before attempt 2, 3, 4, ... (last value repeats)",
    )
    signature_header: str = Field(
        default="X-Nexus-Signature",
        description="Header carrying the hex HMAC-SHA256 of the request body",
    )
    user_agent: str = Field(default="notification-service-webhooks/1.0")
    block_private_targets: bool = Field(
        default=True,
        description="Reject webhook URLs whose host is a private, loopback or link-local IP",
    )
    shutdown_grace_seconds: float = Field(
        default=30.0,
        ge=0,
        description="How long shutdown waits for in-flight delivery sequences",
    )

    @field_validator("retry_delays_seconds")
    @classmethod
    def _non_negative_delays(cls, v: list[float]) -> list[float]:
        if any(delay < 0 for delay in v):
            raise ValueError("retry delays must be non-negative")
        return v

    model_config = SettingsConfigDict(
        env_prefix="WEBHOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )


__all__ = ["WebhookSettings"]
