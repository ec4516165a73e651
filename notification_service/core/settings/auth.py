"""Authentication settings.

End users are identified by headers set by the upstream gateway. Other services
calling the send endpoint present a shared service token.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """Service-to-service and gateway identity settings.

    Environment variables use AUTH_ prefix. The service token is also read from
    NEXUS_SERVICE_TOKEN, which the rest of the platform already sets.
    """

    service_token: SecretStr = Field(
        default=SecretStr("nexus-internal-service-token"),
        validation_alias=AliasChoices("AUTH_SERVICE_TOKEN", "NEXUS_SERVICE_TOKEN"),
        description="Shared token required on service-only endpoints",
    )
    user_id_header: str = Field(
        default="X-User-Id", description="Header carrying the authenticated user id",
    )
    user_email_header: str = Field(default="X-User-Email")
    user_role_header: str = Field(default="X-User-Role")

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
