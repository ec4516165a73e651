"""Pydantic schemas for the webhooks feature."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from notification_service.core.enums import DeliveryStatus, NotificationType


class WebhookCreate(BaseModel):
    """Payload used when registering a webhook."""

    url: HttpUrl = Field(..., description="Target URL for webhook delivery")
    secret: str = Field(
        ..., min_length=1, max_length=255, description="Shared secret for HMAC signatures",
    )
    events: list[NotificationType] = Field(
        ..., min_length=1, description="Notification types to subscribe to",
    )
    active: bool = Field(default=True)


class WebhookUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    model_config = ConfigDict(extra="forbid")

    url: HttpUrl | None = Field(None, description="Target URL for webhook delivery")
    secret: str | None = Field(None, min_length=1, max_length=255)
    events: list[NotificationType] | None = Field(None, min_length=1)
    active: bool | None = None


class WebhookRead(BaseModel):
    """Webhook as returned from the API. The secret is never included."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    url: str
    events: list[NotificationType]
    active: bool
    created_at: datetime
    updated_at: datetime


class WebhookDeliveryRead(BaseModel):
    """One delivery ledger row."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    webhook_id: UUID
    event_type: NotificationType
    payload: dict[str, Any]
    status: DeliveryStatus
    response_code: int | None
    attempts: int
    last_attempt_at: datetime | None
    created_at: datetime

    @field_validator("payload", mode="before")
    @classmethod
    def _decode_payload(cls, v: Any) -> Any:
        # Stored as the exact JSON text that was signed and sent.
        if isinstance(v, str | bytes):
            return json.loads(v)
        return v


class WebhookDeleted(BaseModel):
    deleted: bool = True
