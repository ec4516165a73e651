"""Pydantic schemas for the notifications feature."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from notification_service.core.enums import NotificationChannel, NotificationType


class NotificationSendRequest(BaseModel):
    """An event from another service, to be fanned out to the user's channels."""

    user_id: str = Field(
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("user_id", "userId"),
        description="Recipient user id",
    )
    type: NotificationType
    title: str = Field(min_length=1, max_length=500)
    body: str = Field(min_length=1)
    metadata: dict[str, str] = Field(default_factory=dict)
    channels: list[NotificationChannel] | None = Field(
        default=None,
        min_length=1,
        description="Explicit channels; overrides the user's preferences when given",
    )
    recipient_email: str | None = Field(
        default=None,
        max_length=320,
        pattern=r"^[^@\s]+@[^@\s]+$",
        description="Address for the email channel; falls back to metadata['email']",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "user-42",
                "type": "task_assigned",
                "title": "New task assigned",
                "body": "You were assigned 'Write release notes'",
                "metadata": {"task_id": "t-17"},
            }
        }
    )

    @property
    def email_address(self) -> str | None:
        return self.recipient_email or self.metadata.get("email") or None


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    type: NotificationType
    channel: NotificationChannel
    title: str
    body: str
    metadata: dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("meta", "metadata"),
    )
    is_read: bool
    created_at: datetime


class NotificationPage(BaseModel):
    """One page of a user's notifications, newest first."""

    items: list[NotificationRead]
    total: int = Field(ge=0)
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    has_more: bool


class UpdatedCount(BaseModel):
    updated: int = Field(ge=0)


class UnreadCount(BaseModel):
    count: int = Field(ge=0)
