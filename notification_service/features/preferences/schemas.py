"""Pydantic schemas for the preferences feature."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from notification_service.core.enums import NotificationChannel


class PreferencesRead(BaseModel):
    """Effective channels per notification type (stored value or default)."""

    task_assigned: list[NotificationChannel]
    task_status_changed: list[NotificationChannel]
    comment_added: list[NotificationChannel]
    project_invited: list[NotificationChannel]
    task_due_soon: list[NotificationChannel]


class PreferencesUpdate(BaseModel):
    """Partial preference update.

    Omitted fields keep their current value. A field sent as ``[]`` is
    stored as empty, and delivery for that type then falls back to the
    default channels.
    """

    model_config = ConfigDict(extra="forbid")

    task_assigned: list[NotificationChannel] | None = Field(default=None)
    task_status_changed: list[NotificationChannel] | None = Field(default=None)
    comment_added: list[NotificationChannel] | None = Field(default=None)
    project_invited: list[NotificationChannel] | None = Field(default=None)
    task_due_soon: list[NotificationChannel] | None = Field(default=None)
