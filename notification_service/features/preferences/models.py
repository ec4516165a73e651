"""SQLAlchemy models for the preferences feature."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notification_service.core.database import Base, TimestampMixin


class NotificationPreferences(Base, TimestampMixin):
    """Per-user channel choices, one JSON-encoded channel list per notification type.

    Each type is its own column so a value that fails to parse only affects
    that type. NULL means "use the default for this type".
    """

    __tablename__ = "notification_preferences"

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    task_assigned: Mapped[str | None] = mapped_column(Text(), nullable=True)
    task_status_changed: Mapped[str | None] = mapped_column(Text(), nullable=True)
    comment_added: Mapped[str | None] = mapped_column(Text(), nullable=True)
    project_invited: Mapped[str | None] = mapped_column(Text(), nullable=True)
    task_due_soon: Mapped[str | None] = mapped_column(Text(), nullable=True)
