"""SQLAlchemy models for the notifications feature."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Boolean, CheckConstraint, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notification_service.core.database import Base, CreatedAtMixin, JSONDict, UUIDPKMixin


class NotificationRecord(Base, UUIDPKMixin, CreatedAtMixin):
    """One notification delivered to one user on one channel.

    An event sent to two channels produces two rows, each with its own
    read flag. Rows are only ever modified by the mark-read operations.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        CheckConstraint("channel IN ('in_app', 'email', 'webhook')", name="channel"),
        Index("ix_notifications_user_id_is_read", "user_id", "is_read"),
    )

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    channel: Mapped[str] = mapped_column(String(16), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    body: Mapped[str] = mapped_column(Text(), nullable=False)
    # "metadata" is reserved on declarative classes
    meta: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSONDict(), nullable=False, default=dict
    )
    is_read: Mapped[bool] = mapped_column(Boolean(), nullable=False, default=False)
