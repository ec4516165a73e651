"""SQLAlchemy models for the webhooks feature."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notification_service.core.database import (
    Base,
    CreatedAtMixin,
    StringArray,
    TimestampMixin,
    URLType,
    UUIDPKMixin,
)
from notification_service.core.enums import DeliveryStatus


class Webhook(Base, UUIDPKMixin, TimestampMixin):
    """A user-owned endpoint that receives signed notification events."""

    __tablename__ = "webhooks"

    user_id: Mapped[str] = mapped_column(
        String(255), nullable=False, index=True, comment="Owning user"
    )
    url: Mapped[str] = mapped_column(
        URLType(), nullable=False, comment="Target URL for webhook delivery"
    )
    secret: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="HMAC secret for signing payloads"
    )
    events: Mapped[list[str]] = mapped_column(
        StringArray(64),
        nullable=False,
        default=list,
        comment="Notification types this webhook subscribes to",
    )
    active: Mapped[bool] = mapped_column(
        Boolean(), nullable=False, default=True, comment="Inactive webhooks are skipped"
    )

    def __repr__(self) -> str:
        # no secret
        return f"Webhook(id={self.id}, user_id={self.user_id!r}, url={self.url!r})"


class WebhookDelivery(Base, UUIDPKMixin, CreatedAtMixin):
    """Ledger row for one (webhook, event) delivery sequence.

    Updated in place after every HTTP attempt. ``pending`` until the first
    2xx (``delivered``) or until attempts run out (``failed``).
    """

    __tablename__ = "webhook_deliveries"
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'delivered', 'failed')", name="status"),
    )

    webhook_id: Mapped[UUID] = mapped_column(
        ForeignKey("webhooks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_type: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[str] = mapped_column(
        Text(), nullable=False, comment="Exact request body that was signed and sent"
    )
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=DeliveryStatus.PENDING.value
    )
    response_code: Mapped[int | None] = mapped_column(
        Integer(), nullable=True, comment="Status code of the last HTTP response"
    )
    attempts: Mapped[int] = mapped_column(Integer(), nullable=False, default=0)
    last_attempt_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
