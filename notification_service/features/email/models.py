"""Database model for the stub email channel."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notification_service.core.database import Base, CreatedAtMixin, UUIDPKMixin


class SentEmail(Base, UUIDPKMixin, CreatedAtMixin):
    """An email the sink recorded as sent. Append-only."""

    __tablename__ = "sent_emails"

    to_email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)
    body: Mapped[str] = mapped_column(Text(), nullable=False)
