"""Stub email channel.

No mail transport is involved: the sink logs the message and records it in
``sent_emails`` so the email channel behaves like any other channel.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from notification_service.core.services.base import BaseService
from notification_service.features.email.models import SentEmail
from notification_service.features.email.repository import (
    SentEmailRepository,
    get_sent_email_repository,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class EmailSink(BaseService):
    """Records outbound email instead of sending it."""

    def __init__(
        self,
        session: AsyncSession,
        repository: SentEmailRepository | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._repo = repository or get_sent_email_repository()

    async def send(self, to: str, subject: str, body: str) -> SentEmail:
        """Log and persist one email. Does not commit."""
        sent = await self._repo.create(
            self._session,
            SentEmail(to_email=to, subject=subject, body=body),
        )

        self.logger.info(
            "Email sent",
            extra={
                "email_id": str(sent.id),
                "to": to,
                "subject": subject,
                "operation": "email.send",
            },
        )
        return sent

    async def list(self, *, limit: int = 100, offset: int = 0) -> Sequence[SentEmail]:
        """Recorded emails, newest first."""
        return await self._repo.list_recent(self._session, limit=limit, offset=offset)
