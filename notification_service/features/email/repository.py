"""Repository for sent email records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from notification_service.core.database.repository import BaseRepository
from notification_service.features.email.models import SentEmail

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class SentEmailRepository(BaseRepository[SentEmail]):
    def __init__(self) -> None:
        super().__init__(SentEmail)

    async def list_recent(
        self,
        session: AsyncSession,
        *,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[SentEmail]:
        """Sent emails, newest first."""
        stmt = (
            select(SentEmail)
            .order_by(SentEmail.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.list_recent: SentEmail(limit={limit}, offset={offset}) -> {len(items)} items"
        )
        return items


_sent_email_repository: SentEmailRepository | None = None


def get_sent_email_repository() -> SentEmailRepository:
    global _sent_email_repository
    if _sent_email_repository is None:
        _sent_email_repository = SentEmailRepository()
    return _sent_email_repository
