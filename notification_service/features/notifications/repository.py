"""Repository for notification records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select, update

from notification_service.core.database.repository import BaseRepository, SearchResult
from notification_service.features.notifications.models import NotificationRecord

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


class NotificationRepository(BaseRepository[NotificationRecord]):
    """Repository for NotificationRecord.

    Every query is scoped by ``user_id`` in the same WHERE clause as the id,
    so another user's record is indistinguishable from a missing one.
    """

    def __init__(self) -> None:
        super().__init__(NotificationRecord)

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        limit: int,
        offset: int,
    ) -> SearchResult[NotificationRecord]:
        stmt = (
            select(NotificationRecord)
            .where(NotificationRecord.user_id == user_id)
            .order_by(NotificationRecord.created_at.desc(), NotificationRecord.id)
        )
        return await self.search(session, stmt, limit=limit, offset=offset)

    async def get_owned(
        self,
        session: AsyncSession,
        notification_id: UUID,
        user_id: str,
    ) -> NotificationRecord | None:
        stmt = select(NotificationRecord).where(
            NotificationRecord.id == notification_id,
            NotificationRecord.user_id == user_id,
        )
        result = await session.execute(stmt)
        record = result.scalar_one_or_none()

        self._lazy.debug(
            lambda: f"db.get_owned: NotificationRecord({notification_id}) -> {'found' if record else 'not found'}"
        )
        return record

    async def mark_all_read(self, session: AsyncSession, user_id: str) -> int:
        """Flip every unread record of ``user_id``; returns the number changed."""
        stmt = (
            update(NotificationRecord)
            .where(
                NotificationRecord.user_id == user_id,
                NotificationRecord.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        updated = result.rowcount or 0

        self._lazy.debug(lambda: f"db.mark_all_read({user_id}) -> {updated} updated")
        return updated

    async def count_unread(self, session: AsyncSession, user_id: str) -> int:
        stmt = select(func.count()).where(
            NotificationRecord.user_id == user_id,
            NotificationRecord.is_read.is_(False),
        )
        return (await session.execute(stmt)).scalar_one()


_notification_repository: NotificationRepository | None = None


def get_notification_repository() -> NotificationRepository:
    """Get the shared NotificationRepository instance."""
    global _notification_repository
    if _notification_repository is None:
        _notification_repository = NotificationRepository()
    return _notification_repository
