"""Notification store: per-user read state and pagination."""

from __future__ import annotations

from typing import TYPE_CHECKING

from notification_service.core.services.base import BaseService
from notification_service.core.settings import PaginationSettings, get_pagination_settings
from notification_service.features.notifications.repository import (
    NotificationRepository,
    get_notification_repository,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from notification_service.core.database.repository import SearchResult
    from notification_service.features.notifications.models import NotificationRecord


class NotificationStore(BaseService):
    """Reads and read-state changes for a user's notifications.

    Records are created by the dispatcher through ``add``. Methods flush but
    never commit; the caller owns the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        repository: NotificationRepository | None = None,
        pagination: PaginationSettings | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._repo = repository or get_notification_repository()
        self._pagination = pagination or get_pagination_settings()

    async def add(self, records: Sequence[NotificationRecord]) -> Sequence[NotificationRecord]:
        self._session.add_all(records)
        await self._session.flush()

        self._lazy.debug(lambda: f"service.add -> {len(records)} records")
        return records

    async def list(
        self,
        user_id: str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> tuple[SearchResult[NotificationRecord], int, int]:
        """One page of ``user_id``'s notifications, newest first.

        Page and size are clamped, never rejected.

        Returns:
            Tuple of (search result, effective page, effective page size)
        """
        page, size = self._pagination.clamp(page, page_size)
        result = await self._repo.list_for_user(
            self._session,
            user_id,
            limit=size,
            offset=(page - 1) * size,
        )

        self._lazy.debug(
            lambda: f"service.list({user_id}, page={page}, size={size}) -> {len(result.items)}/{result.total}"
        )
        return result, page, size

    async def mark_read(self, notification_id: UUID, user_id: str) -> NotificationRecord | None:
        """Mark one notification read; None if it is not ``user_id``'s."""
        record = await self._repo.get_owned(self._session, notification_id, user_id)
        if record is None:
            return None

        if not record.is_read:
            record.is_read = True
            await self._session.flush()

        self.logger.info(
            "Notification marked read",
            extra={
                "notification_id": str(notification_id),
                "user_id": user_id,
                "operation": "service.mark_read",
            },
        )
        return record

    async def mark_all_read(self, user_id: str) -> int:
        updated = await self._repo.mark_all_read(self._session, user_id)

        self.logger.info(
            "Notifications marked read",
            extra={"user_id": user_id, "updated": updated, "operation": "service.mark_all_read"},
        )
        return updated

    async def unread_count(self, user_id: str) -> int:
        count = await self._repo.count_unread(self._session, user_id)
        self._lazy.debug(lambda: f"service.unread_count({user_id}) -> {count}")
        return count
