"""Repositories for the webhooks feature."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select, update

from notification_service.core.database.repository import BaseRepository
from notification_service.features.webhooks.models import Webhook, WebhookDelivery

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


class WebhookRepository(BaseRepository[Webhook]):
    """Repository for Webhook.

    Lookups by id always carry the owner in the same WHERE clause, so a
    webhook owned by someone else reads exactly like a missing one.
    """

    def __init__(self) -> None:
        super().__init__(Webhook)

    async def list_for_user(self, session: AsyncSession, user_id: str) -> Sequence[Webhook]:
        stmt = (
            select(Webhook)
            .where(Webhook.user_id == user_id)
            .order_by(Webhook.created_at.desc())
        )
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(lambda: f"db.list_for_user: Webhook({user_id}) -> {len(items)} items")
        return items

    async def get_owned(
        self,
        session: AsyncSession,
        webhook_id: UUID,
        user_id: str,
    ) -> Webhook | None:
        stmt = select(Webhook).where(Webhook.id == webhook_id, Webhook.user_id == user_id)
        result = await session.execute(stmt)
        webhook = result.scalar_one_or_none()

        self._lazy.debug(
            lambda: f"db.get_owned: Webhook({webhook_id}) -> {'found' if webhook else 'not found'}"
        )
        return webhook

    async def delete_owned(self, session: AsyncSession, webhook_id: UUID, user_id: str) -> bool:
        """Delete an owned webhook together with its delivery history."""
        webhook = await self.get_owned(session, webhook_id, user_id)
        if webhook is None:
            return False

        # SQLite does not enforce ON DELETE CASCADE without PRAGMA foreign_keys.
        await session.execute(
            delete(WebhookDelivery).where(WebhookDelivery.webhook_id == webhook_id)
        )
        await self.delete(session, webhook)
        return True

    async def find_active_for_user(self, session: AsyncSession, user_id: str) -> Sequence[Webhook]:
        """Active webhooks of ``user_id``; event filtering is done by the caller."""
        stmt = (
            select(Webhook)
            .where(Webhook.user_id == user_id, Webhook.active.is_(True))
            .order_by(Webhook.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


class WebhookDeliveryRepository(BaseRepository[WebhookDelivery]):
    """Repository for the delivery ledger."""

    def __init__(self) -> None:
        super().__init__(WebhookDelivery)

    async def list_for_owned_webhook(
        self,
        session: AsyncSession,
        webhook_id: UUID,
        user_id: str,
    ) -> Sequence[WebhookDelivery]:
        """Delivery history, newest first; empty when the webhook is not ``user_id``'s."""
        stmt = (
            select(WebhookDelivery)
            .join(Webhook, Webhook.id == WebhookDelivery.webhook_id)
            .where(WebhookDelivery.webhook_id == webhook_id, Webhook.user_id == user_id)
            .order_by(WebhookDelivery.created_at.desc())
        )
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.list_for_owned_webhook({webhook_id}) -> {len(items)} items"
        )
        return items

    async def record_attempt(
        self,
        session: AsyncSession,
        delivery_id: UUID,
        **values: Any,
    ) -> None:
        """Update one ledger row by id."""
        await session.execute(
            update(WebhookDelivery)
            .where(WebhookDelivery.id == delivery_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self._lazy.debug(lambda: f"db.record_attempt({delivery_id}) -> {values}")


_webhook_repository: WebhookRepository | None = None
_webhook_delivery_repository: WebhookDeliveryRepository | None = None


def get_webhook_repository() -> WebhookRepository:
    """Get the shared WebhookRepository instance."""
    global _webhook_repository
    if _webhook_repository is None:
        _webhook_repository = WebhookRepository()
    return _webhook_repository


def get_webhook_delivery_repository() -> WebhookDeliveryRepository:
    """Get the shared WebhookDeliveryRepository instance."""
    global _webhook_delivery_repository
    if _webhook_delivery_repository is None:
        _webhook_delivery_repository = WebhookDeliveryRepository()
    return _webhook_delivery_repository
