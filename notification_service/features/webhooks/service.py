"""Webhook registry: owner-scoped CRUD over webhook configurations."""

from __future__ import annotations

import ipaddress
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from notification_service.core.exceptions import ValidationException
from notification_service.core.services.base import BaseService
from notification_service.core.settings import WebhookSettings, get_webhook_settings
from notification_service.features.webhooks.models import Webhook
from notification_service.features.webhooks.repository import (
    WebhookDeliveryRepository,
    WebhookRepository,
    get_webhook_delivery_repository,
    get_webhook_repository,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from notification_service.features.webhooks.models import WebhookDelivery
    from notification_service.features.webhooks.schemas import WebhookCreate, WebhookUpdate


class WebhookRegistry(BaseService):
    """CRUD for a user's webhooks.

    Every method takes the caller's user id. A webhook owned by someone else
    is reported exactly like one that does not exist (None, False or an
    empty list), never as forbidden. Methods flush but do not commit.
    """

    def __init__(
        self,
        session: AsyncSession,
        webhook_repository: WebhookRepository | None = None,
        delivery_repository: WebhookDeliveryRepository | None = None,
        settings: WebhookSettings | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._webhook_repo = webhook_repository or get_webhook_repository()
        self._delivery_repo = delivery_repository or get_webhook_delivery_repository()
        self._settings = settings or get_webhook_settings()

    def validate_url(self, url: str) -> None:
        """Reject URLs that point at private, loopback or link-local IPs.

        Host names are not resolved; only literal IP hosts are checked.

        Raises:
            ValidationException: If the host is a blocked address.
        """
        if not self._settings.block_private_targets:
            return

        hostname = urlparse(url).hostname
        if not hostname:
            raise ValidationException(detail="Invalid URL: missing hostname", extra={"field": "url"})

        try:
            ip = ipaddress.ip_address(hostname)
        except ValueError:
            return

        if ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved:
            raise ValidationException(
                detail=f"Webhook URL cannot point to internal address: {hostname}",
                extra={"field": "url"},
            )

    async def create(self, user_id: str, payload: WebhookCreate) -> Webhook:
        url = str(payload.url)
        self.validate_url(url)

        webhook = Webhook(
            user_id=user_id,
            url=url,
            secret=payload.secret,
            events=list(dict.fromkeys(event.value for event in payload.events)),
            active=payload.active,
        )
        created = await self._webhook_repo.create(self._session, webhook)

        self.logger.info(
            "Webhook created",
            extra={
                "webhook_id": str(created.id),
                "user_id": user_id,
                "events": created.events,
                "operation": "service.create_webhook",
            },
        )
        return created

    async def list(self, user_id: str) -> Sequence[Webhook]:
        """The user's webhooks, newest first."""
        return await self._webhook_repo.list_for_user(self._session, user_id)

    async def get(self, webhook_id: UUID, user_id: str) -> Webhook | None:
        webhook = await self._webhook_repo.get_owned(self._session, webhook_id, user_id)
        self._lazy.debug(
            lambda: f"service.get_webhook({webhook_id}) -> {'found' if webhook else 'not found'}"
        )
        return webhook

    async def update(
        self,
        webhook_id: UUID,
        user_id: str,
        payload: WebhookUpdate,
    ) -> Webhook | None:
        """Apply the supplied fields; omitted fields are preserved."""
        webhook = await self._webhook_repo.get_owned(self._session, webhook_id, user_id)
        if webhook is None:
            self._lazy.debug(lambda: f"service.update_webhook({webhook_id}) -> not found")
            return None

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "url" in changes:
            url = str(payload.url)
            self.validate_url(url)
            webhook.url = url
        if "secret" in changes:
            webhook.secret = changes["secret"]
        if "events" in changes:
            webhook.events = list(dict.fromkeys(event.value for event in payload.events or ()))
        if "active" in changes:
            webhook.active = changes["active"]

        await self._session.flush()
        await self._session.refresh(webhook)

        self.logger.info(
            "Webhook updated",
            extra={
                "webhook_id": str(webhook_id),
                # field names only, the secret value is never logged
                "fields": sorted(changes),
                "operation": "service.update_webhook",
            },
        )
        return webhook

    async def delete(self, webhook_id: UUID, user_id: str) -> bool:
        deleted = await self._webhook_repo.delete_owned(self._session, webhook_id, user_id)
        if deleted:
            self.logger.info(
                "Webhook deleted",
                extra={"webhook_id": str(webhook_id), "operation": "service.delete_webhook"},
            )
        return deleted

    async def get_deliveries(self, webhook_id: UUID, user_id: str) -> Sequence[WebhookDelivery]:
        """Delivery history, newest first. Empty for a webhook the user does not own."""
        return await self._delivery_repo.list_for_owned_webhook(
            self._session, webhook_id, user_id
        )
