"""Dispatcher: the single entry point that fans an event out to channels.

``send`` resolves the channels, writes one NotificationRecord per channel
and commits, then runs each channel's side effect:

- in_app: none, the record is the notification
- email: the stub EmailSink records a SentEmail
- webhook: the delivery engine is started in the background

Side effects are isolated from one another. A failing channel is logged
and counted; the others still run and ``send`` still returns.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from notification_service.core.enums import NotificationChannel
from notification_service.core.services.base import BaseService
from notification_service.features.email.sink import EmailSink
from notification_service.features.notifications.metrics import (
    notification_channel_failures_total,
    notifications_created_total,
)
from notification_service.features.notifications.models import NotificationRecord
from notification_service.features.notifications.service import NotificationStore
from notification_service.features.preferences.service import PreferenceResolver, unique_channels

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from notification_service.features.notifications.schemas import NotificationSendRequest
    from notification_service.features.webhooks.delivery import WebhookDeliveryEngine

logger = logging.getLogger(__name__)


def build_webhook_payload(record: NotificationRecord) -> dict[str, Any]:
    """Event body sent to webhook endpoints for one webhook-channel record."""
    return {
        "event": record.type,
        "notification_id": str(record.id),
        "user_id": record.user_id,
        "title": record.title,
        "body": record.body,
        "metadata": dict(record.meta or {}),
        "created_at": record.created_at.isoformat() if record.created_at else None,
    }


class NotificationDispatcher(BaseService):
    def __init__(
        self,
        session: AsyncSession,
        delivery_engine: WebhookDeliveryEngine,
        *,
        resolver: PreferenceResolver | None = None,
        store: NotificationStore | None = None,
        email_sink: EmailSink | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._engine = delivery_engine
        self._resolver = resolver or PreferenceResolver(session)
        self._store = store or NotificationStore(session)
        self._email = email_sink or EmailSink(session)

    async def send(self, request: NotificationSendRequest) -> list[NotificationRecord]:
        """Fan one event out to its channels.

        Returns:
            The in_app and email records. Webhook-channel records are stored
            but not returned, since their outcome lives in the delivery ledger.
        """
        channels = unique_channels(
            await self._resolver.resolve_channels(
                request.user_id, request.type, request.channels
            )
        )

        records = [
            NotificationRecord(
                user_id=request.user_id,
                type=request.type.value,
                channel=channel.value,
                title=request.title,
                body=request.body,
                meta=dict(request.metadata),
                is_read=False,
            )
            for channel in channels
        ]
        await self._store.add(records)
        await self._session.commit()
        # Detached so a channel rollback below cannot expire what we return.
        for record in records:
            self._session.expunge(record)

        for record in records:
            notifications_created_total.labels(
                notification_type=record.type, channel=record.channel
            ).inc()

        self.logger.info(
            "Notification dispatched",
            extra={
                "user_id": request.user_id,
                "notification_type": request.type.value,
                "channels": [channel.value for channel in channels],
                "operation": "dispatcher.send",
            },
        )

        for record in records:
            await self._run_channel(record, request)

        return [record for record in records if record.channel != NotificationChannel.WEBHOOK]

    async def _run_channel(self, record: NotificationRecord, request: NotificationSendRequest) -> None:
        channel = NotificationChannel(record.channel)
        try:
            if channel is NotificationChannel.EMAIL:
                await self._send_email(record, request)
            elif channel is NotificationChannel.WEBHOOK:
                self._engine.deliver_in_background(
                    request.type, build_webhook_payload(record), request.user_id
                )
        except Exception:
            notification_channel_failures_total.labels(channel=channel.value).inc()
            logger.exception(
                "Notification channel failed",
                extra={
                    "notification_id": str(record.id),
                    "channel": channel.value,
                    "operation": "dispatcher.send",
                },
            )
            await self._session.rollback()

    async def _send_email(self, record: NotificationRecord, request: NotificationSendRequest) -> None:
        address = request.email_address
        if address is None:
            self.logger.warning(
                "No email address for email notification, skipping send",
                extra={
                    "notification_id": str(record.id),
                    "user_id": record.user_id,
                    "operation": "dispatcher.send_email",
                },
            )
            return

        await self._email.send(to=address, subject=record.title, body=record.body)
        await self._session.commit()
