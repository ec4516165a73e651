"""Webhook delivery engine.

For one event, every active webhook of the user that subscribes to the
event type gets its own delivery sequence:

1. the payload is serialized once to canonical JSON,
2. the body is signed with the webhook's secret (HMAC-SHA256, hex),
3. a ``pending`` ledger row is written,
4. the body is POSTed up to ``max_attempts`` times, waiting the configured
   backoff between attempts, and the ledger row is updated after each one,
5. the row ends ``delivered`` on the first 2xx or ``failed`` when attempts
   run out.

A ledger write that fails is logged and the sequence carries on; the
terminal write is retried once so the row does not stay ``pending``.

Sequences for different webhooks run concurrently and never share a
session. Each attempt writes through its own short-lived session, so a
slow endpoint holds no database connection while it backs off.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import httpx

from notification_service.core.enums import DeliveryStatus, NotificationType
from notification_service.core.settings import WebhookSettings, get_webhook_settings
from notification_service.features.notifications.metrics import (
    webhook_deliveries_completed_total,
    webhook_delivery_attempts_total,
)
from notification_service.features.webhooks.client import WebhookClient, sign_payload
from notification_service.features.webhooks.models import WebhookDelivery
from notification_service.features.webhooks.repository import (
    WebhookDeliveryRepository,
    WebhookRepository,
    get_webhook_delivery_repository,
    get_webhook_repository,
)
from notification_service.infra.database import AsyncSessionLocal
from notification_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]
ClientFactory = Callable[[], httpx.AsyncClient]


def serialize_payload(payload: Mapping[str, Any]) -> str:
    """Canonical JSON body: sorted keys, no insignificant whitespace."""
    return json.dumps(
        payload,
        separators=(",", ":"),
        sort_keys=True,
        ensure_ascii=False,
        default=str,
    )


@dataclass(slots=True, frozen=True)
class WebhookTarget:
    """Detached snapshot of a webhook taken when the event fired."""

    id: UUID
    url: str
    secret: str = field(repr=False)


@dataclass(slots=True, frozen=True)
class DeliveryOutcome:
    """Terminal state of one delivery sequence."""

    webhook_id: UUID
    delivery_id: UUID
    status: DeliveryStatus
    attempts: int
    response_code: int | None


class WebhookDeliveryEngine:
    """Signs, sends and retries webhook deliveries, keeping the ledger current.

    Sleep and HTTP client construction are injectable so tests can run the
    retry loop without real waits or network access.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        *,
        client_factory: ClientFactory | None = None,
        sleep: SleepFunc = asyncio.sleep,
        settings: WebhookSettings | None = None,
        webhook_repository: WebhookRepository | None = None,
        delivery_repository: WebhookDeliveryRepository | None = None,
    ) -> None:
        self._settings = settings or get_webhook_settings()
        self._session_factory = session_factory or AsyncSessionLocal
        self._client_factory = client_factory or self._default_client
        self._sleep = sleep
        self._webhooks = webhook_repository or get_webhook_repository()
        self._deliveries = delivery_repository or get_webhook_delivery_repository()
        self._tasks: set[asyncio.Task[list[DeliveryOutcome]]] = set()

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._settings.timeout_seconds)

    def backoff_before(self, attempt: int) -> float:
        """Seconds to wait before ``attempt`` (1-based); the last delay repeats."""
        if attempt <= 1:
            return 0.0
        delays = self._settings.retry_delays_seconds
        return delays[min(attempt - 2, len(delays) - 1)]

    @property
    def in_flight(self) -> int:
        """Background delivery sequences still running."""
        return len(self._tasks)

    async def deliver(
        self,
        event_type: NotificationType | str,
        payload: Mapping[str, Any],
        user_id: str,
    ) -> list[DeliveryOutcome]:
        """Deliver one event to every active webhook of ``user_id`` subscribed to it.

        Returns once every sequence has reached a terminal state. Inactive
        and unsubscribed webhooks are skipped without a ledger row.
        """
        event_type = NotificationType(event_type)

        async with self._session_factory() as session:
            webhooks = await self._webhooks.find_active_for_user(session, user_id)
            targets = [
                WebhookTarget(id=webhook.id, url=webhook.url, secret=webhook.secret)
                for webhook in webhooks
                if event_type.value in webhook.events
            ]

        if not targets:
            lazy_logger.debug(
                lambda: f"engine.deliver: no subscribed webhooks for {user_id}/{event_type}"
            )
            return []

        body = serialize_payload(payload)

        async with self._client_factory() as http:
            client = WebhookClient(
                http,
                timeout_seconds=self._settings.timeout_seconds,
                signature_header=self._settings.signature_header,
                user_agent=self._settings.user_agent,
            )
            results = await asyncio.gather(
                *(self._run_sequence(client, target, event_type, body) for target in targets),
                return_exceptions=True,
            )

        outcomes: list[DeliveryOutcome] = []
        for target, result in zip(targets, results, strict=True):
            if isinstance(result, Exception):
                logger.error(
                    "Webhook delivery sequence aborted",
                    exc_info=result,
                    extra={
                        "webhook_id": str(target.id),
                        "event_type": event_type.value,
                        "operation": "engine.deliver",
                    },
                )
                continue
            if isinstance(result, BaseException):
                raise result
            outcomes.append(result)
        return outcomes

    async def _run_sequence(
        self,
        client: WebhookClient,
        target: WebhookTarget,
        event_type: NotificationType,
        body: str,
    ) -> DeliveryOutcome:
        # Signed after serialization so the signature covers the exact bytes sent.
        signature = sign_payload(body, target.secret)

        async with self._session_factory() as session:
            delivery = await self._deliveries.create(
                session,
                WebhookDelivery(
                    webhook_id=target.id,
                    event_type=event_type.value,
                    payload=body,
                    status=DeliveryStatus.PENDING.value,
                    attempts=0,
                ),
            )
            await session.commit()
        delivery_id = delivery.id

        status = DeliveryStatus.PENDING
        attempt = 0
        response_code: int | None = None
        recorded = True

        while not status.is_terminal:
            attempt += 1
            if attempt > 1:
                await self._sleep(self.backoff_before(attempt))

            result = await client.deliver(
                target.url,
                body,
                signature=signature,
                event_type=event_type.value,
                delivery_id=str(delivery_id),
            )

            if result.success:
                status = DeliveryStatus.DELIVERED
                outcome_label = "success"
            else:
                if attempt >= self._settings.max_attempts:
                    status = DeliveryStatus.FAILED
                outcome_label = "transport_error" if result.transport_error else "http_error"
            webhook_delivery_attempts_total.labels(outcome=outcome_label).inc()

            values: dict[str, Any] = {
                "attempts": attempt,
                "last_attempt_at": datetime.now(UTC),
                "status": status.value,
            }
            if result.status_code is not None:
                response_code = result.status_code
            if response_code is not None:
                values["response_code"] = response_code

            recorded = await self._record_attempt(delivery_id, values)

            lazy_logger.debug(
                lambda: f"engine.attempt: delivery={delivery_id} attempt={attempt} -> {status.value}"
            )

        if not recorded:
            # Each write carries the full state, so one retry of the last one suffices.
            await self._record_attempt(delivery_id, values)

        webhook_deliveries_completed_total.labels(status=status.value).inc()
        log = logger.info if status is DeliveryStatus.DELIVERED else logger.warning
        log(
            "Webhook delivery finished",
            extra={
                "webhook_id": str(target.id),
                "delivery_id": str(delivery_id),
                "event_type": event_type.value,
                "status": status.value,
                "attempts": attempt,
                "response_code": response_code,
                "operation": "engine.deliver",
            },
        )
        return DeliveryOutcome(
            webhook_id=target.id,
            delivery_id=delivery_id,
            status=status,
            attempts=attempt,
            response_code=response_code,
        )

    async def _record_attempt(self, delivery_id: UUID, values: dict[str, Any]) -> bool:
        """Write one attempt to the ledger; a failed write is logged, not raised."""
        try:
            async with self._session_factory() as session:
                await self._deliveries.record_attempt(session, delivery_id, **values)
                await session.commit()
        except Exception:
            logger.exception(
                "Failed to record webhook delivery attempt",
                extra={
                    "delivery_id": str(delivery_id),
                    "attempts": values["attempts"],
                    "status": values["status"],
                    "operation": "engine.record_attempt",
                },
            )
            return False
        return True

    def deliver_in_background(
        self,
        event_type: NotificationType | str,
        payload: Mapping[str, Any],
        user_id: str,
    ) -> asyncio.Task[list[DeliveryOutcome]]:
        """Start ``deliver`` as a task and return immediately.

        The task is tracked until it finishes so ``drain`` can wait for it.
        """
        task = asyncio.create_task(
            self.deliver(event_type, payload, user_id),
            name=f"webhook-delivery:{event_type}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[list[DeliveryOutcome]]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background webhook delivery failed",
                exc_info=exc,
                extra={"task": task.get_name(), "operation": "engine.deliver_in_background"},
            )

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight sequences, cancelling whatever outlives ``timeout``."""
        if not self._tasks:
            return

        timeout = self._settings.shutdown_grace_seconds if timeout is None else timeout
        logger.info(
            "Waiting for in-flight webhook deliveries",
            extra={"in_flight": len(self._tasks), "timeout_seconds": timeout},
        )
        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        if pending:
            logger.warning(
                "Cancelling webhook deliveries still running at shutdown",
                extra={"cancelled": len(pending), "operation": "engine.drain"},
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)


_delivery_engine: WebhookDeliveryEngine | None = None


def get_delivery_engine() -> WebhookDeliveryEngine:
    """Get the process-wide delivery engine (it owns the background task set)."""
    global _delivery_engine
    if _delivery_engine is None:
        _delivery_engine = WebhookDeliveryEngine()
    return _delivery_engine
