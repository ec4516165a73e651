"""Tests for WebhookDeliveryEngine."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest
from sqlalchemy import select

from notification_service.core.enums import DeliveryStatus
from notification_service.core.settings import WebhookSettings
from notification_service.features.webhooks.client import sign_payload
from notification_service.features.webhooks.delivery import (
    WebhookDeliveryEngine,
    serialize_payload,
)
from notification_service.features.webhooks.models import WebhookDelivery
from notification_service.features.webhooks.repository import WebhookDeliveryRepository

PAYLOAD = {"event": "task_assigned", "title": "New task", "metadata": {"b": "2", "a": "1"}}


class Responder:
    """MockTransport handler replaying a scripted list of status codes or errors."""

    def __init__(self, *script: int | Exception) -> None:
        self.script = list(script)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(step, Exception):
            raise step
        return httpx.Response(step)


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def make_engine(session_factory, sleeps) -> Callable[[Responder], WebhookDeliveryEngine]:
    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    def _make(responder: Responder) -> WebhookDeliveryEngine:
        return WebhookDeliveryEngine(
            session_factory,
            client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(responder)),
            sleep=fake_sleep,
            settings=WebhookSettings(max_attempts=3, retry_delays_seconds=[1.0, 5.0, 15.0]),
        )

    return _make


async def _ledger(session_factory) -> list[WebhookDelivery]:
    async with session_factory() as session:
        return list((await session.execute(select(WebhookDelivery))).scalars().all())


async def _wait_for_row(session_factory, webhook_id, status: str) -> WebhookDelivery:
    async with asyncio.timeout(5):
        while True:
            for row in await _ledger(session_factory):
                if row.webhook_id == webhook_id and row.status == status:
                    return row
            await asyncio.sleep(0.01)


class FlakyLedger(WebhookDeliveryRepository):
    """Delivery repository whose first ``failures`` attempt writes raise."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures

    async def record_attempt(self, session, delivery_id, **values) -> None:
        if self.failures:
            self.failures -= 1
            raise RuntimeError("database is locked")
        await super().record_attempt(session, delivery_id, **values)


async def test_success_on_first_attempt(make_engine, make_webhook, session_factory, sleeps) -> None:
    webhook = await make_webhook()
    responder = Responder(200)

    (outcome,) = await make_engine(responder).deliver("task_assigned", PAYLOAD, "user-1")

    assert outcome.status is DeliveryStatus.DELIVERED
    assert outcome.attempts == 1
    assert outcome.response_code == 200
    assert sleeps == []

    (row,) = await _ledger(session_factory)
    assert row.webhook_id == webhook.id
    assert row.status == "delivered"
    assert row.attempts == 1
    assert row.response_code == 200
    assert row.last_attempt_at is not None
    assert json.loads(row.payload) == PAYLOAD


async def test_retries_until_success(make_engine, make_webhook, session_factory, sleeps) -> None:
    await make_webhook()
    responder = Responder(500, 503, 200)

    (outcome,) = await make_engine(responder).deliver("task_assigned", PAYLOAD, "user-1")

    assert outcome.status is DeliveryStatus.DELIVERED
    assert outcome.attempts == 3
    assert sleeps == [1.0, 5.0]
    assert len(responder.requests) == 3

    (row,) = await _ledger(session_factory)
    assert (row.status, row.attempts, row.response_code) == ("delivered", 3, 200)


async def test_gives_up_after_max_attempts(make_engine, make_webhook, session_factory, sleeps) -> None:
    await make_webhook()
    responder = Responder(500)

    (outcome,) = await make_engine(responder).deliver("task_assigned", PAYLOAD, "user-1")

    assert outcome.status is DeliveryStatus.FAILED
    assert outcome.attempts == 3
    assert len(responder.requests) == 3
    assert sleeps == [1.0, 5.0]

    (row,) = await _ledger(session_factory)
    assert (row.status, row.attempts, row.response_code) == ("failed", 3, 500)


async def test_transport_errors_are_retried(make_engine, make_webhook, session_factory) -> None:
    await make_webhook()
    responder = Responder(httpx.ConnectError("refused"), 201)

    (outcome,) = await make_engine(responder).deliver("task_assigned", PAYLOAD, "user-1")

    assert outcome.status is DeliveryStatus.DELIVERED
    assert outcome.attempts == 2
    (row,) = await _ledger(session_factory)
    assert row.response_code == 201


async def test_transport_failure_throughout_leaves_no_response_code(
    make_engine, make_webhook, session_factory
) -> None:
    await make_webhook()

    (outcome,) = await make_engine(Responder(httpx.ConnectError("refused"))).deliver(
        "task_assigned", PAYLOAD, "user-1"
    )

    assert outcome.status is DeliveryStatus.FAILED
    (row,) = await _ledger(session_factory)
    assert row.response_code is None
    assert row.attempts == 3


async def test_body_is_canonical_and_signed(make_engine, make_webhook) -> None:
    await make_webhook(secret="topsecret")
    responder = Responder(200)

    await make_engine(responder).deliver("task_assigned", PAYLOAD, "user-1")

    (request,) = responder.requests
    body = request.content.decode()
    assert body == serialize_payload(PAYLOAD)
    assert body.index('"a"') < body.index('"b"')
    assert request.headers["X-Nexus-Signature"] == sign_payload(body, "topsecret")


async def test_unsubscribed_inactive_and_foreign_webhooks_are_skipped(
    make_engine, make_webhook, session_factory
) -> None:
    await make_webhook(events=["comment_added"])
    await make_webhook(active=False)
    await make_webhook(user_id="user-2")
    responder = Responder(200)

    outcomes = await make_engine(responder).deliver("task_assigned", PAYLOAD, "user-1")

    assert outcomes == []
    assert responder.requests == []
    assert await _ledger(session_factory) == []


async def test_each_subscribed_webhook_gets_its_own_sequence(
    make_engine, make_webhook, session_factory
) -> None:
    first = await make_webhook(url="https://one.example.com/hook")
    second = await make_webhook(url="https://two.example.com/hook", events=["task_assigned", "comment_added"])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200 if request.url.host == "one.example.com" else 500)

    engine = WebhookDeliveryEngine(
        session_factory,
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        sleep=lambda delay: asyncio.sleep(0),
        settings=WebhookSettings(max_attempts=2, retry_delays_seconds=[0.0]),
    )

    outcomes = await engine.deliver("task_assigned", PAYLOAD, "user-1")

    by_webhook = {o.webhook_id: o for o in outcomes}
    assert by_webhook[first.id].status is DeliveryStatus.DELIVERED
    assert by_webhook[second.id].status is DeliveryStatus.FAILED
    assert by_webhook[second.id].attempts == 2
    assert len(await _ledger(session_factory)) == 2


async def test_backoff_of_one_webhook_does_not_hold_up_another(make_webhook, session_factory) -> None:
    slow = await make_webhook(url="https://slow.example.com/hook")
    fast = await make_webhook(url="https://fast.example.com/hook")
    slow_script = [500, 200]

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "slow.example.com":
            return httpx.Response(slow_script.pop(0))
        return httpx.Response(200)

    backing_off = asyncio.Event()
    release = asyncio.Event()

    async def gated_sleep(delay: float) -> None:
        backing_off.set()
        await release.wait()

    engine = WebhookDeliveryEngine(
        session_factory,
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        sleep=gated_sleep,
        settings=WebhookSettings(max_attempts=3, retry_delays_seconds=[1.0]),
    )
    task = engine.deliver_in_background("task_assigned", PAYLOAD, "user-1")

    await asyncio.wait_for(backing_off.wait(), timeout=5)
    fast_row = await _wait_for_row(session_factory, fast.id, "delivered")
    slow_row = await _wait_for_row(session_factory, slow.id, "pending")

    assert fast_row.attempts == 1
    assert (slow_row.attempts, slow_row.response_code) == (1, 500)
    assert not task.done()

    release.set()
    await engine.drain(timeout=5)

    slow_row = await _wait_for_row(session_factory, slow.id, "delivered")
    assert slow_row.attempts == 2


async def test_failed_ledger_write_does_not_strand_the_row(session_factory, make_webhook) -> None:
    await make_webhook()
    engine = WebhookDeliveryEngine(
        session_factory,
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(Responder(200))),
        settings=WebhookSettings(),
        delivery_repository=FlakyLedger(failures=1),
    )

    (outcome,) = await engine.deliver("task_assigned", PAYLOAD, "user-1")

    assert outcome.status is DeliveryStatus.DELIVERED
    (row,) = await _ledger(session_factory)
    assert (row.status, row.attempts, row.response_code) == ("delivered", 1, 200)


async def test_failed_intermediate_write_is_superseded(session_factory, make_webhook) -> None:
    await make_webhook()
    engine = WebhookDeliveryEngine(
        session_factory,
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(Responder(500, 200))),
        sleep=lambda delay: asyncio.sleep(0),
        settings=WebhookSettings(max_attempts=3, retry_delays_seconds=[1.0]),
        delivery_repository=FlakyLedger(failures=1),
    )

    (outcome,) = await engine.deliver("task_assigned", PAYLOAD, "user-1")

    assert outcome.attempts == 2
    (row,) = await _ledger(session_factory)
    assert (row.status, row.attempts, row.response_code) == ("delivered", 2, 200)


@pytest.mark.parametrize(
    ("attempt", "expected"),
    [(1, 0.0), (2, 1.0), (3, 5.0), (4, 15.0), (9, 15.0)],
)
def test_backoff_schedule(attempt: int, expected: float) -> None:
    engine = WebhookDeliveryEngine(
        settings=WebhookSettings(retry_delays_seconds=[1.0, 5.0, 15.0]),
    )

    assert engine.backoff_before(attempt) == expected


async def test_background_delivery_is_tracked_and_drained(
    make_engine, make_webhook, session_factory
) -> None:
    await make_webhook()
    engine = make_engine(Responder(200))

    task = engine.deliver_in_background("task_assigned", PAYLOAD, "user-1")
    assert engine.in_flight == 1

    await engine.drain(timeout=5)

    assert task.done()
    assert engine.in_flight == 0
    (row,) = await _ledger(session_factory)
    assert row.status == "delivered"


async def test_drain_cancels_sequences_past_the_timeout(make_webhook, session_factory) -> None:
    await make_webhook()
    gate = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        await gate.wait()
        return httpx.Response(200)

    engine = WebhookDeliveryEngine(
        session_factory,
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        settings=WebhookSettings(),
    )
    task = engine.deliver_in_background("task_assigned", PAYLOAD, "user-1")

    await engine.drain(timeout=0.05)

    assert task.cancelled()
    assert engine.in_flight == 0
