"""Tests for the assembled application."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from notification_service.app.main import create_app


@pytest.fixture
async def client():
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def test_health(client) -> None:
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "notification-service"
    assert body["timestamp"]


async def test_request_id_is_generated_and_echoed(client) -> None:
    generated = await client.get("/api/v1/health")
    echoed = await client.get("/api/v1/health", headers={"X-Request-ID": "req-42"})

    assert generated.headers["X-Request-ID"]
    assert echoed.headers["X-Request-ID"] == "req-42"


async def test_metrics_endpoint(client) -> None:
    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "notifications_created_total" in response.text


def test_routes_are_mounted_under_api_prefix() -> None:
    paths = set(create_app().openapi()["paths"])

    for expected in (
        "/api/v1/health",
        "/api/v1/notifications/send",
        "/api/v1/notifications",
        "/api/v1/notifications/{notification_id}/read",
        "/api/v1/notifications/read-all",
        "/api/v1/notifications/unread-count",
        "/api/v1/preferences",
        "/api/v1/webhooks",
        "/api/v1/webhooks/{webhook_id}",
        "/api/v1/webhooks/{webhook_id}/deliveries",
        "/api/v1/emails",
    ):
        assert expected in paths


def test_docs_hidden_in_production(monkeypatch) -> None:
    from notification_service.core.settings import clear_settings_cache

    monkeypatch.setenv("APP_ENVIRONMENT", "production")
    clear_settings_cache()

    app = create_app()

    assert app.openapi_url is None
    assert app.docs_url is None
