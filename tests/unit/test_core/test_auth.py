"""Tests for the authentication dependencies."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from notification_service.app.exception_handlers import configure_exception_handlers
from notification_service.core.dependencies.auth import CurrentUser, ServiceCaller
from notification_service.core.schemas.auth import AuthUser


@pytest.fixture
async def client():
    app = FastAPI()
    configure_exception_handlers(app)

    @app.get("/me")
    async def me(user: CurrentUser) -> AuthUser:
        return user

    @app.get("/internal", dependencies=[ServiceCaller])
    async def internal() -> dict[str, bool]:
        return {"ok": True}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def test_user_headers_become_auth_user(client) -> None:
    response = await client.get(
        "/me",
        headers={"X-User-Id": "user-1", "X-User-Email": "dev@example.com", "X-User-Role": "admin"},
    )

    assert response.json() == {"user_id": "user-1", "email": "dev@example.com", "role": "admin"}


@pytest.mark.parametrize("headers", [{}, {"X-User-Id": ""}, {"X-User-Id": "   "}])
async def test_missing_user_is_unauthorized(client, headers) -> None:
    response = await client.get("/me", headers=headers)

    assert response.status_code == 401
    assert response.json()["type"] == "unauthorized"


@pytest.mark.parametrize(
    "headers",
    [
        {"X-Service-Token": "test-service-token"},
        {"Authorization": "Bearer test-service-token"},
        {"Authorization": "bearer test-service-token"},
    ],
)
async def test_service_token_accepted(client, headers) -> None:
    response = await client.get("/internal", headers=headers)

    assert response.status_code == 200


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"X-Service-Token": "wrong"},
        {"Authorization": "Basic test-service-token"},
        {"X-User-Id": "user-1"},
    ],
)
async def test_service_token_rejected(client, headers) -> None:
    response = await client.get("/internal", headers=headers)

    assert response.status_code == 403


async def test_service_token_read_from_platform_variable(client, monkeypatch) -> None:
    from notification_service.core.settings import clear_settings_cache

    monkeypatch.delenv("AUTH_SERVICE_TOKEN")
    monkeypatch.setenv("NEXUS_SERVICE_TOKEN", "platform-token")
    clear_settings_cache()

    response = await client.get("/internal", headers={"X-Service-Token": "platform-token"})

    assert response.status_code == 200
