"""Pytest configuration and shared fixtures.

Organization:
    - Settings: cache reset between tests
    - Database: file-backed SQLite engine, session factory and session
    - HTTP: helpers to mount a single router on a bare FastAPI app
    - Data: small factories for rows most tests need

Delivery tests open several sessions at once, so the engine is backed by a
file under ``tmp_path`` rather than a single shared in-memory connection.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Callable, Iterator
from typing import TYPE_CHECKING, Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from notification_service.app.exception_handlers import configure_exception_handlers
from notification_service.core.database import Base
from notification_service.core.dependencies.database import get_db_session
from notification_service.core.settings import clear_settings_cache
from notification_service.features.webhooks.models import Webhook
from notification_service.infra.database import import_models

if TYPE_CHECKING:
    from pathlib import Path

    from fastapi import APIRouter
    from sqlalchemy.ext.asyncio import AsyncEngine

os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_CREATE_TABLES_ON_STARTUP", "false")

SERVICE_TOKEN = "test-service-token"
USER_ID = "user-1"
OTHER_USER_ID = "user-2"


# ============================================================================
# Settings
# ============================================================================


@pytest.fixture(autouse=True)
def _settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Fresh settings per test with a known service token."""
    monkeypatch.setenv("AUTH_SERVICE_TOKEN", SERVICE_TOKEN)
    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    import_models()
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine, configured like AsyncSessionLocal."""
    return async_sessionmaker(db_engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


# ============================================================================
# HTTP
# ============================================================================


@pytest.fixture
def make_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., AsyncClient]:
    """Build an AsyncClient for one router backed by the test database.

    Example:
        async def test_list(make_client):
            async with make_client(router) as client:
                response = await client.get("/webhooks", headers={"X-User-Id": "u"})
    """

    def _make(router: APIRouter, overrides: dict[Any, Any] | None = None) -> AsyncClient:
        app = FastAPI()
        configure_exception_handlers(app)
        app.include_router(router)

        async def override_get_db_session() -> AsyncGenerator[AsyncSession]:
            async with session_factory() as session:
                yield session

        app.dependency_overrides[get_db_session] = override_get_db_session
        app.dependency_overrides.update(overrides or {})
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return _make


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"X-User-Id": USER_ID}


@pytest.fixture
def service_headers() -> dict[str, str]:
    return {"X-Service-Token": SERVICE_TOKEN}


# ============================================================================
# Data
# ============================================================================


@pytest.fixture
def make_webhook(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Any]:
    """Insert and commit a webhook; returns the detached instance."""

    async def _make(
        user_id: str = USER_ID,
        *,
        url: str = "https://hooks.example.com/events",
        secret: str = "s3cret",
        events: list[str] | None = None,
        active: bool = True,
    ) -> Webhook:
        async with session_factory() as session:
            webhook = Webhook(
                user_id=user_id,
                url=url,
                secret=secret,
                events=events if events is not None else ["task_assigned"],
                active=active,
            )
            session.add(webhook)
            await session.commit()
            return webhook

    return _make
