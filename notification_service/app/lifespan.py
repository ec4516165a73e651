"""Application lifespan management.

Startup order:
1. Logging
2. Database (connectivity check, table creation when enabled)

Shutdown runs in reverse, after in-flight webhook deliveries are drained so
their final ledger writes still have a database to land in.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from notification_service.core.settings import (
    get_app_settings,
    get_logging_settings,
    get_webhook_settings,
)
from notification_service.features.webhooks.delivery import get_delivery_engine
from notification_service.infra.database import close_database, init_database
from notification_service.infra.logging import setup_logging
from notification_service.infra.logging import shutdown as shutdown_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start and stop application services."""
    app_settings = get_app_settings()

    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={
            "service": app_settings.service_name,
            "version": app_settings.version,
            "environment": app_settings.environment,
        },
    )

    await init_database()

    logger.info("Application startup complete")

    yield

    logger.info("Application shutting down")

    engine = get_delivery_engine()
    try:
        await engine.drain(get_webhook_settings().shutdown_grace_seconds)
    except Exception:
        logger.exception("Error draining webhook deliveries")

    await close_database()

    logger.info("Application shutdown complete")
    shutdown_logging()
