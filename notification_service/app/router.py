"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from notification_service.core.settings import get_app_settings
from notification_service.features.email.router import router as email_router
from notification_service.features.health.router import router as health_router
from notification_service.features.metrics.router import router as metrics_router
from notification_service.features.notifications.router import router as notifications_router
from notification_service.features.preferences.router import router as preferences_router
from notification_service.features.webhooks.router import router as webhooks_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from notification_service.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
    """
    app_settings = app_settings or get_app_settings()
    api_prefix = app_settings.api_prefix

    # Scrape endpoint stays at /metrics regardless of prefix
    app.include_router(metrics_router)

    app.include_router(health_router, prefix=api_prefix)
    app.include_router(notifications_router, prefix=api_prefix)
    app.include_router(preferences_router, prefix=api_prefix)
    app.include_router(webhooks_router, prefix=api_prefix)
    app.include_router(email_router, prefix=api_prefix)

    logger.info("Routers registered", extra={"api_prefix": api_prefix or "/"})
