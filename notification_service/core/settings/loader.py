"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from notification_service.core.settings import get_webhook_settings

    settings = get_webhook_settings()  # First call: loads and validates
    settings = get_webhook_settings()  # Subsequent calls: cached instance

Testing:
    Clear the cache to force reload after changing the environment:
    get_webhook_settings.cache_clear()
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .webhooks import WebhookSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings."""
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Get cached authentication settings."""
    return AuthSettings()


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Get cached webhook delivery settings."""
    return WebhookSettings()


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Get cached pagination settings."""
    return PaginationSettings()


def clear_settings_cache() -> None:
    """Drop every cached settings instance (tests, reload on SIGHUP)."""
    for loader in (
        get_app_settings,
        get_db_settings,
        get_logging_settings,
        get_auth_settings,
        get_webhook_settings,
        get_pagination_settings,
    ):
        loader.cache_clear()
