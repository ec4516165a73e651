"""Modular Pydantic Settings v2 configuration.

One settings class per domain, each read from its own environment prefix
(APP_, DB_, LOG_, AUTH_, WEBHOOK_, PAGINATION_) and cached by the loaders below.

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_auth_settings,
    get_db_settings,
    get_logging_settings,
    get_pagination_settings,
    get_webhook_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .webhooks import WebhookSettings

__all__ = [
    "AppSettings",
    "AuthSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "PaginationSettings",
    "WebhookSettings",
    "clear_settings_cache",
    "get_app_settings",
    "get_auth_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_pagination_settings",
    "get_webhook_settings",
]
