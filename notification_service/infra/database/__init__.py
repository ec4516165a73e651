"""Database infrastructure."""

from __future__ import annotations

from .session import (
    AsyncSessionLocal,
    close_database,
    engine,
    get_async_session,
    import_models,
    init_database,
)

__all__ = [
    "AsyncSessionLocal",
    "close_database",
    "engine",
    "get_async_session",
    "import_models",
    "init_database",
]
