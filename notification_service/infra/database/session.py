"""Database engine and session management.

Works with aiosqlite (default) and psycopg3 (PostgreSQL) through the same
SQLAlchemy async URL in DatabaseSettings.dsn.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from notification_service.core.database import Base
from notification_service.core.settings import get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

db_settings = get_db_settings()

engine = create_async_engine(db_settings.dsn, **db_settings.engine_kwargs())

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Example:
            async with get_async_session() as session:
            result = await session.execute(select(Webhook))
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def import_models() -> None:
    """Import every feature's models so Base.metadata knows their tables."""
    from notification_service.features.email import models as _email  # noqa: F401
    from notification_service.features.notifications import models as _notifications  # noqa: F401
    from notification_service.features.preferences import models as _preferences  # noqa: F401
    from notification_service.features.webhooks import models as _webhooks  # noqa: F401


async def init_database() -> None:
    """Verify connectivity and create missing tables.

    Raises:
        Exception: Whatever the driver raises when the database is unreachable.
    """
    logger.info(
        "Initializing database connection",
        extra={"dialect": engine.dialect.name, "create_tables": db_settings.create_tables_on_startup},
    )

    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if db_settings.create_tables_on_startup:
                import_models()
                await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.error(
            "Failed to connect to database",
            extra={"dialect": engine.dialect.name, "error": str(e)},
        )
        raise

    logger.info("Database connection established successfully")


async def close_database() -> None:
    """Dispose the engine. Called during application shutdown."""
    logger.info("Closing database connection")

    try:
        await engine.dispose()
        logger.info("Database connection closed successfully")
    except Exception as e:
        logger.exception("Error closing database connection", extra={"error": str(e)})
