"""Database dependencies for FastAPI route handlers.

Two session getters exist:

1. ``get_db_session()`` (this module): FastAPI dependency, one session per
   request, committed by the service layer.
2. ``get_async_session()`` (infra.database): plain async context manager for
   background work such as webhook delivery loops, which outlive the request.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notification_service.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session."""
    async with get_async_session() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]
