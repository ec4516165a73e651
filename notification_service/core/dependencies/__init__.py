"""FastAPI dependencies shared across features."""

from __future__ import annotations

from .auth import CurrentUser, ServiceCaller, get_current_user, require_service_token
from .database import DBSession, get_db_session

__all__ = [
    "CurrentUser",
    "DBSession",
    "ServiceCaller",
    "get_current_user",
    "get_db_session",
    "require_service_token",
]
