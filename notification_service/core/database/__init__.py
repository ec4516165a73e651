"""Database building blocks shared by feature models and repositories."""

from __future__ import annotations

from .base import NAMING_CONVENTION, Base, CreatedAtMixin, TimestampMixin, UUIDPKMixin
from .exceptions import NotFoundError, RepositoryError
from .repository import BaseRepository, SearchResult
from .types import JSONDict, StringArray, URLType

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "CreatedAtMixin",
    "JSONDict",
    "NotFoundError",
    "RepositoryError",
    "SearchResult",
    "StringArray",
    "TimestampMixin",
    "URLType",
    "UUIDPKMixin",
]
