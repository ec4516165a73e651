"""Pagination settings for list endpoints.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_PAGE_SIZE=50
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Page-size defaults and the hard ceiling applied to caller input."""

    default_page_size: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Page size when the caller does not send one",
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Requested page sizes are clamped to this value",
    )

    def clamp(self, page: int | None, page_size: int | None) -> tuple[int, int]:
        """Normalize caller-supplied paging into (page >= 1, 1 <= size <= max)."""
        page = max(1, page or 1)
        size = min(self.max_page_size, max(1, page_size or self.default_page_size))
        return page, size

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
