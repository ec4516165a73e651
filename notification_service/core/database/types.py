"""Custom SQLAlchemy types.

Types included:
- StringArray: list of strings; native ARRAY on PostgreSQL, JSON elsewhere
- JSONDict: string-keyed mapping; JSONB on PostgreSQL, JSON elsewhere
- URLType: validated http(s) URLs
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from sqlalchemy import JSON, String, TypeDecorator
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect


class StringArray(TypeDecorator[list[str]]):
    """Ordered list of short strings.

    Example:
        events: Mapped[list[str]] = mapped_column(StringArray(64), nullable=False)
    """

    impl = JSON
    cache_ok = True

    def __init__(self, item_length: int = 255, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.item_length = item_length

    def load_dialect_impl(self, dialect: Dialect) -> Any:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(ARRAY(String(self.item_length)))
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value: Any, dialect: Dialect) -> list[str] | None:
        _ = dialect
        if value is None:
            return None
        return [str(item) for item in value]

    def process_result_value(self, value: Any, dialect: Dialect) -> list[str]:
        _ = dialect
        if value is None:
            return []
        return list(value)


class JSONDict(TypeDecorator[dict[str, Any]]):
    """String-keyed JSON object column (JSONB on PostgreSQL)."""

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> Any:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_result_value(self, value: Any, dialect: Dialect) -> dict[str, Any]:
        _ = dialect
        return dict(value) if value else {}


class URLType(TypeDecorator[str]):
    """Validated URL storage with scheme enforcement.

    API schemas validate URLs first; this is the last line before a bad
    value reaches the delivery engine.

    Raises:
        ValueError: On bind, if the URL has no host or a disallowed scheme.
    """

    impl = String
    cache_ok = True

    def __init__(
        self,
        max_length: int = 2048,
        allowed_schemes: tuple[str, ...] = ("http", "https"),
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.max_length = max_length
        self.allowed_schemes = allowed_schemes

    def load_dialect_impl(self, dialect: Dialect) -> Any:
        return dialect.type_descriptor(String(self.max_length))

    def process_bind_param(self, value: str | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None

        value = str(value).strip()
        if len(value) > self.max_length:
            raise ValueError(f"URL exceeds maximum length of {self.max_length}")

        parsed = urlparse(value)
        if parsed.scheme.lower() not in self.allowed_schemes:
            raise ValueError(
                f"URL scheme '{parsed.scheme}' not allowed. "
                f"Allowed: {', '.join(self.allowed_schemes)}"
            )
        if not parsed.netloc:
            raise ValueError("URL must include a host")
        return value

    def process_result_value(self, value: str | None, dialect: Dialect) -> str | None:
        _ = dialect
        return value
