"""Base database model classes with composable mixins.

Models combine ``Base`` with the mixins they need:

    class Webhook(Base, UUIDPKMixin, TimestampMixin):
        __tablename__ = "webhooks"
        url: Mapped[str] = mapped_column(String(2048))
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

# Predictable constraint names; check constraints must be given a name.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base sharing one metadata registry and naming convention."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class UUIDPKMixin:
    """UUID v4 primary key.

    Random ids keep notification and webhook ids unguessable, which matters
    because ownership failures are reported exactly like missing ids.
    """

    __allow_unmapped__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
        comment="UUID v4 primary key",
    )


class CreatedAtMixin:
    """Creation timestamp for append-only rows."""

    __allow_unmapped__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
        index=True,
        comment="Timestamp of record creation",
    )


class TimestampMixin(CreatedAtMixin):
    """Creation and last-modification timestamps.

    Uses both Python-side defaults (for tests) and server defaults (for
    rows inserted outside the ORM).
    """

    __allow_unmapped__ = True

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
        comment="Timestamp of last update",
    )
