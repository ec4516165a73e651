"""Repository for the preferences feature."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from notification_service.core.database.repository import BaseRepository
from notification_service.features.preferences.models import NotificationPreferences

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.ext.asyncio import AsyncSession

_DIALECT_INSERTS: dict[str, Any] = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class PreferencesRepository(BaseRepository[NotificationPreferences]):
    """Repository for NotificationPreferences, keyed by user id."""

    def __init__(self) -> None:
        super().__init__(NotificationPreferences)

    async def upsert(
        self,
        session: AsyncSession,
        user_id: str,
        columns: Mapping[str, str],
    ) -> NotificationPreferences:
        """Write the given raw column values, creating the row if needed.

        Runs as a single ``INSERT ... ON CONFLICT (user_id) DO UPDATE`` so
        two first-time writers for the same user cannot collide. Columns
        not present in ``columns`` keep their stored value.

        Raises:
            NotImplementedError: For a database without ON CONFLICT support.
        """
        dialect = session.get_bind().dialect.name
        insert = _DIALECT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Preference upsert is not supported on {dialect}")

        stmt = insert(NotificationPreferences).values(user_id=user_id, **columns)
        stmt = stmt.on_conflict_do_update(
            index_elements=[NotificationPreferences.user_id],
            set_={**{name: stmt.excluded[name] for name in columns}, "updated_at": datetime.now(UTC)},
        )
        await session.execute(stmt)

        row = await session.get(NotificationPreferences, user_id, populate_existing=True)
        if row is None:
            raise RuntimeError(f"Preference row for {user_id} missing after upsert")

        self._lazy.debug(lambda: f"db.upsert: NotificationPreferences({user_id}) -> {sorted(columns)}")
        return row


_preferences_repository: PreferencesRepository | None = None


def get_preferences_repository() -> PreferencesRepository:
    """Get the shared PreferencesRepository instance."""
    global _preferences_repository
    if _preferences_repository is None:
        _preferences_repository = PreferencesRepository()
    return _preferences_repository
