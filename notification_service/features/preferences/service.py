"""Preference resolution: which channels a notification goes to."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from notification_service.core.enums import NotificationChannel, NotificationType
from notification_service.core.services.base import BaseService
from notification_service.features.preferences.defaults import default_channels
from notification_service.features.preferences.repository import (
    PreferencesRepository,
    get_preferences_repository,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

    from notification_service.features.preferences.models import NotificationPreferences
    from notification_service.features.preferences.schemas import PreferencesUpdate

_CHANNEL_LIST = TypeAdapter(list[NotificationChannel])

ChannelMap = dict[NotificationType, list[NotificationChannel]]


def unique_channels(channels: Iterable[NotificationChannel]) -> list[NotificationChannel]:
    """Drop repeated channels, keeping first-seen order."""
    return list(dict.fromkeys(channels))


class PreferenceResolver(BaseService):
    """Reads, updates and resolves per-user channel preferences.

    A missing row, a NULL column, an empty stored list and a column that
    does not parse all resolve to that type's default. Each type is parsed
    on its own, so one bad column never affects the other four.
    """

    def __init__(
        self,
        session: AsyncSession,
        repository: PreferencesRepository | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._repo = repository or get_preferences_repository()

    def _parse_column(
        self,
        user_id: str,
        notification_type: NotificationType,
        raw: str | None,
    ) -> list[NotificationChannel]:
        if raw is None:
            return default_channels(notification_type)

        try:
            channels = unique_channels(_CHANNEL_LIST.validate_json(raw))
        except ValidationError:
            self.logger.warning(
                "Stored preference is unreadable, using default",
                extra={
                    "user_id": user_id,
                    "notification_type": notification_type.value,
                    "operation": "service.parse_preferences",
                },
            )
            return default_channels(notification_type)

        return channels or default_channels(notification_type)

    def _to_channel_map(self, user_id: str, row: NotificationPreferences | None) -> ChannelMap:
        return {
            notification_type: self._parse_column(
                user_id,
                notification_type,
                getattr(row, notification_type.value) if row is not None else None,
            )
            for notification_type in NotificationType
        }

    async def get_preferences(self, user_id: str) -> ChannelMap:
        """Effective channels for every notification type."""
        row = await self._repo.get(self._session, user_id)
        preferences = self._to_channel_map(user_id, row)

        self._lazy.debug(
            lambda: f"service.get_preferences({user_id}) -> {'stored' if row else 'defaults'}"
        )
        return preferences

    async def resolve_channels(
        self,
        user_id: str,
        notification_type: NotificationType,
        explicit_channels: Iterable[NotificationChannel] | None = None,
    ) -> list[NotificationChannel]:
        """Channels to deliver one notification to.

        A non-empty ``explicit_channels`` wins over anything stored.
        The result is never empty.
        """
        if explicit_channels:
            channels = unique_channels(explicit_channels)
            self._lazy.debug(
                lambda: f"service.resolve_channels({user_id}, {notification_type}) -> explicit {channels}"
            )
            return channels

        row = await self._repo.get(self._session, user_id)
        channels = self._parse_column(
            user_id,
            notification_type,
            getattr(row, notification_type.value) if row is not None else None,
        )

        self._lazy.debug(
            lambda: f"service.resolve_channels({user_id}, {notification_type}) -> {channels}"
        )
        return channels

    async def update_preferences(self, user_id: str, payload: PreferencesUpdate) -> ChannelMap:
        """Merge the supplied fields over the stored row and return the result.

        Does not commit; the caller owns the transaction.
        """
        columns = {
            name: json.dumps([channel.value for channel in channels])
            for name, channels in payload.model_dump(exclude_unset=True).items()
            if channels is not None
        }
        row = await self._repo.upsert(self._session, user_id, columns)

        self.logger.info(
            "Notification preferences updated",
            extra={
                "user_id": user_id,
                "fields": sorted(columns),
                "operation": "service.update_preferences",
            },
        )
        return self._to_channel_map(user_id, row)
