"""Tests for PreferenceResolver."""

from __future__ import annotations

import asyncio
import json

import pytest

from notification_service.core.enums import NotificationChannel, NotificationType
from notification_service.features.preferences.defaults import DEFAULT_PREFERENCES
from notification_service.features.preferences.models import NotificationPreferences
from notification_service.features.preferences.schemas import PreferencesUpdate
from notification_service.features.preferences.service import PreferenceResolver, unique_channels


async def _store_row(db_session, user_id: str = "user-1", **columns: str) -> None:
    db_session.add(NotificationPreferences(user_id=user_id, **columns))
    await db_session.commit()


async def test_user_without_row_gets_defaults(db_session) -> None:
    resolver = PreferenceResolver(db_session)

    preferences = await resolver.get_preferences("nobody")

    assert set(preferences) == set(NotificationType)
    for notification_type, channels in preferences.items():
        assert channels == list(DEFAULT_PREFERENCES[notification_type])


@pytest.mark.parametrize(
    ("notification_type", "expected"),
    [
        (NotificationType.TASK_ASSIGNED, [NotificationChannel.IN_APP]),
        (NotificationType.COMMENT_ADDED, [NotificationChannel.IN_APP]),
        (NotificationType.PROJECT_INVITED, [NotificationChannel.IN_APP, NotificationChannel.EMAIL]),
        (NotificationType.TASK_DUE_SOON, [NotificationChannel.IN_APP, NotificationChannel.EMAIL]),
    ],
)
async def test_resolve_channels_defaults(db_session, notification_type, expected) -> None:
    resolver = PreferenceResolver(db_session)

    assert await resolver.resolve_channels("nobody", notification_type) == expected


async def test_stored_override_replaces_default(db_session) -> None:
    await _store_row(db_session, task_assigned=json.dumps(["in_app", "webhook"]))
    resolver = PreferenceResolver(db_session)

    channels = await resolver.resolve_channels("user-1", NotificationType.TASK_ASSIGNED)

    assert channels == [NotificationChannel.IN_APP, NotificationChannel.WEBHOOK]


async def test_other_types_keep_defaults_when_one_is_stored(db_session) -> None:
    await _store_row(db_session, task_assigned=json.dumps(["webhook"]))
    resolver = PreferenceResolver(db_session)

    channels = await resolver.resolve_channels("user-1", NotificationType.PROJECT_INVITED)

    assert channels == [NotificationChannel.IN_APP, NotificationChannel.EMAIL]


@pytest.mark.parametrize("raw", ["not json", json.dumps(["sms"]), json.dumps({"a": 1}), "[]"])
async def test_unusable_stored_value_falls_back_to_default(db_session, raw: str) -> None:
    await _store_row(db_session, task_due_soon=raw, task_assigned=json.dumps(["email"]))
    resolver = PreferenceResolver(db_session)

    preferences = await resolver.get_preferences("user-1")

    assert preferences[NotificationType.TASK_DUE_SOON] == [
        NotificationChannel.IN_APP,
        NotificationChannel.EMAIL,
    ]
    # a bad column never spoils its neighbours
    assert preferences[NotificationType.TASK_ASSIGNED] == [NotificationChannel.EMAIL]


async def test_explicit_channels_win_and_are_deduplicated(db_session) -> None:
    await _store_row(db_session, task_assigned=json.dumps(["email"]))
    resolver = PreferenceResolver(db_session)

    channels = await resolver.resolve_channels(
        "user-1",
        NotificationType.TASK_ASSIGNED,
        [NotificationChannel.WEBHOOK, NotificationChannel.IN_APP, NotificationChannel.WEBHOOK],
    )

    assert channels == [NotificationChannel.WEBHOOK, NotificationChannel.IN_APP]


async def test_empty_explicit_channels_use_preferences(db_session) -> None:
    resolver = PreferenceResolver(db_session)

    channels = await resolver.resolve_channels("nobody", NotificationType.TASK_ASSIGNED, [])

    assert channels == [NotificationChannel.IN_APP]


async def test_update_merges_over_existing_row(db_session) -> None:
    resolver = PreferenceResolver(db_session)

    await resolver.update_preferences(
        "user-1", PreferencesUpdate(task_assigned=[NotificationChannel.EMAIL])
    )
    await db_session.commit()
    preferences = await resolver.update_preferences(
        "user-1", PreferencesUpdate(comment_added=[NotificationChannel.WEBHOOK])
    )
    await db_session.commit()

    assert preferences[NotificationType.TASK_ASSIGNED] == [NotificationChannel.EMAIL]
    assert preferences[NotificationType.COMMENT_ADDED] == [NotificationChannel.WEBHOOK]
    assert preferences[NotificationType.TASK_DUE_SOON] == [
        NotificationChannel.IN_APP,
        NotificationChannel.EMAIL,
    ]


async def test_concurrent_first_updates_both_land(session_factory) -> None:
    async def update(payload: PreferencesUpdate) -> None:
        async with session_factory() as session:
            await PreferenceResolver(session).update_preferences("user-9", payload)
            await session.commit()

    await asyncio.gather(
        update(PreferencesUpdate(task_assigned=[NotificationChannel.EMAIL])),
        update(PreferencesUpdate(comment_added=[NotificationChannel.WEBHOOK])),
    )

    async with session_factory() as session:
        preferences = await PreferenceResolver(session).get_preferences("user-9")
    assert preferences[NotificationType.TASK_ASSIGNED] == [NotificationChannel.EMAIL]
    assert preferences[NotificationType.COMMENT_ADDED] == [NotificationChannel.WEBHOOK]


async def test_update_with_empty_list_resolves_to_default(db_session) -> None:
    resolver = PreferenceResolver(db_session)

    preferences = await resolver.update_preferences(
        "user-1", PreferencesUpdate(project_invited=[])
    )

    assert preferences[NotificationType.PROJECT_INVITED] == [
        NotificationChannel.IN_APP,
        NotificationChannel.EMAIL,
    ]


def test_unique_channels_keeps_first_seen_order() -> None:
    channels = [
        NotificationChannel.EMAIL,
        NotificationChannel.IN_APP,
        NotificationChannel.EMAIL,
    ]

    assert unique_channels(channels) == [NotificationChannel.EMAIL, NotificationChannel.IN_APP]
