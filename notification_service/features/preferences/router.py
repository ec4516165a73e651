"""API router for notification preferences."""

from __future__ import annotations

from fastapi import APIRouter

from notification_service.core.dependencies.auth import CurrentUser  # noqa: TC001
from notification_service.core.dependencies.database import DBSession  # noqa: TC001
from notification_service.features.preferences.schemas import PreferencesRead, PreferencesUpdate
from notification_service.features.preferences.service import ChannelMap, PreferenceResolver

router = APIRouter(prefix="/preferences", tags=["preferences"])


def _to_read(preferences: ChannelMap) -> PreferencesRead:
    return PreferencesRead(**{t.value: channels for t, channels in preferences.items()})


@router.get(
    "",
    response_model=PreferencesRead,
    summary="Get notification preferences",
    description="Channels per notification type. Types never configured show their defaults.",
)
async def get_preferences(user: CurrentUser, session: DBSession) -> PreferencesRead:
    preferences = await PreferenceResolver(session).get_preferences(user.user_id)
    return _to_read(preferences)


@router.put(
    "",
    response_model=PreferencesRead,
    summary="Update notification preferences",
    description="Replace the channels for the supplied types; omitted types are unchanged.",
)
async def update_preferences(
    payload: PreferencesUpdate,
    user: CurrentUser,
    session: DBSession,
) -> PreferencesRead:
    preferences = await PreferenceResolver(session).update_preferences(user.user_id, payload)
    await session.commit()
    return _to_read(preferences)
