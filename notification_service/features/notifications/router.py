"""API router for the notifications feature."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from notification_service.core.dependencies.auth import CurrentUser, ServiceCaller  # noqa: TC001
from notification_service.core.dependencies.database import DBSession  # noqa: TC001
from notification_service.core.exceptions import NotFoundException
from notification_service.core.validators import parse_uuid
from notification_service.features.notifications.dependencies import (  # noqa: TC001
    DispatcherDep,
    NotificationStoreDep,
)
from notification_service.features.notifications.schemas import (
    NotificationPage,
    NotificationRead,
    NotificationSendRequest,
    UnreadCount,
    UpdatedCount,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post(
    "/send",
    response_model=list[NotificationRead],
    status_code=status.HTTP_201_CREATED,
    dependencies=[ServiceCaller],
    summary="Send a notification",
    description=(
        "Fan an event out to the recipient's channels. Service callers only. "
        "Webhook delivery is started but not awaited."
    ),
)
async def send_notification(
    payload: NotificationSendRequest,
    dispatcher: DispatcherDep,
) -> list[NotificationRead]:
    records = await dispatcher.send(payload)
    return [NotificationRead.model_validate(record) for record in records]


@router.get(
    "",
    response_model=NotificationPage,
    summary="List notifications",
    description="The caller's notifications, newest first. page_size is clamped to 1..100.",
)
async def list_notifications(
    user: CurrentUser,
    store: NotificationStoreDep,
    page: int | None = Query(default=None, description="1-based page number"),
    page_size: int | None = Query(default=None, description="Items per page"),
) -> NotificationPage:
    result, page, size = await store.list(user.user_id, page, page_size)
    return NotificationPage(
        items=[NotificationRead.model_validate(record) for record in result.items],
        total=result.total,
        page=page,
        page_size=size,
        has_more=result.has_more,
    )


@router.get(
    "/unread-count",
    response_model=UnreadCount,
    summary="Count unread notifications",
)
async def unread_count(user: CurrentUser, store: NotificationStoreDep) -> UnreadCount:
    return UnreadCount(count=await store.unread_count(user.user_id))


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Mark a notification read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(
    notification_id: str,
    user: CurrentUser,
    store: NotificationStoreDep,
    session: DBSession,
) -> NotificationRead:
    parsed = parse_uuid(notification_id)
    record = await store.mark_read(parsed, user.user_id) if parsed is not None else None
    if record is None:
        raise NotFoundException(
            detail="Notification not found",
            type="notification-not-found",
            extra={"notification_id": notification_id},
        )
    await session.commit()
    return NotificationRead.model_validate(record)


@router.post(
    "/read-all",
    response_model=UpdatedCount,
    summary="Mark all notifications read",
)
async def mark_all_read(
    user: CurrentUser,
    store: NotificationStoreDep,
    session: DBSession,
) -> UpdatedCount:
    updated = await store.mark_all_read(user.user_id)
    await session.commit()
    return UpdatedCount(updated=updated)
