"""API router for the webhooks feature."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from notification_service.core.dependencies.auth import CurrentUser  # noqa: TC001
from notification_service.core.dependencies.database import DBSession  # noqa: TC001
from notification_service.core.exceptions import NotFoundException
from notification_service.core.validators import parse_uuid
from notification_service.features.webhooks.schemas import (
    WebhookCreate,
    WebhookDeleted,
    WebhookDeliveryRead,
    WebhookRead,
    WebhookUpdate,
)
from notification_service.features.webhooks.service import WebhookRegistry
from notification_service.infra.logging import get_lazy_logger

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

lazy_logger = get_lazy_logger(__name__)

_NOT_FOUND = {404: {"description": "Webhook not found"}}


def _not_found(webhook_id: UUID | str) -> NotFoundException:
    return NotFoundException(
        detail="Webhook not found",
        type="webhook-not-found",
        extra={"webhook_id": str(webhook_id)},
    )


def _path_webhook_id(webhook_id: str) -> UUID:
    parsed = parse_uuid(webhook_id)
    if parsed is None:
        raise _not_found(webhook_id)
    return parsed


WebhookId = Annotated[UUID, Depends(_path_webhook_id)]


@router.post(
    "",
    response_model=WebhookRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a webhook",
    description="Register an endpoint to receive signed events for the given notification types.",
)
async def create_webhook(
    payload: WebhookCreate,
    user: CurrentUser,
    session: DBSession,
) -> WebhookRead:
    webhook = await WebhookRegistry(session).create(user.user_id, payload)
    await session.commit()
    return WebhookRead.model_validate(webhook)


@router.get(
    "",
    response_model=list[WebhookRead],
    summary="List webhooks",
    description="The caller's webhooks, newest first.",
)
async def list_webhooks(user: CurrentUser, session: DBSession) -> list[WebhookRead]:
    webhooks = await WebhookRegistry(session).list(user.user_id)
    return [WebhookRead.model_validate(webhook) for webhook in webhooks]


@router.get(
    "/{webhook_id}",
    response_model=WebhookRead,
    summary="Get a webhook",
    responses=_NOT_FOUND,
)
async def get_webhook(webhook_id: WebhookId, user: CurrentUser, session: DBSession) -> WebhookRead:
    webhook = await WebhookRegistry(session).get(webhook_id, user.user_id)
    if webhook is None:
        raise _not_found(webhook_id)
    return WebhookRead.model_validate(webhook)


@router.patch(
    "/{webhook_id}",
    response_model=WebhookRead,
    summary="Update a webhook",
    description="Partial update; omitted fields keep their current value.",
    responses=_NOT_FOUND,
)
async def update_webhook(
    webhook_id: WebhookId,
    payload: WebhookUpdate,
    user: CurrentUser,
    session: DBSession,
) -> WebhookRead:
    webhook = await WebhookRegistry(session).update(webhook_id, user.user_id, payload)
    if webhook is None:
        raise _not_found(webhook_id)
    await session.commit()
    return WebhookRead.model_validate(webhook)


@router.delete(
    "/{webhook_id}",
    response_model=WebhookDeleted,
    summary="Delete a webhook",
    description="Delete a webhook together with its delivery history.",
    responses=_NOT_FOUND,
)
async def delete_webhook(webhook_id: WebhookId, user: CurrentUser, session: DBSession) -> WebhookDeleted:
    deleted = await WebhookRegistry(session).delete(webhook_id, user.user_id)
    if not deleted:
        raise _not_found(webhook_id)
    await session.commit()
    return WebhookDeleted(deleted=True)


@router.get(
    "/{webhook_id}/deliveries",
    response_model=list[WebhookDeliveryRead],
    summary="List webhook deliveries",
    description=(
        "Delivery ledger for one of the caller's webhooks, newest first. "
        "An unknown or foreign webhook id yields an empty list."
    ),
)
async def list_deliveries(
    webhook_id: str,
    user: CurrentUser,
    session: DBSession,
) -> list[WebhookDeliveryRead]:
    parsed = parse_uuid(webhook_id)
    if parsed is None:
        return []
    deliveries = await WebhookRegistry(session).get_deliveries(parsed, user.user_id)
    lazy_logger.debug(lambda: f"router.list_deliveries({webhook_id}) -> {len(deliveries)} items")
    return [WebhookDeliveryRead.model_validate(delivery) for delivery in deliveries]
