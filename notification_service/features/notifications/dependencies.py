"""FastAPI dependencies for the notifications feature.

Example usage:
    @router.post("/notifications/send")
    async def send(payload: NotificationSendRequest, dispatcher: DispatcherDep): ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from notification_service.core.dependencies.database import DBSession  # noqa: TC001
from notification_service.features.notifications.dispatcher import NotificationDispatcher
from notification_service.features.notifications.service import NotificationStore
from notification_service.features.webhooks.delivery import (
    WebhookDeliveryEngine,
    get_delivery_engine,
)

DeliveryEngineDep = Annotated[WebhookDeliveryEngine, Depends(get_delivery_engine)]


def get_notification_store(session: DBSession) -> NotificationStore:
    return NotificationStore(session)


def get_dispatcher(session: DBSession, engine: DeliveryEngineDep) -> NotificationDispatcher:
    return NotificationDispatcher(session, engine)


NotificationStoreDep = Annotated[NotificationStore, Depends(get_notification_store)]
DispatcherDep = Annotated[NotificationDispatcher, Depends(get_dispatcher)]
