"""Channels each notification type is delivered to when a user has not chosen."""

from __future__ import annotations

from types import MappingProxyType

from notification_service.core.enums import NotificationChannel, NotificationType

DEFAULT_PREFERENCES: MappingProxyType[NotificationType, tuple[NotificationChannel, ...]] = (
    MappingProxyType(
        {
            NotificationType.TASK_ASSIGNED: (NotificationChannel.IN_APP,),
            NotificationType.TASK_STATUS_CHANGED: (NotificationChannel.IN_APP,),
            NotificationType.COMMENT_ADDED: (NotificationChannel.IN_APP,),
            NotificationType.PROJECT_INVITED: (
                NotificationChannel.IN_APP,
                NotificationChannel.EMAIL,
            ),
            NotificationType.TASK_DUE_SOON: (
                NotificationChannel.IN_APP,
                NotificationChannel.EMAIL,
            ),
        }
    )
)


def default_channels(notification_type: NotificationType) -> list[NotificationChannel]:
    return list(DEFAULT_PREFERENCES[notification_type])
