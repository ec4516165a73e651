"""Closed vocabularies shared across features."""

from __future__ import annotations

from enum import StrEnum


class NotificationType(StrEnum):
    """Domain events that can produce a notification."""

    TASK_ASSIGNED = "task_assigned"
    TASK_STATUS_CHANGED = "task_status_changed"
    COMMENT_ADDED = "comment_added"
    PROJECT_INVITED = "project_invited"
    TASK_DUE_SOON = "task_due_soon"


class NotificationChannel(StrEnum):
    """Delivery medium for a notification."""

    IN_APP = "in_app"
    EMAIL = "email"
    WEBHOOK = "webhook"


class DeliveryStatus(StrEnum):
    """State of a webhook delivery ledger row.

    ``pending`` is the only non-terminal state.
    """

    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not DeliveryStatus.PENDING
