"""Prometheus metrics for notification fan-out and webhook delivery.

Usage:
    from notification_service.features.notifications.metrics import (
        notifications_created_total,
    )

    notifications_created_total.labels(
        notification_type="task_assigned",
        channel="in_app",
    ).inc()
"""

from __future__ import annotations

from prometheus_client import Counter

notifications_created_total = Counter(
    "notifications_created_total",
    "Notification records written, one per (event, channel)",
    labelnames=["notification_type", "channel"],
)

notification_channel_failures_total = Counter(
    "notification_channel_failures_total",
    "Channel side effects that raised during dispatch",
    labelnames=["channel"],
)

webhook_delivery_attempts_total = Counter(
    "webhook_delivery_attempts_total",
    "Individual HTTP attempts made to webhook endpoints",
    labelnames=["outcome"],
)
"""
Labels:
    outcome: success, http_error or transport_error
"""

webhook_deliveries_completed_total = Counter(
    "webhook_deliveries_completed_total",
    "Delivery ledger rows that reached a terminal state",
    labelnames=["status"],
)
"""
Labels:
    status: delivered or failed
"""
