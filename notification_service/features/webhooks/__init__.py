"""User-registered webhooks and signed, retried delivery."""

from __future__ import annotations

from .client import WebhookClient, WebhookDeliveryResult, sign_payload
from .delivery import DeliveryOutcome, WebhookDeliveryEngine, get_delivery_engine
from .models import Webhook, WebhookDelivery
from .service import WebhookRegistry

__all__ = [
    "DeliveryOutcome",
    "Webhook",
    "WebhookClient",
    "WebhookDelivery",
    "WebhookDeliveryEngine",
    "WebhookDeliveryResult",
    "WebhookRegistry",
    "get_delivery_engine",
    "sign_payload",
]
