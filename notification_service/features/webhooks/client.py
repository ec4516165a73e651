"""HTTP client for webhook delivery.

One call to ``deliver`` is one HTTP attempt. Retries, backoff and the
delivery ledger live in ``delivery.py``.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass

import httpx

from notification_service.infra.logging import get_lazy_logger

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


def sign_payload(body: str, secret: str) -> str:
    """Hex-encoded HMAC-SHA256 of ``body`` keyed with ``secret``.

    This is the value of the signature header, computed over the exact
    request body. Receivers verify it the same way.
    """
    return hmac.new(
        secret.encode("utf-8"),
        body.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


@dataclass(slots=True, frozen=True)
class WebhookDeliveryResult:
    """Result of a single webhook HTTP attempt."""

    success: bool
    status_code: int | None
    response_time_ms: int
    error_message: str | None

    @property
    def transport_error(self) -> bool:
        """True when no HTTP response was received at all."""
        return self.status_code is None


class WebhookClient:
    """Sends signed webhook requests over a shared ``httpx.AsyncClient``.

    Handles:
    - signature and event headers
    - per-attempt timeout
    - turning timeouts and connection errors into a failed result
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        timeout_seconds: float = 10.0,
        signature_header: str = "X-Nexus-Signature",
        user_agent: str = "notification-service-webhooks/1.0",
    ) -> None:
        self._http = http
        self.timeout_seconds = timeout_seconds
        self.signature_header = signature_header
        self.user_agent = user_agent

    async def deliver(
        self,
        url: str,
        body: str,
        *,
        signature: str,
        event_type: str,
        delivery_id: str,
    ) -> WebhookDeliveryResult:
        """POST ``body`` to ``url``. Never raises for HTTP or transport failures.

        Any 2xx is success. Redirects are not followed and, like every other
        non-2xx status, count as a failed attempt.
        """
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
            self.signature_header: signature,
            "X-Webhook-Event-Type": event_type,
            "X-Webhook-Delivery-ID": delivery_id,
        }
        start_time = time.perf_counter()

        def elapsed_ms() -> int:
            return int((time.perf_counter() - start_time) * 1000)

        lazy_logger.debug(
            lambda: f"client.deliver: delivery_id={delivery_id}, event_type={event_type}, url={url}"
        )

        try:
            response = await self._http.post(
                url,
                content=body.encode("utf-8"),
                headers=headers,
                timeout=self.timeout_seconds,
                follow_redirects=False,
            )
        except httpx.TimeoutException:
            logger.warning(
                "Webhook delivery timeout",
                extra={
                    "delivery_id": delivery_id,
                    "event_type": event_type,
                    "timeout_seconds": self.timeout_seconds,
                    "operation": "client.deliver",
                },
            )
            return WebhookDeliveryResult(
                success=False,
                status_code=None,
                response_time_ms=elapsed_ms(),
                error_message=f"Request timeout after {self.timeout_seconds}s",
            )
        except httpx.RequestError as e:
            logger.warning(
                "Webhook delivery request error",
                extra={
                    "delivery_id": delivery_id,
                    "event_type": event_type,
                    "error": str(e),
                    "operation": "client.deliver",
                },
            )
            return WebhookDeliveryResult(
                success=False,
                status_code=None,
                response_time_ms=elapsed_ms(),
                error_message=f"Request error: {e}",
            )
        except Exception as e:
            logger.exception(
                "Webhook delivery unexpected error",
                extra={
                    "delivery_id": delivery_id,
                    "event_type": event_type,
                    "operation": "client.deliver",
                },
            )
            return WebhookDeliveryResult(
                success=False,
                status_code=None,
                response_time_ms=elapsed_ms(),
                error_message=f"Unexpected error: {e}",
            )

        success = response.is_success
        if success:
            logger.info(
                "Webhook delivered successfully",
                extra={
                    "delivery_id": delivery_id,
                    "event_type": event_type,
                    "status_code": response.status_code,
                    "response_time_ms": elapsed_ms(),
                    "operation": "client.deliver",
                },
            )
        else:
            logger.warning(
                "Webhook delivery failed with non-2xx status",
                extra={
                    "delivery_id": delivery_id,
                    "event_type": event_type,
                    "status_code": response.status_code,
                    "operation": "client.deliver",
                },
            )

        return WebhookDeliveryResult(
            success=success,
            status_code=response.status_code,
            response_time_ms=elapsed_ms(),
            error_message=None if success else f"HTTP {response.status_code}",
        )


__all__ = ["WebhookClient", "WebhookDeliveryResult", "sign_payload"]
