"""Middleware configuration for FastAPI application."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from notification_service.core.settings import get_app_settings, get_logging_settings
from notification_service.infra.logging import clear_log_context, set_log_context

if TYPE_CHECKING:
    from fastapi import FastAPI, Request
    from starlette.middleware.base import RequestResponseEndpoint
    from starlette.responses import Response

    from notification_service.core.settings.app import AppSettings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id and bind it into the logging context.

    The id is taken from X-Request-ID when the caller supplies one, otherwise
    a new UUID4 is generated. It is stored in ``request.state.request_id``
    and echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        clear_log_context()
        set_log_context(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            clear_log_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def configure_middleware(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Configure middleware for the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional settings override.
    """
    app_settings = app_settings or get_app_settings()

    cors_origins = app_settings.cors_origins or ["*"]
    logger.info("Configuring CORS", extra={"origins": cors_origins})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials=cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=3600,
    )

    # Added last so it runs first and wraps everything below it
    if get_logging_settings().include_request_id:
        app.add_middleware(RequestIDMiddleware)
