"""FastAPI application factory."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from notification_service.app.exception_handlers import configure_exception_handlers
from notification_service.app.lifespan import lifespan
from notification_service.app.middleware import configure_middleware
from notification_service.app.router import setup_routers
from notification_service.core.settings import get_app_settings


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        docs_url=app_settings.get_docs_url(),
        redoc_url=None,
        openapi_url=app_settings.get_openapi_url(),
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    configure_exception_handlers(app)
    configure_middleware(app, app_settings)
    setup_routers(app, app_settings)

    return app


# Application instance for uvicorn
app = create_app()


def run() -> None:
    """Console entry point: serve ``app`` with uvicorn."""
    settings = get_app_settings()
    uvicorn.run(
        "notification_service.app.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
