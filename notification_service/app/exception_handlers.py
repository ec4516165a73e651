"""Global exception handlers for FastAPI application.

Every error leaves the service as an RFC 7807 Problem Details body.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notification_service.core.database.exceptions import NotFoundError
from notification_service.core.exceptions import AppException
from notification_service.core.schemas.problem_details import (
    FieldError,
    ProblemDetail,
    ValidationProblemDetail,
)

logger = logging.getLogger(__name__)


def _get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _problem_response(
    request: Request,
    problem: ProblemDetail,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    content = problem.model_dump(exclude_none=True)
    if extra:
        content.update(extra)

    request_id = _get_request_id(request)
    if request_id:
        content["request_id"] = request_id

    return JSONResponse(
        status_code=problem.status,
        content=jsonable_encoder(content),
        media_type="application/problem+json",
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert an AppException into a Problem Details response.

    Args:
        request: The FastAPI request object.
        exc: The application exception that was raised.

    Returns:
        JSONResponse with RFC 7807 Problem Details format.
    """
    logger.warning(
        "Application exception occurred",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "method": request.method,
            "exception_type": exc.type,
            "status_code": exc.status_code,
            "detail": exc.detail,
        },
    )

    problem = ProblemDetail(
        type=exc.type,
        title=exc.title,
        status=exc.status_code,
        detail=exc.detail,
        instance=exc.instance or request.url.path,
    )
    return _problem_response(request, problem, exc.extra)


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Repository lookups that escaped a service become a plain 404."""
    logger.info(
        "Entity not found",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "model": exc.model_name,
        },
    )

    problem = ProblemDetail(
        type="not-found",
        title="Not Found",
        status=status.HTTP_404_NOT_FOUND,
        detail=f"{exc.model_name} not found",
        instance=request.url.path,
    )
    return _problem_response(request, problem)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors with a field-level ``errors`` list.

    Args:
        request: The FastAPI request object.
        exc: The validation error that was raised.

    Returns:
        JSONResponse with RFC 7807 Problem Details format.
    """
    errors = [
        FieldError(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            type=error["type"],
            value=error.get("input"),
        )
        for error in exc.errors()
    ]

    logger.warning(
        "Request validation failed",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "method": request.method,
            "error_count": len(errors),
            "fields": [error.field for error in errors],
        },
    )

    problem = ValidationProblemDetail(
        type="validation-error",
        title="Validation Error",
        status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"Request validation failed for {len(errors)} field(s)",
        instance=request.url.path,
        errors=errors,
    )
    return _problem_response(request, problem)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected exceptions.

    Logs the full traceback and returns a generic 500 that exposes no
    internal details.
    """
    logger.error(
        "Unexpected exception occurred",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
        exc_info=exc,
    )

    problem = ProblemDetail(
        type="internal-error",
        title="Internal Server Error",
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred while processing your request",
        instance=request.url.path,
    )
    return _problem_response(request, problem)


def configure_exception_handlers(app: FastAPI) -> None:
    """Register the Problem Details handlers.

    Example:
            app = FastAPI()
        configure_exception_handlers(app)
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
