"""RFC 7807 Problem Details schemas for error responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    See: https://datatracker.ietf.org/doc/html/rfc7807
    """

    type: str = Field(default="about:blank", description="Problem type identifier")
    title: str = Field(description="Short, human-readable summary of the problem")
    status: int = Field(ge=100, le=599, description="HTTP status code")
    detail: str | None = Field(
        default=None, description="Human-readable explanation specific to this occurrence",
    )
    instance: str | None = Field(
        default=None, description="URI reference identifying the specific occurrence",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "webhook-not-found",
                "title": "Not Found",
                "status": 404,
                "detail": "Webhook not found",
                "instance": "/api/v1/webhooks/7d3c...",
            }
        }
    )


class FieldError(BaseModel):
    """One field-level validation failure."""

    field: str = Field(description="Dotted location of the invalid field")
    message: str
    type: str
    value: Any | None = None


class ValidationProblemDetail(ProblemDetail):
    """Problem Details carrying field-level validation errors."""

    errors: list[FieldError] = Field(default_factory=list)
