"""Health check response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Liveness response.

    Example:
        ```json
        {
            "status": "healthy",
            "service": "notification-service",
            "timestamp": "2025-01-01T00:00:00Z"
        }
        ```
    """

    status: Literal["healthy"] = Field(default="healthy", description="Health status")
    service: str = Field(min_length=1, max_length=100, description="Service name")
    timestamp: datetime = Field(description="Check timestamp (UTC)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "service": "notification-service",
                "timestamp": "2025-01-01T00:00:00Z",
            }
        },
    )
