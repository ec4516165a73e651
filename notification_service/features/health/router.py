"""Health check API endpoint."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter

from notification_service.core.settings import get_app_settings
from notification_service.features.health.schemas import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns 200 while the process is able to serve requests",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        service=get_app_settings().service_name,
        timestamp=datetime.now(UTC),
    )
