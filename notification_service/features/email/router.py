"""API router for the stub email log."""

from __future__ import annotations

from fastapi import APIRouter, Query

from notification_service.core.dependencies.auth import ServiceCaller
from notification_service.core.dependencies.database import DBSession  # noqa: TC001
from notification_service.features.email.schemas import SentEmailRead
from notification_service.features.email.sink import EmailSink

router = APIRouter(prefix="/emails", tags=["email"], dependencies=[ServiceCaller])


@router.get(
    "",
    response_model=list[SentEmailRead],
    summary="List recorded emails",
    description="Emails recorded by the stub email channel, newest first. Service callers only.",
)
async def list_sent_emails(
    session: DBSession,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> list[SentEmailRead]:
    emails = await EmailSink(session).list(limit=limit, offset=offset)
    return [SentEmailRead.model_validate(email) for email in emails]
