"""Pydantic schemas for the email feature."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class SentEmailRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    to_email: str
    subject: str
    body: str
    created_at: datetime
