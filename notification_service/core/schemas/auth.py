"""Identity of the end user making a request.

Authentication happens upstream at the gateway, which forwards the
verified identity in request headers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """End user resolved from gateway-forwarded headers."""

    user_id: str = Field(min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    role: str | None = Field(default=None, max_length=64)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)
