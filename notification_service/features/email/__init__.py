"""Stub email channel."""

from __future__ import annotations

from .models import SentEmail
from .sink import EmailSink

__all__ = ["EmailSink", "SentEmail"]
