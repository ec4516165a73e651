"""Per-user notification channel preferences."""

from __future__ import annotations

from .defaults import DEFAULT_PREFERENCES
from .models import NotificationPreferences
from .service import PreferenceResolver

__all__ = ["DEFAULT_PREFERENCES", "NotificationPreferences", "PreferenceResolver"]
