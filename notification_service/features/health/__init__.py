"""Health check feature.

    >>> from notification_service.features.health import router
"""

from __future__ import annotations

from .router import router

__all__ = ["router"]
