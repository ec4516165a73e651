"""Base service class for business logic."""

from __future__ import annotations

import logging

from notification_service.infra.logging import get_lazy_logger


class BaseService:
    """Base class for service classes.

    Loggers:
        - self.logger: standard logger for INFO/WARNING/ERROR
        - self._lazy: lazy logger for DEBUG (messages passed as lambdas)

    Example:
            class WebhookRegistry(BaseService):
            async def list(self, session, user_id):
                self._lazy.debug(lambda: f"registry.list({user_id})")
    """

    def __init__(self) -> None:
        class_name = self.__class__.__name__
        self.logger = logging.getLogger(class_name)
        self._lazy = get_lazy_logger(class_name)
