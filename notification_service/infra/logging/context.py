"""Context management for structured logging.

Request-scoped fields (request_id, user_id) are stored in a ContextVar and
copied onto every LogRecord by ContextInjectingFilter. Each asyncio task gets
its own copy, so background webhook deliveries keep the context of the request
that started them without leaking it back.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        set_log_context(request_id="abc-123")
        logger.info("Processing request")  # record carries request_id
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Reset the logging context for the current task."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Copy the contextvars log context onto each LogRecord.

    Attached to the root QueueHandler so formatters (JSONFormatter in
    particular) see the fields without any change to call sites. Attributes
    already present on the record are never overwritten.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
