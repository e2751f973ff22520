"""
Structured logging configuration using structlog.

Events are rendered as JSON lines (or as console output in development) with
ISO timestamps and any context bound through ``structlog.contextvars``, such
as the request id set by the API middleware.

Values under keys that may hold the user's text are reduced to their length
before rendering, so cleaned or original text never reaches the log stream.
"""

import logging
from typing import Any, MutableMapping, Optional

import structlog

from .config import settings


USER_TEXT_KEYS = frozenset({
    "text",
    "original_text",
    "cleaned_text",
    "user_prompt",
    "replacement",
})


def redact_user_text(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor replacing user text values with ``<N chars>``."""
    for key in USER_TEXT_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = f"<{len(value)} chars>"
    return event_dict


def setup_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structlog.

    Args:
        log_level: Minimum level name; ``settings.log_level`` by default
        json_logs: Render JSON lines; ``settings.log_json`` by default
    """
    level = (log_level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.log_json

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            redact_user_text,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
