"""
Structured logging configuration using structlog.

Provides consistent, structured logging across all modules. Log lines carry
whatever is bound in structlog's contextvars, which is how correlation ids
reach transport-level log lines.
"""

import logging
import re
import sys
from typing import Any

import structlog

from climatesync.shared.infrastructure.config import settings

_REDACTION_PATTERNS = {
    r"Bearer\s+\S+": "Bearer [TOKEN_REDACTED]",
    r"(api[_-]?key|token|password|secret)['\"]?\s*[:=]\s*['\"]?([^'\"\s]+)": r"\1=[REDACTED]",
    r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b": "[EMAIL_REDACTED]",
}


def _redact_string(text: str) -> str:
    for pattern, replacement in _REDACTION_PATTERNS.items():
        text = re.sub(pattern, replacement, text, flags=re.IGNORECASE)
    return text


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        return _redact_string(value)
    if isinstance(value, dict):
        return {k: _redact(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def privacy_redactor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Redact credentials from log events.

    Redacts bearer tokens, key/token/password assignments and email
    addresses, recursively through nested dicts and lists (response bodies
    are logged as structures).
    """
    if not getattr(settings, "log_redaction_enabled", True):
        return event_dict

    return {k: _redact(v) for k, v in event_dict.items()}


def _renderer(stream: Any) -> Any:
    if settings.is_development:
        return structlog.dev.ConsoleRenderer(colors=getattr(stream, "isatty", lambda: False)())
    # Automation logs are machine-read
    return structlog.processors.JSONRenderer()


def configure_logging(stream: Any = sys.stderr) -> None:
    """
    Configure structlog over stdlib logging, writing to `stream`.

    Events carry the bound operation context, level, logger name and an ISO
    timestamp, and pass through the privacy redactor before rendering.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            privacy_redactor,
            _renderer(stream),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        force=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("work_item_created", work_item_id=42)
    """
    return structlog.get_logger(name)
