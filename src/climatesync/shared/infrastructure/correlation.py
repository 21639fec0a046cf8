"""
Correlation-tagged logging context.

Every logical operation gets a short, unique correlation id. The id and the
operation's key-values live in an explicit OperationContext which is bound
into structlog's contextvars for the duration of the call, so every log line
emitted inside the operation (including transport-level ones) carries it.
Concurrent asyncio tasks each see their own binding.
"""

import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator

import structlog

CORRELATION_ID_LENGTH = 8


def new_correlation_id() -> str:
    """Generate a fresh correlation id. Never pooled or reused."""
    return uuid.uuid4().hex[:CORRELATION_ID_LENGTH]


@dataclass(frozen=True)
class OperationContext:
    """Key-value context of one logical operation."""

    operation: str
    correlation_id: str = field(default_factory=new_correlation_id)
    extra: Dict[str, Any] = field(default_factory=dict)

    def as_log_context(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "correlation_id": self.correlation_id,
            **self.extra,
        }


@contextmanager
def operation_context(operation: str, **extra: Any) -> Iterator[OperationContext]:
    """
    Open a correlation scope for `operation`.

    Example:
        >>> with operation_context("create", work_item_type="Bug") as ctx:
        ...     logger.debug("operation_started")  # tagged with ctx.correlation_id
    """
    ctx = OperationContext(operation=operation, extra=extra)
    with structlog.contextvars.bound_contextvars(**ctx.as_log_context()):
        yield ctx
