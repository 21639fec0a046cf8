"""Centralized async operation boundary: correlate, log, swallow or propagate."""

import functools
import inspect
from collections.abc import Callable
from typing import Any

import structlog

from climatesync.shared.infrastructure.correlation import operation_context

logger = structlog.get_logger(__name__)


def _describe_error(error: Exception) -> dict[str, Any]:
    details: dict[str, Any] = {
        "error": str(error),
        "error_type": getattr(error, "name", type(error).__name__),
    }
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        details["status_code"] = status_code
    response_body = getattr(error, "response_body", None)
    if response_body is not None:
        details["response_body"] = response_body
    return details


def operation_boundary(
    operation: str | None = None,
    fallback_value: Any = None,
    log_level: str = "error",
    context_keys: list[str] | None = None,
    reraise: bool = False,
):
    """
    Run an async method inside a correlated try/log/swallow boundary.

    Each call gets a fresh correlation id. A debug line is logged before the
    call and after it succeeds; on failure the error kind, message and (for
    transport errors) the status code and response body are logged.

    Args:
        operation: Operation name for logs (defaults to the function name)
        fallback_value: Returned on failure when not re-raising. Can be a
            callable producing the value.
        log_level: structlog level used for the failure line
        context_keys: Argument names whose values are added to the context
        reraise: Propagate the error after logging it instead of swallowing

    Example:
        ```python
        @operation_boundary("update", context_keys=["work_item_id"])
        async def update(self, work_item_id, *ops):
            ...
        ```
    """

    def decorator(fn: Callable) -> Callable:
        name = operation or fn.__name__
        signature = inspect.signature(fn)

        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            log_ctx: dict[str, Any] = {}
            if context_keys:
                bound = signature.bind_partial(*args, **kwargs)
                for key in context_keys:
                    if key in bound.arguments:
                        log_ctx[key] = bound.arguments[key]

            with operation_context(name, **log_ctx):
                logger.debug("operation_started")
                try:
                    result = await fn(*args, **kwargs)
                except Exception as e:
                    log_method = getattr(logger, log_level, logger.error)
                    log_method("operation_failed", **_describe_error(e))
                    if reraise:
                        raise
                    return fallback_value() if callable(fallback_value) else fallback_value

                logger.debug("operation_succeeded")
                return result

        return wrapper

    return decorator
