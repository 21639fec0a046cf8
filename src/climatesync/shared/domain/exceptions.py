"""
Domain exceptions for climatesync.

All application errors inherit from ClimateSyncError. Transport failures carry
enough detail (name, status code, response body) to be logged in full at the
operation boundary.
"""

from typing import Any, Optional


class ClimateSyncError(Exception):
    """Base class for all climatesync exceptions."""

    def __init__(self, message: str, context: dict = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigurationError(ClimateSyncError):
    """Raised when configuration is missing or invalid."""

    pass


class TransportError(ClimateSyncError):
    """
    A request to the work-tracking service failed.

    Covers network failures, non-2xx responses and bodies that cannot be
    decoded. `name` is the failure kind (e.g. "HTTPStatusError",
    "ConnectError", "SerializationError").
    """

    def __init__(
        self,
        message: str,
        name: str = "TransportError",
        status_code: Optional[int] = None,
        response_body: Any = None,
        context: dict = None,
    ):
        super().__init__(message, context)
        self.name = name
        self.status_code = status_code
        self.response_body = response_body

    def __str__(self) -> str:
        return f"{self.name}: {self.message}"


class FieldNotFoundError(TransportError):
    """The requested work item field does not exist in any scope."""

    def __init__(self, field_name: str, response_body: Any = None):
        super().__init__(
            f"Field not found: {field_name}",
            name="FieldNotFound",
            status_code=404,
            response_body=response_body,
            context={"field_name": field_name},
        )
        self.field_name = field_name
