"""
Common exception classes for the Graph HTTP service layer.

Transport failures (connection, DNS, TLS, timeouts) are surfaced to callers
as :class:`TransportError`. HTTP error statuses are not exceptions; they are
returned inside the response envelope like any other status code.
"""

from __future__ import annotations


class GraphHTTPError(Exception):
    """Base exception class for all Graph HTTP errors."""

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        **kwargs,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        for key, value in (kwargs or {}).items():
            setattr(self, key, value)

    def to_dict(self) -> dict:
        error_dict = {
            "message": self.message,
            "type": self.__class__.__name__,
            "details": self.details,
        }

        for attr_name in vars(self):
            if not attr_name.startswith("_") and attr_name not in [
                "message",
                "details",
            ]:
                error_dict[attr_name] = getattr(self, attr_name)

        return {"error": error_dict}


class TransportError(GraphHTTPError):
    """Raised when the underlying HTTP transport fails to complete a call."""

    def __init__(
        self,
        message: str = "Transport operation failed",
        backend_name: str | None = None,
        url: str | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, **kwargs)
        self.backend_name = backend_name
        self.url = url


class ConfigurationError(GraphHTTPError):
    """Raised when there's a configuration issue."""

    def __init__(
        self,
        message: str = "Configuration error",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, **kwargs)
