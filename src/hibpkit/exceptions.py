"""Custom exceptions for hibpkit.

All exceptions inherit from HIBPError with context fields
for better error tracking and debugging.
"""

from typing import Any


class HIBPError(Exception):
    """Base exception for all hibpkit errors.

    Includes context dict for structured error information.
    """

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    @property
    def status_code(self) -> int | None:
        """HTTP status code attached to this error, if any."""
        return self.context.get("status_code")


class DataValidationError(HIBPError):
    """Raised when caller input is rejected before any request is made."""

    pass


class NotFoundError(HIBPError):
    """Raised when the service reports that a named resource does not exist."""

    pass


class TransportError(HIBPError):
    """Raised on a non-success status code or a connection-level failure."""

    pass


class ParseError(HIBPError):
    """Raised when a response body does not match the expected shape."""

    pass


class ConfigurationError(HIBPError):
    """Raised when configuration is invalid or missing."""

    pass
