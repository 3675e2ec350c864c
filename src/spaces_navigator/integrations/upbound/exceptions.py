"""Upbound API exceptions."""

from __future__ import annotations


class UpboundError(Exception):
    """Base exception for Upbound errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message.
            details: Additional details.
        """
        super().__init__(message)
        self.message = message
        self.details = details


class UpboundConnectionError(UpboundError):
    """Raised when connection to the Upbound API fails."""


class UpboundAuthError(UpboundError):
    """Raised when the session is missing, expired or rejected."""


class UpboundAPIError(UpboundError):
    """Raised when the Upbound API returns an error."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class UpboundProfileError(UpboundError):
    """Raised when the up CLI profile configuration is missing or invalid."""
