"""Custom exception hierarchy for Gmail MCP Manager.

This module defines a structured exception hierarchy for the error
conditions that may occur during Gmail MCP Manager operations. Each error
carries a stable ``code`` so library callers and the CLI can branch on the
category without parsing messages.
"""

from __future__ import annotations


class GmailManagerError(Exception):
    """Base exception for all Gmail MCP Manager errors.

    Attributes:
        message: Human-readable error description.
        code: Stable error category code (e.g. "AUTHENTICATION_ERROR").
        status_code: HTTP-style status code, if applicable.
        details: Optional dictionary containing additional error context.
    """

    default_code = "GMAIL_MANAGER_ERROR"
    default_status_code: int | None = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            code: Error category code. Defaults to the class default.
            status_code: HTTP-style status code. Defaults to the class default.
            details: Optional dictionary containing additional error context.
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.status_code = (
            status_code if status_code is not None else self.default_status_code
        )
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class AuthenticationError(GmailManagerError):
    """Exception raised for OAuth and credential-related errors.

    Examples:
        - Missing client id or client secret
        - User denied OAuth consent
        - No authorization code in the callback
        - Interactive flow timed out
        - Code exchange or token refresh failed
    """

    default_code = "AUTHENTICATION_ERROR"
    default_status_code = 401


class TokenError(AuthenticationError):
    """Exception raised when the token file cannot be written or removed."""

    default_code = "TOKEN_ERROR"


class APIError(GmailManagerError):
    """Exception raised for errors from Gmail API calls.

    Attributes:
        status_code: HTTP status code from the API response (500 when the
            failure did not carry one).
    """

    default_code = "API_ERROR"
    default_status_code = 500

    @classmethod
    def from_exception(cls, message: str, exc: Exception) -> APIError:
        """Wrap a client library exception, keeping its HTTP status if any.

        ``googleapiclient.errors.HttpError`` exposes the response as
        ``resp`` with an integer ``status``; anything else maps to 500.
        """
        status = getattr(getattr(exc, "resp", None), "status", None)
        try:
            status_code = int(status) if status is not None else None
        except (TypeError, ValueError):
            status_code = None
        return cls(
            f"{message}: {exc}",
            status_code=status_code,
            details={"error_type": type(exc).__name__},
        )


class ValidationError(GmailManagerError):
    """Exception raised for input validation errors.

    Attributes:
        field: The name of the field that failed validation, if applicable.
    """

    default_code = "VALIDATION_ERROR"
    default_status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.field = field


__all__ = [
    "GmailManagerError",
    "AuthenticationError",
    "TokenError",
    "APIError",
    "ValidationError",
]
