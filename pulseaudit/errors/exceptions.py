"""Custom exception classes for the PageSpeed audit pipeline."""

from __future__ import annotations

from typing import Any


class AuditError(Exception):
    """Base exception for audit failures."""

    pass


class APIError(AuditError):
    """Exception for external API failures (Gemini, PSI)."""

    pass


class FetchError(APIError):
    """Raised when the PSI API could not be reached after all retry attempts."""

    pass


class RateLimitError(FetchError):
    """Raised when the PSI API keeps answering 429 after all retry attempts."""

    def __init__(self, message: str, response: Any | None = None) -> None:
        super().__init__(message)
        self.response = response


class ConnectivityError(FetchError):
    """Raised when the PSI host cannot be reached at all."""

    pass


class ClientRequestError(APIError):
    """Raised for 400/403 responses. These are never retried."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class SchemaError(AuditError):
    """Raised when the PSI document lacks the top-level Lighthouse result."""

    pass


class ValidationError(AuditError):
    """Exception for input validation failures."""

    pass
