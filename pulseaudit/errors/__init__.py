"""Custom exceptions."""

from pulseaudit.errors.exceptions import (
    APIError,
    AuditError,
    ClientRequestError,
    ConnectivityError,
    FetchError,
    RateLimitError,
    SchemaError,
    ValidationError,
)

__all__ = [
    "AuditError",
    "APIError",
    "FetchError",
    "RateLimitError",
    "ConnectivityError",
    "ClientRequestError",
    "SchemaError",
    "ValidationError",
]
