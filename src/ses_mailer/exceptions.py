"""
Error types raised by the SES mailer.

Every failed send surfaces as exactly one of these. Nothing is retried and
nothing is swallowed: the caller always sees the failure.
"""

from typing import Optional


class SESMailerError(Exception):
    """Base class for all errors raised by this package."""
    pass


class ConfigurationError(SESMailerError, ValueError):
    """Raised when environment configuration is invalid."""
    pass


class ValidationError(SESMailerError, ValueError):
    """
    Raised before any network I/O when an email request is incomplete.

    Attributes:
        description: Human-readable rule that failed (e.g. "Subject is required")
    """

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description


class ServiceError(SESMailerError):
    """
    Raised when SES answered with a status code outside [200, 400).

    Attributes:
        status_code: HTTP status code returned by SES
        body: Raw response body (usually an XML ErrorResponse document)
    """

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Request error with statusCode: {status_code}")
        self.status_code = status_code
        self.body = body


class TransportError(SESMailerError):
    """
    Raised when no HTTP response was received (DNS, connect, timeout, stream).

    Attributes:
        cause: The underlying exception from the HTTP stack
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
