"""Exception hierarchy for the admin client.

Provides specific exception types for the different failure modes so callers
can tell configuration mistakes, transport failures, and server-side
rejections apart.
"""

from __future__ import annotations


def build_error_message(status: int, body: str | None) -> str:
    """Format a failed HTTP exchange as ``HTTP <status>[: <body>]``."""
    if body is None or not body.strip():
        return f"HTTP {status}"
    return f"HTTP {status}: {body}"


class AdminClientError(Exception):
    """Base exception for all admin client errors."""

    pass


class ConfigurationError(AdminClientError):
    """Raised when required identity or credential settings are missing."""

    pass


class DeclarationError(AdminClientError):
    """Raised when a resource contract is malformed or invoked incorrectly.

    Covers both schema problems detected when a route table is built and
    invocations that violate it, such as a missing path parameter.
    """

    pass


class TransportError(AdminClientError):
    """Raised when an HTTP exchange fails below the HTTP layer."""

    pass


class DecodeError(AdminClientError):
    """Raised when a response body does not match the declared shape."""

    pass


class HttpStatusError(AdminClientError):
    """Raised when a resource call answers with a status of 400 or above."""

    def __init__(self, status: int, body: str | None = None):
        super().__init__(build_error_message(status, body))
        self.status = status
        self.body = body


class BadRequestError(HttpStatusError):
    """Raised for a ``400 Bad Request`` answer."""

    pass


class AuthExchangeError(AdminClientError):
    """Raised when the token or logout endpoint rejects an exchange."""

    def __init__(self, status: int, body: str | None = None):
        super().__init__(build_error_message(status, body))
        self.status = status
        self.body = body
