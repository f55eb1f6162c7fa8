"""Exceptions raised by the Sharesies client."""

from __future__ import annotations


class SharesiesError(Exception):
    """Base exception for Sharesies client errors."""

    pass


class ConfigurationError(SharesiesError):
    """Raised when the client or its configuration is misconstructed."""

    pass


class AuthenticationError(SharesiesError):
    """Raised when the server rejects a login or re-authentication."""

    pass


class NotAuthenticatedError(AuthenticationError):
    """Raised when a privileged call is made before a session exists."""

    pass


class RequestFailedError(SharesiesError):
    """Raised when the server answers with a status other than 200."""

    def __init__(self, status_code: int, method: str = "", url: str = ""):
        self.status_code = status_code
        self.method = method
        self.url = url
        super().__init__(f"Request to sharesies failed: {method} {url} -> {status_code}")


class DecodeError(SharesiesError):
    """Raised when a response body is not valid JSON or has an unexpected shape."""

    pass
