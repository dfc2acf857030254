"""Exceptions raised by the console API client"""
from typing import Optional


class ConsoleError(Exception):
    """Base class for every error raised by :mod:`cafeconsole`."""


class APIError(ConsoleError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail or ""
        super().__init__(f"API error {status_code}: {self.detail}" if self.detail else f"API error {status_code}")


class AuthenticationError(APIError):
    """401 or 403: the credential was rejected by the server.

    This is the only failure that may destroy a local session.
    """


class NetworkError(ConsoleError):
    """The request never produced a response (DNS, connection, timeout)."""
