"""Typed exception hierarchy for wiki client errors.

This module defines the root SyncError used across the package and the
exceptions raised while talking to the MediaWiki action API. Remote error
replies keep their MediaWiki error ``code`` so callers can branch on it.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all wikipages errors.

    Use this to catch any application-level error from the sync tool.
    """
    pass


class WikiClientError(SyncError):
    """Base exception for all wiki client errors."""
    pass


class InvalidCredentialsError(WikiClientError):
    """Raised when required credentials are missing."""

    def __init__(self, missing: list, endpoint: str = "unknown"):
        super().__init__(
            f"Missing credentials ({', '.join(missing)}) for endpoint {endpoint}"
        )
        self.missing = missing
        self.endpoint = endpoint


class AuthenticationError(WikiClientError):
    """Raised when the wiki rejects the login."""

    def __init__(self, user: str, endpoint: str, reason: Optional[str] = None):
        message = f"Login failed (user: {user}, endpoint: {endpoint})"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.user = user
        self.endpoint = endpoint
        self.reason = reason


class APIError(WikiClientError):
    """Raised when the API answers with an error object."""

    def __init__(self, code: str, info: str = "", title: Optional[str] = None):
        message = f"API error '{code}'"
        if title:
            message += f" for page '{title}'"
        if info:
            message += f": {info}"
        super().__init__(message)
        self.code = code
        self.info = info
        self.title = title


class MissingTargetError(APIError):
    """Raised by edit when the page does not exist yet."""

    CODE = "missingtitle"

    def __init__(self, title: str):
        super().__init__(self.CODE, "The page you specified doesn't exist.", title)


class APIUnreachableError(WikiClientError):
    """Raised when the wiki API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(WikiClientError):
    """Raised when API access fails after retries."""

    def __init__(self, message: str = "Wiki API failure (after 3 retries)"):
        super().__init__(message)
