"""MediaWiki client for wikipages.

This package wraps the MediaWiki action API (login, edit, create) and defines
the error hierarchy shared by the rest of the package.
"""

from .api_wrapper import APIWrapper
from .auth import Authenticator, Credentials
from .errors import (
    SyncError,
    WikiClientError,
    InvalidCredentialsError,
    AuthenticationError,
    APIError,
    MissingTargetError,
    APIUnreachableError,
    APIAccessError,
)
from .models import Revision

__all__ = [
    "APIWrapper",
    "Authenticator",
    "Credentials",
    "Revision",
    "SyncError",
    "WikiClientError",
    "InvalidCredentialsError",
    "AuthenticationError",
    "APIError",
    "MissingTargetError",
    "APIUnreachableError",
    "APIAccessError",
]
