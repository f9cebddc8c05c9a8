"""Authentication module for loading wiki credentials.

This module handles loading MediaWiki bot credentials from environment
variables using python-dotenv. Non-secret values (API URL, username, user
agent) may fall back to the project file; the password only comes from the
environment.
"""

import os
from typing import Mapping, NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """MediaWiki API credentials."""
    api_url: str
    username: str
    password: str
    user_agent: Optional[str] = None


class Authenticator:
    """Loads and validates wiki credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    cached or logged.

    Environment variables:
        WIKIPAGES_API_URL: api.php endpoint (e.g., https://en.wikipedia.org/w/api.php)
        WIKIPAGES_USERNAME: Account or bot-password username (e.g., MyBot@sync)
        WIKIPAGES_PASSWORD: Account or bot password
        WIKIPAGES_USER_AGENT: Optional user agent prefix

    Example:
        >>> auth = Authenticator({"api_url": "https://wiki.example.org/api.php"})
        >>> creds = auth.get_credentials()
    """

    ENV_API_URL = 'WIKIPAGES_API_URL'
    ENV_USERNAME = 'WIKIPAGES_USERNAME'
    ENV_PASSWORD = 'WIKIPAGES_PASSWORD'
    ENV_USER_AGENT = 'WIKIPAGES_USER_AGENT'

    def __init__(self, defaults: Optional[Mapping[str, str]] = None):
        """Load environment variables from .env file.

        Args:
            defaults: Fallback values keyed by ``api_url``, ``username``,
                      ``password`` and ``user_agent``
        """
        load_dotenv()
        self._defaults = dict(defaults or {})

    def get_credentials(self) -> Credentials:
        """Get credentials from the environment, then from defaults.

        Returns:
            Credentials: A named tuple with api_url, username, password, user_agent

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        api_url = os.getenv(self.ENV_API_URL) or self._defaults.get('api_url')
        username = os.getenv(self.ENV_USERNAME) or self._defaults.get('username')
        password = os.getenv(self.ENV_PASSWORD) or self._defaults.get('password')
        user_agent = os.getenv(self.ENV_USER_AGENT) or self._defaults.get('user_agent')

        missing = []
        if not api_url:
            missing.append(self.ENV_API_URL)
        if not username:
            missing.append(self.ENV_USERNAME)
        if not password:
            missing.append(self.ENV_PASSWORD)

        if missing:
            raise InvalidCredentialsError(
                missing=missing,
                endpoint=api_url if api_url else "unknown"
            )

        return Credentials(
            api_url=api_url,  # type: ignore[arg-type]
            username=username,  # type: ignore[arg-type]
            password=password,  # type: ignore[arg-type]
            user_agent=user_agent,
        )
