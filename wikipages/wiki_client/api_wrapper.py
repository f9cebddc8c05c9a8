"""API wrapper for the MediaWiki action API.

This module talks to ``api.php`` over a requests session and translates HTTP
and API failures into the typed exception hierarchy. It exposes the three
operations the sync scheduler needs: ``login``, ``edit`` (read-modify-write
through a reviser callback) and ``create``.
"""

import logging
import re
from typing import Any, Callable, Dict, Optional

import requests
from requests.exceptions import (
    ConnectionError as RequestsConnectionError,
    HTTPError,
    Timeout,
)

from .auth import Authenticator
from .errors import (
    APIAccessError,
    APIError,
    APIUnreachableError,
    AuthenticationError,
    MissingTargetError,
)
from .models import Revision
from .retry_logic import DEFAULT_MAX_RETRIES, retry_on_rate_limit

logger = logging.getLogger(__name__)

USER_AGENT_SUFFIX = "(powered by wikipages)"

# Reviser contract: receives the current revision, returns {"summary", "text"}
# to submit a new revision or {} to leave the page untouched.
Reviser = Callable[[Revision], Dict[str, str]]


class APIWrapper:
    """Thin client over the MediaWiki action API with error translation.

    This class:
    1. Handles the login-token / csrf-token flow using the Authenticator
    2. Translates HTTP errors and API error replies to typed exceptions
    3. Integrates retry logic for rate limits and edit conflicts

    Example:
        >>> api = APIWrapper(Authenticator())
        >>> api.login()
        >>> api.edit("Module:Foo", lambda rev: {"summary": "sync", "text": "..."})
    """

    def __init__(
        self,
        authenticator: Authenticator,
        max_retries: int = DEFAULT_MAX_RETRIES,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the API wrapper.

        Args:
            authenticator: Authenticator instance for loading credentials
            max_retries: Retries for rate limits and edit conflicts
            timeout: Per-request timeout in seconds
            session: Optional pre-built requests session (used by tests)
        """
        self._authenticator = authenticator
        self._max_retries = max_retries
        self._timeout = timeout
        self._session = session
        self._csrf_token: Optional[str] = None

    def _get_session(self) -> requests.Session:
        """Get or create the HTTP session carrying the user agent."""
        if self._session is None:
            creds = self._authenticator.get_credentials()
            self._session = requests.Session()
            self._session.headers['User-Agent'] = (
                f"{creds.user_agent or 'Instance'} {USER_AGENT_SUFFIX}"
            )
        return self._session

    def _sanitize_credentials(self, text: str) -> str:
        """Mask passwords and tokens in error text before it is logged.

        Example:
            >>> api._sanitize_credentials("lgpassword=hunter2&lgtoken=abc")
            'lgpassword=***REDACTED***&lgtoken=***REDACTED***'
        """
        if not text:
            return text

        sanitized = re.sub(
            r'://([\w.-]+):([\w.-]+)@',
            r'://***:***@',
            text
        )
        sanitized = re.sub(
            r'((?:lg)?password|(?:lg|csrf|login)?token)(["\']?\s*[:=]\s*["\']?)([^"\'\s&]+)',
            r'\1\2***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        return sanitized

    def _request(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Send one API request and return the decoded reply.

        Args:
            method: "GET" or "POST"
            params: API parameters (format options are added here)

        Returns:
            Decoded JSON reply

        Raises:
            APIUnreachableError: On timeouts and connection failures
            APIAccessError: On HTTP errors, undecodable replies or exhausted retries
            APIError: When the reply carries an ``error`` object
        """
        creds = self._authenticator.get_credentials()
        payload = {
            key: value for key, value in params.items() if value is not None
        }
        payload.update({'format': 'json', 'formatversion': '2'})
        operation = f"{params.get('action')}({params.get('title') or params.get('titles') or ''})"

        def _send() -> Dict[str, Any]:
            session = self._get_session()
            try:
                if method == 'GET':
                    response = session.get(creds.api_url, params=payload, timeout=self._timeout)
                else:
                    response = session.post(creds.api_url, data=payload, timeout=self._timeout)
                response.raise_for_status()
                reply = response.json()
            except (Timeout, RequestsConnectionError) as e:
                raise APIUnreachableError(endpoint=creds.api_url) from e
            except HTTPError as e:
                if e.response is not None and e.response.status_code == 429:
                    raise
                logger.error(
                    f"API operation failed: {operation} - "
                    f"{self._sanitize_credentials(str(e))}"
                )
                raise APIAccessError(f"Wiki API failure during {operation}") from e
            except ValueError as e:
                raise APIAccessError(
                    f"Wiki API returned an undecodable reply during {operation}"
                ) from e

            error = reply.get('error') if isinstance(reply, dict) else None
            if error:
                raise APIError(
                    code=str(error.get('code', 'unknown')),
                    info=str(error.get('info', '')),
                    title=params.get('title'),
                )
            return reply

        return retry_on_rate_limit(_send, max_retries=self._max_retries)

    def login(self) -> None:
        """Log in with the configured account using the login-token flow.

        Raises:
            InvalidCredentialsError: If credentials are missing
            AuthenticationError: If the wiki rejects the login
        """
        creds = self._authenticator.get_credentials()
        token_reply = self._request('GET', {
            'action': 'query',
            'meta': 'tokens',
            'type': 'login',
        })
        login_token = token_reply.get('query', {}).get('tokens', {}).get('logintoken')
        if not login_token:
            raise AuthenticationError(creds.username, creds.api_url, "no login token issued")

        try:
            reply = self._request('POST', {
                'action': 'login',
                'lgname': creds.username,
                'lgpassword': creds.password,
                'lgtoken': login_token,
            })
        except APIError as e:
            raise AuthenticationError(creds.username, creds.api_url, e.info or e.code) from e

        result = reply.get('login', {})
        if result.get('result') != 'Success':
            raise AuthenticationError(
                creds.username,
                creds.api_url,
                str(result.get('reason') or result.get('result') or 'unknown'),
            )

        self._csrf_token = None
        logger.info(f"Logged in to {creds.api_url} as {creds.username}")

    def _get_csrf_token(self) -> str:
        """Fetch (once) the csrf token required for edits."""
        if self._csrf_token is None:
            reply = self._request('GET', {
                'action': 'query',
                'meta': 'tokens',
                'type': 'csrf',
            })
            token = reply.get('query', {}).get('tokens', {}).get('csrftoken')
            if not token:
                raise APIAccessError("Wiki API did not issue an edit token")
            self._csrf_token = token
        return self._csrf_token

    def read_revision(self, title: str) -> Revision:
        """Fetch the latest revision of a page.

        Raises:
            MissingTargetError: If the page does not exist
            APIError: If the title is invalid
        """
        reply = self._request('GET', {
            'action': 'query',
            'prop': 'revisions',
            'titles': title,
            'rvprop': 'content|timestamp|ids',
            'rvslots': 'main',
        })
        pages = reply.get('query', {}).get('pages', [])
        if not pages:
            raise MissingTargetError(title)

        page = pages[0]
        if page.get('invalid'):
            raise APIError('invalidtitle', str(page.get('invalidreason', '')), title)
        if page.get('missing') or not page.get('revisions'):
            raise MissingTargetError(title)

        revision = page['revisions'][0]
        return Revision(
            title=page.get('title', title),
            content=revision.get('slots', {}).get('main', {}).get('content', ''),
            timestamp=revision.get('timestamp'),
            revid=revision.get('revid'),
        )

    def edit(self, title: str, reviser: Reviser) -> Revision:
        """Edit an existing page through a reviser callback.

        The current revision is read and passed to ``reviser``. An empty
        result leaves the page untouched. Edit conflicts and stale tokens
        re-read the page and retry up to ``max_retries`` times.

        Args:
            title: Page title
            reviser: Callback mapping the current revision to the change

        Returns:
            The revision now current on the wiki

        Raises:
            MissingTargetError: If the page does not exist
            APIError: For any other API error reply
        """
        for attempt in range(self._max_retries + 1):
            current = self.read_revision(title)
            change = reviser(current)
            if not change:
                logger.debug(f"No change submitted for {title}")
                return current

            try:
                reply = self._request('POST', {
                    'action': 'edit',
                    'title': title,
                    'text': change['text'],
                    'summary': change.get('summary', ''),
                    'basetimestamp': current.timestamp,
                    'nocreate': '1',
                    'token': self._get_csrf_token(),
                })
            except APIError as e:
                if e.code == MissingTargetError.CODE:
                    raise MissingTargetError(title) from e
                if e.code in ('editconflict', 'badtoken') and attempt < self._max_retries:
                    logger.info(f"Retrying edit of {title} after '{e.code}'")
                    self._csrf_token = None
                    continue
                raise

            return self._revision_from_reply(title, change['text'], reply)

        raise APIAccessError(f"Edit of {title} kept conflicting (after {self._max_retries} retries)")

    def create(self, title: str, text: str, summary: str) -> Revision:
        """Create a page that does not exist yet.

        Raises:
            APIError: If the page already exists or the API rejects the edit
        """
        reply = self._request('POST', {
            'action': 'edit',
            'title': title,
            'text': text,
            'summary': summary,
            'createonly': '1',
            'token': self._get_csrf_token(),
        })
        return self._revision_from_reply(title, text, reply)

    @staticmethod
    def _revision_from_reply(title: str, text: str, reply: Dict[str, Any]) -> Revision:
        """Build a Revision from an action=edit reply."""
        result = reply.get('edit', {})
        if result.get('result') != 'Success':
            raise APIError(
                code=str(result.get('code') or 'editfailed'),
                info=str(result.get('info') or result.get('result') or ''),
                title=title,
            )
        return Revision(
            title=result.get('title', title),
            content=text,
            timestamp=result.get('newtimestamp'),
            revid=result.get('newrevid'),
        )
