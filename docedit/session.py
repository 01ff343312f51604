"""
Session and identity management.

A visitor moves through three states on successive page loads:

    UNAUTHENTICATED --redirect to authorize--> AWAITING_CODE
    AWAITING_CODE   --exchange code, store--> AUTHENTICATED

The credential lives in the site's session storage under ``token``. It is
handed to the rest of the editor as an explicit :class:`SessionContext`
rather than read from storage ambiently, and is dropped as soon as the API
answers 401.
"""

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from enum import Enum

import httpx

from docedit.config import EditorConfig
from docedit.exceptions import AuthenticationError, RequestTimeoutError
from docedit.logging import get_logger, mask_sensitive_data

TOKEN_KEY = "token"
CODE_PARAM = "code"

logger = get_logger("session")


class SessionState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    AWAITING_CODE = "awaiting_code"
    AUTHENTICATED = "authenticated"


@dataclass
class Redirect:
    """Navigate the browser to ``location``."""

    location: str


@dataclass
class SessionContext:
    """An authenticated session: the token and the storage it came from."""

    token: str
    storage: MutableMapping[str, str] = field(repr=False)
    valid: bool = True

    def invalidate(self) -> None:
        """Forget the credential; the next page load re-authorizes."""
        if self.valid:
            logger.info("Session invalidated; credential cleared")
        self.valid = False
        self.storage.pop(TOKEN_KEY, None)


def callback_url(url: str | httpx.URL) -> str:
    """The page URL reduced to origin and path (no query, no fragment)."""
    parsed = httpx.URL(url)
    if not parsed.is_absolute_url:
        return parsed.path
    return f"{parsed.scheme}://{parsed.netloc.decode('ascii')}{parsed.path}"


class SessionManager:
    """
    Drives the OAuth authorization-code flow for one page load.

    Example:
        ```python
        manager = SessionManager(config, request.session)
        result = manager.resolve(request.url)
        if isinstance(result, Redirect):
            return redirect(result.location)
        client = GitHubClient.from_session(result)
        ```
    """

    def __init__(
        self,
        config: EditorConfig,
        storage: MutableMapping[str, str],
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            config: Editor configuration (client id, token endpoint)
            storage: Session-scoped storage shared with the browser session
            http_client: Client for the token exchange (default: a new one
                using ``config.timeout``)
        """
        self.config = config
        self.storage = storage
        self._http = http_client or httpx.Client(timeout=config.timeout)

    def state(self, url: str | httpx.URL) -> SessionState:
        if self.storage.get(TOKEN_KEY):
            return SessionState.AUTHENTICATED
        if httpx.URL(url).params.get(CODE_PARAM):
            return SessionState.AWAITING_CODE
        return SessionState.UNAUTHENTICATED

    def authorization_url(self, url: str | httpx.URL) -> str:
        """The forge authorize URL that returns to the current page."""
        return str(
            httpx.URL(
                self.config.authorize_url,
                params={
                    "client_id": self.config.client_id,
                    "redirect_uri": callback_url(url),
                    "scope": self.config.scope,
                },
            )
        )

    def exchange_code(self, code: str) -> str:
        """
        Exchange an authorization code for an access token.

        The code is appended to the configured token endpoint and the
        response must be JSON with a ``token`` field. Failures are not
        retried: the user has to start the flow again.

        Raises:
            AuthenticationError: If the endpoint fails or returns no token
            RequestTimeoutError: If the endpoint does not answer in time
        """
        try:
            response = self._http.get(self.config.token_uri + code)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                "REQUEST_TIMEOUT", "Token endpoint did not respond in time"
            ) from e
        except httpx.RequestError as e:
            raise AuthenticationError(
                "TOKEN_EXCHANGE_FAILED", mask_sensitive_data(str(e))
            ) from e

        if response.status_code >= 400:
            raise AuthenticationError(
                "TOKEN_EXCHANGE_FAILED",
                f"Token endpoint answered HTTP {response.status_code}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise AuthenticationError(
                "TOKEN_EXCHANGE_FAILED", "Token endpoint did not return JSON"
            ) from e

        token = data.get("token") if isinstance(data, dict) else None
        if not token or not isinstance(token, str):
            raise AuthenticationError(
                "TOKEN_EXCHANGE_FAILED", "Token endpoint returned no token"
            )
        return token

    def resolve(self, url: str | httpx.URL) -> Redirect | SessionContext:
        """
        Advance the flow by one step for the page at ``url``.

        Returns:
            A Redirect while authorization is in progress, otherwise the
            SessionContext

        Raises:
            AuthenticationError: If the code exchange fails
        """
        state = self.state(url)

        if state is SessionState.UNAUTHENTICATED:
            logger.info("No credential; redirecting to authorization")
            return Redirect(self.authorization_url(url))

        if state is SessionState.AWAITING_CODE:
            code = httpx.URL(url).params[CODE_PARAM]
            self.storage[TOKEN_KEY] = self.exchange_code(code)
            logger.info("Authorization code exchanged")
            return Redirect(callback_url(url))

        return SessionContext(token=self.storage[TOKEN_KEY], storage=self.storage)

    def close(self) -> None:
        self._http.close()
