"""
docedit GitHub API client.

Provides the authenticated handle every other component uses to reach the
forge.
"""

import os
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from docedit.clients import (
    ContentsClient,
    GitClient,
    PullsClient,
    ReposClient,
    UsersClient,
)
from docedit.exceptions import ConfigurationError
from docedit.transport import HTTPTransport, RetryConfig

if TYPE_CHECKING:
    from docedit.session import SessionContext


class GitHubClient:
    """
    Client for the parts of the GitHub REST API the editor needs.

    Aggregates all resource clients over one transport.

    Example:
        ```python
        from docedit import GitHubClient

        with GitHubClient(token="gho_...") as client:
            me = client.users.get_authenticated()
            repo = client.repos.get("acme", "docs")
            main = client.git.get_branch("acme", "docs", repo.default_branch)
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: OAuth access token
            base_url: API root (default: https://api.github.com)
            timeout: Per-request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            on_unauthorized: Called when the API rejects the token (optional)
        """
        if not token:
            raise ConfigurationError("An access token is required")

        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            on_unauthorized=on_unauthorized,
        )

        self.users = UsersClient(self._transport)
        self.repos = ReposClient(self._transport)
        self.git = GitClient(self._transport)
        self.contents = ContentsClient(self._transport)
        self.pulls = PullsClient(self._transport)

    @classmethod
    def from_session(cls, context: "SessionContext", **kwargs: Any) -> "GitHubClient":
        """
        Create a client bound to a session.

        A 401 from any call invalidates the session, so the next page load
        starts the authorization flow again.
        """
        return cls(token=context.token, on_unauthorized=context.invalidate, **kwargs)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "GitHubClient":
        """
        Create a client from environment variables.

        Environment variables:
            GITHUB_TOKEN: Access token (required)
            DOCEDIT_API_URL: API root (optional, default: https://api.github.com)

        Raises:
            ConfigurationError: If GITHUB_TOKEN is not set
        """
        token = os.environ.get("GITHUB_TOKEN")
        if not token:
            raise ConfigurationError("GITHUB_TOKEN environment variable not set")

        return cls(
            token=token,
            base_url=os.environ.get("DOCEDIT_API_URL", cls.DEFAULT_BASE_URL),
            timeout=timeout,
            retry_config=retry_config,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
