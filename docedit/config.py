"""
docedit configuration.

The editor needs to know which upstream repository holds the documentation,
where the markdown sources live inside it, and how to run the OAuth code flow.
"""

import os
from dataclasses import dataclass
from typing import Any

from docedit.exceptions import ConfigurationError


@dataclass(frozen=True)
class EditorConfig:
    """
    Static configuration for one documentation site.

    Attributes:
        organization: Upstream repository owner (site ``organizationName``)
        project: Upstream repository name (site ``projectName``)
        docs_path: Content root inside the repository, e.g. "docs"
        client_id: GitHub OAuth app client id
        token_uri: Token endpoint; the authorization code is appended to it
        edit_base_url: Path the editor is mounted at
        api_base_url: GitHub REST API root
        authorize_url: GitHub OAuth authorize endpoint
        scope: OAuth scope requested; must allow forking and pushing
        timeout: Per-request timeout in seconds
    """

    DEFAULT_API_URL = "https://api.github.com"
    DEFAULT_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"

    organization: str
    project: str
    docs_path: str
    client_id: str
    token_uri: str
    edit_base_url: str = "/edit"
    api_base_url: str = DEFAULT_API_URL
    authorize_url: str = DEFAULT_AUTHORIZE_URL
    scope: str = "public_repo"
    timeout: float = 30.0

    def __post_init__(self) -> None:
        for name in ("organization", "project", "client_id", "token_uri"):
            if not getattr(self, name):
                raise ConfigurationError(f"EditorConfig.{name} must not be empty")
        if self.timeout <= 0:
            raise ConfigurationError("EditorConfig.timeout must be positive")

    @classmethod
    def from_env(cls) -> "EditorConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            DOCEDIT_ORGANIZATION: Upstream owner (required)
            DOCEDIT_PROJECT: Upstream repository (required)
            DOCEDIT_DOCS_PATH: Content root (required)
            DOCEDIT_GITHUB_CLIENT_ID: OAuth client id (required)
            DOCEDIT_GITHUB_TOKEN_URI: Token endpoint (required)
            DOCEDIT_EDIT_BASE_URL: Editor mount path (optional, default: /edit)
            DOCEDIT_API_URL: API root (optional, default: https://api.github.com)
            DOCEDIT_TIMEOUT: Request timeout in seconds (optional, default: 30)

        Raises:
            ConfigurationError: If a required variable is missing or invalid
        """
        required = {
            "organization": "DOCEDIT_ORGANIZATION",
            "project": "DOCEDIT_PROJECT",
            "docs_path": "DOCEDIT_DOCS_PATH",
            "client_id": "DOCEDIT_GITHUB_CLIENT_ID",
            "token_uri": "DOCEDIT_GITHUB_TOKEN_URI",
        }
        values: dict[str, Any] = {}
        for field_name, variable in required.items():
            value = os.environ.get(variable)
            if value is None:
                raise ConfigurationError(f"{variable} environment variable not set")
            values[field_name] = value

        timeout = os.environ.get("DOCEDIT_TIMEOUT")
        if timeout is not None:
            try:
                values["timeout"] = float(timeout)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid DOCEDIT_TIMEOUT: {timeout}. Must be a number of seconds"
                ) from None

        return cls(
            edit_base_url=os.environ.get("DOCEDIT_EDIT_BASE_URL", "/edit"),
            api_base_url=os.environ.get("DOCEDIT_API_URL", cls.DEFAULT_API_URL),
            **values,
        )

    @classmethod
    def from_site(
        cls, options: dict[str, Any], site_config: dict[str, Any], **overrides: Any
    ) -> "EditorConfig":
        """
        Create a configuration from the site generator's plugin options.

        Args:
            options: Plugin options: ``docsPath`` and ``github.clientId``/``github.tokenUri``
            site_config: Site config: ``organizationName`` and ``projectName``
            **overrides: Any other EditorConfig field

        Raises:
            ConfigurationError: If a required key is missing
        """
        github = options.get("github") or {}
        try:
            return cls(
                organization=site_config["organizationName"],
                project=site_config["projectName"],
                docs_path=options["docsPath"],
                client_id=github["clientId"],
                token_uri=github["tokenUri"],
                **overrides,
            )
        except KeyError as e:
            raise ConfigurationError(f"Missing site option {e.args[0]!r}") from e
