"""Repositories resource client."""

from typing import TYPE_CHECKING, Any

from docedit.clients._parsing import require
from docedit.types.repos import Repository, RepositoryRef

if TYPE_CHECKING:
    from docedit.transport import HTTPTransport


def _parse_repository_ref(data: dict[str, Any]) -> RepositoryRef:
    owner = require(data, "owner", "Repository")
    return RepositoryRef(
        owner=require(owner, "login", "Repository owner"),
        name=require(data, "name", "Repository"),
        default_branch=data.get("default_branch"),
    )


def _parse_repository(data: dict[str, Any]) -> Repository:
    """Parse repository data, including the parent of a fork."""
    owner = require(data, "owner", "Repository")
    parent_data = data.get("parent")
    return Repository(
        owner=require(owner, "login", "Repository owner"),
        name=require(data, "name", "Repository"),
        full_name=require(data, "full_name", "Repository"),
        default_branch=require(data, "default_branch", "Repository"),
        fork=bool(data.get("fork", False)),
        parent=_parse_repository_ref(parent_data) if parent_data else None,
        html_url=data.get("html_url"),
    )


class ReposClient:
    """Client for repository-related operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get(self, owner: str, name: str) -> Repository:
        """
        Get repository information.

        Args:
            owner: Owner login
            name: Repository name

        Returns:
            Repository, with ``parent`` set when it is a fork

        Raises:
            NotFoundError: If the repository does not exist (or is not yet
                provisioned after a fork)
        """
        return _parse_repository(
            self.transport.request("GET", f"/repos/{owner}/{name}")
        )

    def fork(self, owner: str, name: str) -> Repository:
        """
        Fork a repository into the authenticated user's account.

        GitHub provisions forks asynchronously: the returned repository may
        not be reachable for a short while.

        Args:
            owner: Owner login of the repository to fork
            name: Repository name

        Returns:
            The (possibly still provisioning) fork
        """
        return _parse_repository(
            self.transport.request("POST", f"/repos/{owner}/{name}/forks", body={})
        )
