"""Pull requests resource client."""

from typing import TYPE_CHECKING, Any

from docedit.clients._parsing import require
from docedit.types.pulls import PullRequest

if TYPE_CHECKING:
    from docedit.transport import HTTPTransport


class PullsClient:
    """Client for pull request operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the pulls client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def create(
        self,
        owner: str,
        name: str,
        title: str,
        head: str,
        base: str,
        body: str | None = None,
    ) -> PullRequest:
        """
        Open a pull request.

        Args:
            owner: Owner login of the repository receiving the changes
            name: Repository name
            title: Pull request title
            head: Source branch, as ``<owner>:<branch>`` for cross-repository PRs
            base: Branch to merge into
            body: Optional description

        Returns:
            The new PullRequest

        Raises:
            ValidationError: If a PR for ``head`` already exists or there are
                no commits between ``base`` and ``head``
        """
        payload: dict[str, str] = {"title": title, "head": head, "base": base}
        if body is not None:
            payload["body"] = body

        response = self.transport.request(
            "POST", f"/repos/{owner}/{name}/pulls", body=payload
        )
        return self._parse_pull_request(response)

    def list(
        self,
        owner: str,
        name: str,
        head: str | None = None,
        base: str | None = None,
        state: str = "open",
    ) -> list[PullRequest]:
        """
        List pull requests.

        Args:
            owner: Owner login
            name: Repository name
            head: Optional filter, ``<owner>:<branch>``
            base: Optional filter by target branch
            state: "open", "closed" or "all" (default: "open")

        Returns:
            List of PullRequest objects
        """
        params: dict[str, str] = {"state": state}
        if head:
            params["head"] = head
        if base:
            params["base"] = base

        response = self.transport.request(
            "GET", f"/repos/{owner}/{name}/pulls", params=params
        )
        return [self._parse_pull_request(pr) for pr in response]

    def _parse_pull_request(self, data: dict[str, Any]) -> PullRequest:
        """Parse pull request data from API response."""
        head = require(data, "head", "PullRequest")
        base = require(data, "base", "PullRequest")
        return PullRequest(
            number=require(data, "number", "PullRequest"),
            title=require(data, "title", "PullRequest"),
            state=require(data, "state", "PullRequest"),
            html_url=require(data, "html_url", "PullRequest"),
            head_ref=require(head, "ref", "PullRequest head"),
            head_label=require(head, "label", "PullRequest head"),
            base_ref=require(base, "ref", "PullRequest base"),
            body=data.get("body"),
        )
