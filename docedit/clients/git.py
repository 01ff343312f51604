"""Git references resource client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from docedit.clients._parsing import require
from docedit.types.git import Branch

if TYPE_CHECKING:
    from docedit.transport import HTTPTransport

_HEADS_PREFIX = "refs/heads/"


def _parse_branch(data: dict[str, Any]) -> Branch:
    ref = require(data, "ref", "Ref")
    target = require(data, "object", "Ref")
    name = ref[len(_HEADS_PREFIX):] if ref.startswith(_HEADS_PREFIX) else ref
    return Branch(name=name, sha=require(target, "sha", "Ref object"))


class GitClient:
    """Client for branch references."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def get_branch(self, owner: str, name: str, branch: str) -> Branch:
        """
        Look up a branch by exact name.

        Raises:
            NotFoundError: If the branch does not exist
        """
        return _parse_branch(
            self.transport.request(
                "GET", f"/repos/{owner}/{name}/git/ref/heads/{quote(branch, safe='/')}"
            )
        )

    def create_branch(self, owner: str, name: str, branch: str, sha: str) -> Branch:
        """Create ``refs/heads/<branch>`` pointing at ``sha``."""
        return _parse_branch(
            self.transport.request(
                "POST",
                f"/repos/{owner}/{name}/git/refs",
                body={"ref": f"{_HEADS_PREFIX}{branch}", "sha": sha},
            )
        )

    def update_branch(
        self, owner: str, name: str, branch: str, sha: str, force: bool = False
    ) -> Branch:
        """
        Move a branch to ``sha``.

        Raises:
            ValidationError: If ``force`` is false and the move is not a
                fast-forward
        """
        return _parse_branch(
            self.transport.request(
                "PATCH",
                f"/repos/{owner}/{name}/git/refs/heads/{quote(branch, safe='/')}",
                body={"sha": sha, "force": force},
            )
        )
