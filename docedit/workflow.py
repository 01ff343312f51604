"""
Repository workflow for editing one document through a fork.

Every step is "resolve, or create if missing", so opening the same document
again, in this session or a later one, lands on the same fork and branch:

    resolve_working_repository -> resolve_branch -> fetch_content
                               -> commit_content -> ensure_pull_request

Each step needs the previous step's result and they run strictly in order.
"""

import random
import re
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from docedit.exceptions import (
    ForkTimeoutError,
    NotFoundError,
    OwnershipConflictError,
)
from docedit.logging import get_logger, log_workflow_step
from docedit.types.contents import Blob, FileCommit
from docedit.types.git import Branch
from docedit.types.pulls import PullRequest
from docedit.types.repos import Repository

if TYPE_CHECKING:
    from docedit.client import GitHubClient

BRANCH_PREFIX = "edit/"

# Characters git refuses in ref names (see git-check-ref-format)
_UNSAFE_REF_CHARS = re.compile(r"[\x00-\x20\x7f~^:?*\[\\]")

logger = get_logger("workflow")


def branch_name_for(document_path: str) -> str:
    """
    Derive the edit branch name from a document path.

    ``/`` and ``.`` both become ``-`` and characters git does not allow in
    ref names become ``_``, so the name is a pure function of the path::

        >>> branch_name_for("docs/guide/intro.md")
        'edit/docs-guide-intro-md'

    Paths that differ only in which of ``/``, ``.`` or ``-`` separates two
    words normalise to the same branch (``docs/guide-intro.md`` and
    ``docs/guide/intro.md``). Likewise ``_`` and any character git refuses
    are interchangeable (``a b`` and ``a:b``). Any other difference gives a
    different branch.
    """
    normalized = document_path.strip("/")
    normalized = normalized.replace("/", "-").replace(".", "-")
    normalized = _UNSAFE_REF_CHARS.sub("_", normalized)
    return BRANCH_PREFIX + normalized


@dataclass
class PollConfig:
    """Bounded retry policy for waiting on a new fork."""

    max_attempts: int = 10
    initial_interval: float = 1.0
    backoff_factor: float = 2.0
    max_interval: float = 30.0
    timeout: float = 300.0  # Total seconds before giving up
    jitter: float = 0.1

    def interval(self, attempt: int) -> float:
        """Wait before retry ``attempt`` (0-indexed), with ±jitter, capped."""
        base = self.initial_interval * self.backoff_factor ** attempt
        base += random.uniform(-base * self.jitter, base * self.jitter)
        return min(base, self.max_interval)


class RepositoryWorkflow:
    """
    Fork, branch, read, commit and propose changes to one upstream repository.

    Example:
        ```python
        workflow = RepositoryWorkflow(client, "acme", "docs")
        repo = workflow.resolve_working_repository()
        branch = workflow.resolve_branch(repo, branch_name_for("docs/intro.md"))
        blob = workflow.fetch_content(repo, branch, "docs/intro.md")
        workflow.commit_content(repo, branch, "docs/intro.md", blob, new_text)
        pr = workflow.ensure_pull_request(repo, branch)
        ```
    """

    def __init__(
        self,
        client: "GitHubClient",
        upstream_owner: str,
        upstream_name: str,
        poll_config: PollConfig | None = None,
    ) -> None:
        """
        Args:
            client: Authenticated API client
            upstream_owner: Owner of the repository being edited
            upstream_name: Name of the repository being edited
            poll_config: Wait policy for fork provisioning
        """
        self.client = client
        self.upstream_owner = upstream_owner
        self.upstream_name = upstream_name
        self.poll_config = poll_config or PollConfig()
        self._upstream: Repository | None = None
        self._working: Repository | None = None

    @property
    def upstream(self) -> Repository:
        """The upstream repository, fetched once."""
        if self._upstream is None:
            self._upstream = self.client.repos.get(self.upstream_owner, self.upstream_name)
        return self._upstream

    def is_upstream(self, repo: Repository) -> bool:
        return (
            repo.owner.lower() == self.upstream_owner.lower()
            and repo.name.lower() == self.upstream_name.lower()
        )

    def resolve_working_repository(self) -> Repository:
        """
        Find the repository the current identity can push to.

        The upstream itself when the identity owns it; otherwise an existing
        ``<login>/<upstream name>`` or a new fork. A reused repository must be
        a fork of the upstream.

        Raises:
            OwnershipConflictError: If ``<login>/<upstream name>`` exists but
                is not a fork of the upstream
            ForkTimeoutError: If a new fork never becomes reachable
        """
        if self._working is not None:
            return self._working

        identity = self.client.users.get_authenticated()

        if identity.login.lower() == self.upstream_owner.lower():
            repo = self.upstream
        else:
            try:
                repo = self.client.repos.get(identity.login, self.upstream_name)
                log_workflow_step("fork_reused", repository=repo.full_name)
            except NotFoundError:
                repo = self.fork_repository()

            if repo.parent is None or not repo.parent.matches(
                self.upstream_owner, self.upstream_name
            ):
                parent = f"{repo.parent.owner}/{repo.parent.name}" if repo.parent else "none"
                raise OwnershipConflictError(
                    f"{repo.full_name} is not a fork of "
                    f"{self.upstream_owner}/{self.upstream_name} (parent: {parent})"
                )

        self._working = repo
        return repo

    def fork_repository(self) -> Repository:
        """
        Fork the upstream and wait until the fork is reachable.

        GitHub provisions forks asynchronously; until it is done the new
        repository answers 404. Any other error is raised immediately.

        Raises:
            ForkTimeoutError: If the fork is not reachable within the poll
                policy's attempts or total timeout
        """
        fork = self.client.repos.fork(self.upstream_owner, self.upstream_name)
        log_workflow_step("fork_created", repository=fork.full_name)

        policy = self.poll_config
        deadline = time.monotonic() + policy.timeout

        for attempt in range(policy.max_attempts):
            try:
                repo = self.client.repos.get(fork.owner, fork.name)
                log_workflow_step("fork_ready", repository=repo.full_name, attempts=attempt + 1)
                return repo
            except NotFoundError:
                wait = policy.interval(attempt)
                if attempt + 1 >= policy.max_attempts or time.monotonic() + wait > deadline:
                    break
                logger.debug(f"Fork {fork.full_name} not ready; retrying in {wait:.1f}s")
                time.sleep(wait)

        raise ForkTimeoutError(
            f"Fork {fork.full_name} was not available after {policy.max_attempts} attempts"
        )

    def resolve_branch(self, repo: Repository, branch_name: str) -> Branch:
        """
        Find the edit branch, creating it if needed.

        A new branch starts from the upstream's current default-branch
        commit. On a fork, the fork's default branch is fast-forwarded to that
        commit first so the fork does not lag behind.

        Raises:
            ValidationError: If the fork's default branch has diverged and
                cannot be fast-forwarded
        """
        try:
            return self.client.git.get_branch(repo.owner, repo.name, branch_name)
        except NotFoundError:
            pass

        upstream = self.upstream
        head = self.client.git.get_branch(upstream.owner, upstream.name, upstream.default_branch)

        if not self.is_upstream(repo):
            self.client.git.update_branch(
                repo.owner, repo.name, repo.default_branch, head.sha, force=False
            )
            log_workflow_step(
                "fork_synced", repository=repo.full_name, branch=repo.default_branch, sha=head.sha
            )

        branch = self.client.git.create_branch(repo.owner, repo.name, branch_name, head.sha)
        log_workflow_step("branch_created", repository=repo.full_name, branch=branch.name)
        return branch

    def fetch_content(self, repo: Repository, branch: Branch, path: str) -> Blob:
        """
        Read ``path`` as of the branch head.

        Raises:
            NotFoundError: If the file does not exist on the branch
        """
        return self.client.contents.get(repo.owner, repo.name, path, ref=branch.name)

    def commit_content(
        self,
        repo: Repository,
        branch: Branch,
        path: str,
        previous_blob: Blob | None,
        new_text: str,
        message: str | None = None,
    ) -> str:
        """
        Write ``new_text`` to ``path`` on the branch.

        Args:
            repo: Working repository
            branch: Edit branch
            path: Document path
            previous_blob: The version being replaced; its hash must still be
                current. None creates the file.
            new_text: New document text
            message: Commit message (default: "Update <path>")

        Returns:
            The new commit's sha

        Raises:
            ConflictError: If the file changed since ``previous_blob`` was read
        """
        return self.commit_file(
            repo, branch, path, previous_blob, new_text, message=message
        ).commit_sha

    def commit_file(
        self,
        repo: Repository,
        branch: Branch,
        path: str,
        previous_blob: Blob | None,
        new_text: str,
        message: str | None = None,
    ) -> FileCommit:
        """Like :meth:`commit_content`, returning the new blob hash as well."""
        result = self.client.contents.put(
            repo.owner,
            repo.name,
            path,
            new_text,
            message=message or f"{'Update' if previous_blob else 'Create'} {path}",
            branch=branch.name,
            sha=previous_blob.sha if previous_blob else None,
        )
        log_workflow_step(
            "content_committed", repository=repo.full_name, branch=branch.name, commit=result.commit_sha
        )
        return result

    def ensure_pull_request(
        self,
        repo: Repository,
        branch: Branch,
        title: str | None = None,
        body: str | None = None,
    ) -> PullRequest:
        """
        Return the open pull request for the branch, opening one if needed.

        Args:
            repo: Working repository holding the branch
            branch: Edit branch
            title: Title for a new pull request (default: derived from the branch)
            body: Description for a new pull request

        Returns:
            The existing or newly opened PullRequest
        """
        upstream = self.upstream
        head = branch.name if self.is_upstream(repo) else f"{repo.owner}:{branch.name}"

        existing = self.client.pulls.list(
            upstream.owner,
            upstream.name,
            head=f"{repo.owner}:{branch.name}",
            base=upstream.default_branch,
            state="open",
        )
        if existing:
            return existing[0]

        document = branch.name[len(BRANCH_PREFIX):] if branch.name.startswith(BRANCH_PREFIX) else branch.name
        pull = self.client.pulls.create(
            upstream.owner,
            upstream.name,
            title=title or f"Edit {document}",
            head=head,
            base=upstream.default_branch,
            body=body if body is not None else f"Changes made in the online editor on `{branch.name}`.",
        )
        log_workflow_step("pull_request_opened", repository=upstream.full_name, number=pull.number)
        return pull
