"""
Editor page controller.

Ties the session, the repository workflow and the transcoder to the URL of
the page being edited: ``load`` prepares the editor, ``save`` commits the
editor's HTML back to the edit branch and ``submit`` also opens a pull
request.
"""

from collections.abc import Callable, MutableMapping
from dataclasses import dataclass
from typing import Any

import httpx

from docedit import transcoder
from docedit.client import GitHubClient
from docedit.config import EditorConfig
from docedit.exceptions import ConflictError, DocEditError, MissingDocumentPathError, NotFoundError
from docedit.logging import get_logger
from docedit.session import Redirect, SessionContext, SessionManager
from docedit.types.contents import Blob
from docedit.types.git import Branch
from docedit.types.pulls import PullRequest
from docedit.types.repos import Repository
from docedit.workflow import RepositoryWorkflow, branch_name_for

logger = get_logger("page")

ClientFactory = Callable[[SessionContext], Any]


@dataclass
class EditorView:
    """Everything the editing surface needs to display a document."""

    document_path: str
    branch: str
    repository: str
    html: str
    front_matter: dict[str, Any] | None


@dataclass
class _OpenDocument:
    path: str
    repository: Repository
    branch: Branch
    front_matter: dict[str, Any] | None
    blob_sha: str | None


class EditorPage:
    """
    Controller for one editor page.

    Example:
        ```python
        page = EditorPage(EditorConfig.from_env(), request.session)
        result = page.load(request.url)
        if isinstance(result, Redirect):
            return redirect(result.location)
        render_editor(result.html)
        ...
        page.submit(html_from_editor)
        page.close()
        ```
    """

    def __init__(
        self,
        config: EditorConfig,
        storage: MutableMapping[str, str],
        client_factory: ClientFactory | None = None,
        session_manager: SessionManager | None = None,
    ) -> None:
        """
        Args:
            config: Site configuration
            storage: Session-scoped storage for the credential
            client_factory: Builds the API client for a session (default:
                GitHubClient.from_session with the configured API root)
            session_manager: OAuth flow driver (default: one over ``storage``)

        The page owns its session manager and the clients it builds;
        :meth:`close` releases their connections.
        """
        self.config = config
        self.session_manager = session_manager or SessionManager(config, storage)
        self._client_factory = client_factory or self._default_client
        self.session: SessionContext | None = None
        self.workflow: RepositoryWorkflow | None = None
        self._document: _OpenDocument | None = None

    def _default_client(self, context: SessionContext) -> GitHubClient:
        return GitHubClient.from_session(
            context,
            base_url=self.config.api_base_url,
            timeout=self.config.timeout,
        )

    def document_path_for(self, url: str | httpx.URL) -> str:
        """
        Map an editor URL to the markdown file it edits.

        ``<edit_base_url>/guide/intro`` becomes ``<docs_path>/guide/intro.md``.

        Raises:
            MissingDocumentPathError: If the URL is outside the editor or
                names no document
        """
        path = httpx.URL(url).path
        base = self.config.edit_base_url.rstrip("/")

        if path != base and not path.startswith(base + "/"):
            raise MissingDocumentPathError(f"{path} is not under {base or '/'}")

        file_path = path[len(base):].strip("/")
        if not file_path:
            raise MissingDocumentPathError(f"No document named in {path}")

        docs_path = self.config.docs_path.strip("/")
        return f"{docs_path}/{file_path}.md" if docs_path else f"{file_path}.md"

    def load(self, url: str | httpx.URL) -> Redirect | EditorView:
        """
        Prepare the editor for the page at ``url``.

        Resolves the session first; while authorization is in progress the
        caller gets a Redirect. Otherwise the working repository and edit
        branch are resolved, the document is read and decoded.

        Raises:
            MissingDocumentPathError: If the URL names no document
            OwnershipConflictError: If the user's repository is not a fork of
                the upstream
            DocumentFormatError: If the stored document cannot be decoded
        """
        result = self.session_manager.resolve(url)
        if isinstance(result, Redirect):
            return result

        document_path = self.document_path_for(url)
        self.session = result
        self._close_client()
        self.workflow = RepositoryWorkflow(
            self._client_factory(result),
            self.config.organization,
            self.config.project,
        )
        return self._open(document_path)

    def reload(self) -> EditorView:
        """Re-read the current document, e.g. after a save conflict."""
        return self._open(self._require_document().path)

    def _open(self, document_path: str) -> EditorView:
        workflow = self._require_workflow()
        repo = workflow.resolve_working_repository()
        branch = workflow.resolve_branch(repo, branch_name_for(document_path))
        blob = self._fetch(repo, branch, document_path)

        # Decode fully before any state changes so a bad document never loads
        front_matter, html = transcoder.decode(blob.text if blob else "")

        self._document = _OpenDocument(
            path=document_path,
            repository=repo,
            branch=branch,
            front_matter=front_matter,
            blob_sha=blob.sha if blob else None,
        )
        logger.info(f"Opened {document_path} on {repo.full_name}@{branch.name}")
        return EditorView(
            document_path=document_path,
            branch=branch.name,
            repository=repo.full_name,
            html=html,
            front_matter=front_matter,
        )

    def _fetch(self, repo: Repository, branch: Branch, path: str) -> Blob | None:
        try:
            return self._require_workflow().fetch_content(repo, branch, path)
        except NotFoundError:
            logger.info(f"{path} does not exist on {branch.name}; starting a new document")
            return None

    def save(self, html: str, message: str | None = None) -> str:
        """
        Commit the editor's HTML to the edit branch.

        The branch and the file's current hash are looked up again. If the
        hash no longer matches the version that was loaded, another session
        has saved in between and this save is refused.

        Returns:
            The new commit's sha

        Raises:
            ConflictError: If the document changed since it was loaded; call
                :meth:`reload` and save again
        """
        document = self._require_document()
        workflow = self._require_workflow()

        branch = workflow.resolve_branch(document.repository, document.branch.name)
        current = self._fetch(document.repository, branch, document.path)
        current_sha = current.sha if current else None

        if current_sha != document.blob_sha:
            raise ConflictError(
                "STALE_DOCUMENT",
                f"{document.path} changed on {branch.name} since it was loaded",
            )

        text = transcoder.encode(html, document.front_matter)
        result = workflow.commit_file(
            document.repository, branch, document.path, current, text, message=message
        )

        # The next save must compare against what was just written
        document.branch = branch
        document.blob_sha = result.blob_sha
        return result.commit_sha

    def submit(self, html: str, message: str | None = None) -> PullRequest:
        """Save, then make sure a pull request for the edit branch is open."""
        self.save(html, message=message)
        document = self._require_document()
        return self._require_workflow().ensure_pull_request(
            document.repository,
            document.branch,
            title=f"Edit {document.path}",
        )

    def close(self) -> None:
        """Close the current API client and the session manager."""
        self._close_client()
        self.session_manager.close()

    def _close_client(self) -> None:
        if self.workflow is not None:
            self.workflow.client.close()
            self.workflow = None

    def __enter__(self) -> "EditorPage":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _require_workflow(self) -> RepositoryWorkflow:
        if self.workflow is None:
            raise DocEditError("NOT_LOADED", "No session; call load() first")
        return self.workflow

    def _require_document(self) -> _OpenDocument:
        if self._document is None:
            raise DocEditError("NOT_LOADED", "No document is open; call load() first")
        return self._document
