"""
Pytest fixtures for docedit testing.

Provides a mock forge pre-populated with an upstream documentation
repository, and sample data objects.
"""

from collections.abc import Generator
from typing import Any

import pytest

from docedit.config import EditorConfig
from docedit.testing.mock import MockGitHubClient
from docedit.types.contents import Blob
from docedit.types.git import Branch
from docedit.types.pulls import PullRequest
from docedit.types.repos import Repository, RepositoryRef

UPSTREAM_OWNER = "acme"
UPSTREAM_NAME = "docs"
SAMPLE_PATH = "docs/guide/intro.md"
SAMPLE_DOCUMENT = "---\ntitle: Intro\n---\n\n# Hello\n\nWelcome to the guide.\n"


def create_mock_forge(login: str = "alice", fork_delay: int = 0) -> MockGitHubClient:
    """
    Create a mock client whose forge holds ``acme/docs`` with one document.

    Example:
        ```python
        client = create_mock_forge(login="bob")
        workflow = RepositoryWorkflow(client, "acme", "docs")
        ```
    """
    client = MockGitHubClient(login=login, fork_delay=fork_delay)
    client.add_repository(UPSTREAM_OWNER, UPSTREAM_NAME)
    client.add_file(UPSTREAM_OWNER, UPSTREAM_NAME, "main", SAMPLE_PATH, SAMPLE_DOCUMENT)
    return client


def create_sample_config(**overrides: Any) -> EditorConfig:
    """EditorConfig for the ``acme/docs`` site."""
    values = {
        "organization": UPSTREAM_OWNER,
        "project": UPSTREAM_NAME,
        "docs_path": "docs",
        "client_id": "client-123",
        "token_uri": "https://auth.example.com/token?code=",
    }
    values.update(overrides)
    return EditorConfig(**values)


# ============================================================================
# Mock Client Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockGitHubClient, None, None]:
    """
    Provide a MockGitHubClient logged in as ``alice`` with ``acme/docs``.

    Example:
        ```python
        def test_my_feature(mock_client):
            mock_client.contents.configure_put(error=ConflictError("CONFLICT", "stale"))
            ...
            assert mock_client.was_called("contents.put")
        ```
    """
    client = create_mock_forge()
    yield client
    client.reset()


@pytest.fixture
def editor_config() -> EditorConfig:
    """Provide an EditorConfig for ``acme/docs``."""
    return create_sample_config()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_repository() -> Repository:
    """Provide the upstream Repository."""
    return Repository(
        owner=UPSTREAM_OWNER,
        name=UPSTREAM_NAME,
        full_name=f"{UPSTREAM_OWNER}/{UPSTREAM_NAME}",
        default_branch="main",
        fork=False,
        parent=None,
        html_url=f"https://github.com/{UPSTREAM_OWNER}/{UPSTREAM_NAME}",
    )


@pytest.fixture
def sample_fork() -> Repository:
    """Provide ``alice``'s fork of the upstream."""
    return Repository(
        owner="alice",
        name=UPSTREAM_NAME,
        full_name=f"alice/{UPSTREAM_NAME}",
        default_branch="main",
        fork=True,
        parent=RepositoryRef(UPSTREAM_OWNER, UPSTREAM_NAME, "main"),
        html_url=f"https://github.com/alice/{UPSTREAM_NAME}",
    )


@pytest.fixture
def sample_branch() -> Branch:
    """Provide an edit branch."""
    return Branch(name="edit/docs-guide-intro-md", sha="a" * 40)


@pytest.fixture
def sample_blob() -> Blob:
    """Provide the sample document's Blob."""
    return Blob(path=SAMPLE_PATH, sha="b" * 40, text=SAMPLE_DOCUMENT)


@pytest.fixture
def sample_pull_request() -> PullRequest:
    """Provide an open PullRequest from ``alice``'s edit branch."""
    return PullRequest(
        number=7,
        title=f"Edit {SAMPLE_PATH}",
        state="open",
        html_url=f"https://github.com/{UPSTREAM_OWNER}/{UPSTREAM_NAME}/pull/7",
        head_ref="edit/docs-guide-intro-md",
        head_label="alice:edit/docs-guide-intro-md",
        base_ref="main",
    )
