"""File content data models."""

from dataclasses import dataclass


@dataclass
class Blob:
    """
    A file's decoded text and its blob hash.

    The hash is the optimistic-concurrency token for the next write to the
    same path.
    """

    path: str
    sha: str
    text: str
    download_url: str | None = None


@dataclass
class FileCommit:
    """Result of creating or updating a file."""

    path: str
    commit_sha: str
    blob_sha: str
