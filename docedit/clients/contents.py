"""Repository contents resource client."""

import base64
import binascii
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from docedit.clients._parsing import require
from docedit.exceptions import DocumentFormatError, ValidationError
from docedit.transcoder import decode_bytes
from docedit.types.contents import Blob, FileCommit

if TYPE_CHECKING:
    from docedit.transport import HTTPTransport


def _contents_url(owner: str, name: str, path: str) -> str:
    # "#", "?" and "%" are valid in file names; encode them for the URL path
    return f"/repos/{owner}/{name}/contents/{quote(path, safe='/')}"


class ContentsClient:
    """Client for reading and writing files through the contents API."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def get(self, owner: str, name: str, path: str, ref: str | None = None) -> Blob:
        """
        Get a file's text and blob hash.

        Files over 1 MB come back without inline content; those are fetched
        from ``download_url``.

        Args:
            owner: Owner login
            name: Repository name
            path: File path within the repository
            ref: Branch, tag or commit (default: the repository's default branch)

        Raises:
            NotFoundError: If the file does not exist at ``ref``
            ValidationError: If ``path`` is a directory or symlink
            DocumentFormatError: If the content is not valid UTF-8
        """
        response = self.transport.request(
            "GET",
            _contents_url(owner, name, path),
            params={"ref": ref} if ref else None,
        )
        if isinstance(response, list) or response.get("type", "file") != "file":
            raise ValidationError("NOT_A_FILE", f"'{path}' is not a file")

        download_url = response.get("download_url")
        content = response.get("content")
        if content and response.get("encoding") == "base64":
            try:
                raw = base64.b64decode(content)
            except binascii.Error as e:
                raise DocumentFormatError(f"'{path}' has corrupt base64 content") from e
            text = decode_bytes(raw)
        elif download_url:
            text = self.transport.fetch_text(download_url)
        else:
            text = content or ""

        return Blob(
            path=require(response, "path", "Content"),
            sha=require(response, "sha", "Content"),
            text=text,
            download_url=download_url,
        )

    def put(
        self,
        owner: str,
        name: str,
        path: str,
        text: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> FileCommit:
        """
        Create or update a file.

        Args:
            owner: Owner login
            name: Repository name
            path: File path within the repository
            text: New file content
            message: Commit message
            branch: Branch to commit to
            sha: Blob hash of the file being replaced; omit to create it

        Returns:
            FileCommit with the new commit and blob hashes

        Raises:
            ConflictError: If ``sha`` no longer matches the file on ``branch``
        """
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha is not None:
            body["sha"] = sha

        response = self.transport.request(
            "PUT", _contents_url(owner, name, path), body=body
        )
        content = require(response, "content", "File commit")
        commit = require(response, "commit", "File commit")
        return FileCommit(
            path=require(content, "path", "File commit content"),
            commit_sha=require(commit, "sha", "File commit"),
            blob_sha=require(content, "sha", "File commit content"),
        )
