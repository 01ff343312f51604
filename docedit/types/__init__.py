"""docedit type definitions.

This module exports all forge data model types.
"""

from docedit.types.contents import Blob, FileCommit
from docedit.types.git import Branch
from docedit.types.pulls import PullRequest
from docedit.types.repos import Repository, RepositoryRef
from docedit.types.users import User

__all__ = [
    "User",
    "Repository",
    "RepositoryRef",
    "Branch",
    "Blob",
    "FileCommit",
    "PullRequest",
]
