"""docedit forge resource clients."""

from docedit.clients.contents import ContentsClient
from docedit.clients.git import GitClient
from docedit.clients.pulls import PullsClient
from docedit.clients.repos import ReposClient
from docedit.clients.users import UsersClient

__all__ = [
    "UsersClient",
    "ReposClient",
    "GitClient",
    "ContentsClient",
    "PullsClient",
]
