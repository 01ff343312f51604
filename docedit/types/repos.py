"""Repository-related data models."""

from dataclasses import dataclass


@dataclass
class RepositoryRef:
    """Pointer to another repository, e.g. the parent of a fork."""

    owner: str
    name: str
    default_branch: str | None = None

    def matches(self, owner: str, name: str) -> bool:
        """Compare by owner and name; GitHub treats both case-insensitively."""
        return (
            self.owner.lower() == owner.lower()
            and self.name.lower() == name.lower()
        )


@dataclass
class Repository:
    """Repository information."""

    owner: str
    name: str
    full_name: str
    default_branch: str
    fork: bool
    parent: RepositoryRef | None
    html_url: str | None = None
