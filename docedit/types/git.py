"""Git reference data models."""

from dataclasses import dataclass


@dataclass
class Branch:
    """A branch (``refs/heads/<name>``) and the commit it points to."""

    name: str
    sha: str
