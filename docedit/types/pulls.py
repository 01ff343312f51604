"""Pull request-related data models."""

from dataclasses import dataclass


@dataclass
class PullRequest:
    """Pull request information."""

    number: int
    title: str
    state: str  # "open" or "closed"
    html_url: str
    head_ref: str
    head_label: str  # "<owner>:<branch>"
    base_ref: str
    body: str | None = None
