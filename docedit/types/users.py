"""Identity data models."""

from dataclasses import dataclass


@dataclass
class User:
    """The identity behind an access token."""

    login: str
    user_id: int
    name: str | None
