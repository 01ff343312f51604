"""Users resource client."""

from typing import TYPE_CHECKING, Any

from docedit.clients._parsing import require
from docedit.types.users import User

if TYPE_CHECKING:
    from docedit.transport import HTTPTransport


def _parse_user(data: dict[str, Any]) -> User:
    return User(
        login=require(data, "login", "User"),
        user_id=require(data, "id", "User"),
        name=data.get("name"),
    )


class UsersClient:
    """Client for identity lookups."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def get_authenticated(self) -> User:
        """
        Get the identity the access token belongs to.

        Raises:
            AuthenticationError: If the token is invalid or expired
        """
        return _parse_user(self.transport.request("GET", "/user"))
