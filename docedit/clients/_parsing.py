"""Boundary validation for forge response payloads."""

from typing import Any

from docedit.exceptions import ValidationError


def require(data: Any, key: str, kind: str) -> Any:
    """
    Return ``data[key]``, failing if the payload is not an object or lacks it.

    Args:
        data: Decoded JSON payload
        key: Required field
        kind: Response type name used in the error message

    Raises:
        ValidationError: If the field is missing or null
    """
    if not isinstance(data, dict):
        raise ValidationError(
            "INVALID_RESPONSE", f"{kind} response is not an object"
        )
    value = data.get(key)
    if value is None:
        raise ValidationError(
            "INVALID_RESPONSE", f"{kind} response missing '{key}'"
        )
    return value
