"""
docedit logging utilities.

Provides configurable logging for HTTP requests/responses and repository
workflow steps. Ensures no credentials (OAuth codes, access tokens,
Authorization headers) are logged.
"""

import logging
import re
from typing import Any

# Create package loggers
_sdk_logger = logging.getLogger("docedit")
_http_logger = logging.getLogger("docedit.http")
_workflow_logger = logging.getLogger("docedit.workflow")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # GitHub token formats (classic, OAuth, user-to-server, server-to-server, refresh)
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}\b"), "[TOKEN_REDACTED]"),
    (re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}\b"), "[TOKEN_REDACTED]"),
    # Authorization header values
    (re.compile(r"(Bearer|token)\s+[A-Za-z0-9_\-\.=]{16,}", re.IGNORECASE), r"\1 [REDACTED]"),
    # OAuth authorization codes in query strings
    (re.compile(r"([?&]code=)[^&\s]+"), r"\1[REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|client_secret)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_SENSITIVE_KEYS = {"authorization", "token", "access_token", "secret", "password", "code"}


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    workflow_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure docedit logging.

    Args:
        level: Default log level for all docedit loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        workflow_level: Log level for repository workflow steps (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from docedit.logging import configure_logging

        # Show every forge call while debugging a save
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _workflow_logger.setLevel(workflow_level if workflow_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a docedit logger.

    Args:
        name: Logger name suffix (e.g., "http", "workflow"). If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"docedit.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask credentials in a string.

    Args:
        text: Text that may contain tokens or authorization codes

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Keys to mask (default: authorization, token, secret, password, code)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in sensitive_keys:
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        elif isinstance(value, str):
            result[key] = mask_sensitive_data(value)
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """
    Log an HTTP request at DEBUG level with sensitive data masked.

    File contents are large and base64 encoded, so a ``content`` field is
    logged by length only.
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {mask_sensitive_data(url)}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        safe_body = safe_log_dict(body)
        if isinstance(safe_body.get("content"), str):
            safe_body["content"] = f"<{len(safe_body['content'])} chars>"
        log_parts.append(f"body={safe_body}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
    request_id: str | None = None,
) -> None:
    """Log an HTTP response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {mask_sensitive_data(url)}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if request_id:
        log_parts.append(f"request_id={request_id}")

    _http_logger.debug(" | ".join(log_parts))


def log_workflow_step(step: str, **fields: Any) -> None:
    """
    Log a repository workflow step at INFO level.

    Args:
        step: Step name (e.g., "fork_created", "branch_created")
        **fields: Identifying values (owner, repository, branch, path)
    """
    if not _workflow_logger.isEnabledFor(logging.INFO):
        return

    details = ", ".join(f"{key}={value}" for key, value in fields.items())
    _workflow_logger.info(f"{step}: {details}" if details else step)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_workflow_step",
]
