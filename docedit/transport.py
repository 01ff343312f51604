"""
HTTP Transport for docedit.

Handles HTTP communication with the GitHub REST API: bearer authentication,
automatic retry logic, per-call timeouts and error handling.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from docedit.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DocEditError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    ServerError,
    ValidationError,
)
from docedit.logging import log_http_request, log_http_response

GITHUB_API_VERSION = "2022-11-28"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    # Writes are only retried on 429 or when the connection was never made
    idempotent_methods: list[str] = field(default_factory=lambda: ["GET", "HEAD"])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    HTTP transport layer with authentication and retry logic.

    Handles:
    - Bearer token authentication
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    - Notifying the session when the token is rejected (401)
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: OAuth access token
            timeout: Per-request timeout in seconds
            retry_config: Configuration for retry behavior
            on_unauthorized: Called once a response reports the token invalid
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self.on_unauthorized = on_unauthorized

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make an API request with automatic retry.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH)
            path: API path (e.g., "/repos/acme/docs")
            params: Query parameters
            body: JSON request body

        Returns:
            Parsed JSON response (object or array); empty dict for 204

        Raises:
            DocEditError: On API errors
        """
        def make_request() -> httpx.Response:
            log_http_request(method, path, body=body)
            started = time.monotonic()
            response = self._client.request(method, path, params=params, json=body)
            log_http_response(
                response.status_code,
                path,
                elapsed_ms=(time.monotonic() - started) * 1000,
                request_id=response.headers.get("X-GitHub-Request-Id"),
            )
            return response

        response = self._execute_with_retry(make_request, method)
        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    def fetch_text(self, url: str) -> str:
        """
        Fetch a raw text resource (e.g. a file's ``download_url``).

        Args:
            url: Absolute URL

        Returns:
            Response body as text
        """
        def make_request() -> httpx.Response:
            log_http_request("GET", url)
            response = self._client.request("GET", url)
            log_http_response(response.status_code, url)
            return response

        return self._execute_with_retry(make_request, "GET").text

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response], method: str = "GET"
    ) -> httpx.Response:
        """
        Execute a request with automatic retry on retryable errors.

        Non-idempotent requests (PUT, POST, PATCH) are retried only on 429
        and on connection failures, where the request never reached GitHub.
        A 5xx or a timeout on a write may follow a write that was applied.

        Args:
            request_fn: Function that makes the HTTP request
            method: HTTP method of the request

        Returns:
            Successful HTTP response

        Raises:
            DocEditError: On non-retryable errors or after max retries
        """
        idempotent = self._is_idempotent(method)
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                response = request_fn()

                if response.status_code < 400:
                    return response

                # Parse error response
                error = self._parse_error_response(response)

                if isinstance(error, AuthenticationError) and self.on_unauthorized:
                    self.on_unauthorized()

                # Check if we should retry
                if not self._should_retry(response.status_code, attempt, method):
                    raise error

                last_error = error

                # Calculate backoff time
                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                time.sleep(wait_time)

            except httpx.TimeoutException as e:
                if not idempotent or attempt >= self.retry_config.max_retries:
                    raise RequestTimeoutError(
                        "REQUEST_TIMEOUT",
                        f"No response within {self.timeout}s: {e}",
                    ) from e

                last_error = e
                time.sleep(self._get_backoff_time(attempt, None))

            except httpx.RequestError as e:
                # Network errors are retryable
                retryable = idempotent or isinstance(e, httpx.ConnectError)
                if not retryable or attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                time.sleep(wait_time)

        if last_error:
            if isinstance(last_error, DocEditError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _is_idempotent(self, method: str) -> bool:
        return method.upper() in self.retry_config.idempotent_methods

    def _should_retry(self, status_code: int, attempt: int, method: str = "GET") -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)
            method: HTTP method of the request

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        if status_code not in self.retry_config.retry_on:
            return False

        return status_code == 429 or self._is_idempotent(method)

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        # Exponential backoff: backoff_factor ^ attempt
        base_wait = self.retry_config.backoff_factor ** attempt

        # Apply jitter (±jitter%)
        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> DocEditError:
        """
        Parse a GitHub error response into a typed exception.

        GitHub error bodies look like ``{"message": "...", "errors": [...]}``.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate DocEditError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = data.get("message") or f"HTTP {status_code}"
        details = [
            item.get("message") or item.get("code")
            for item in data.get("errors", [])
            if isinstance(item, dict)
        ]
        if details:
            message = f"{message} ({'; '.join(str(d) for d in details if d)})"
        request_id = response.headers.get("X-GitHub-Request-Id")

        if status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, request_id)
        elif status_code == 403:
            if response.headers.get("X-RateLimit-Remaining") == "0":
                return RateLimitedError(
                    "RATE_LIMITED", message, self._retry_after(response), request_id
                )
            return AuthorizationError("FORBIDDEN", message, request_id)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, request_id)
        elif status_code == 409:
            return ConflictError("CONFLICT", message, request_id)
        elif status_code == 429:
            return RateLimitedError(
                "RATE_LIMITED", message, self._retry_after(response), request_id
            )
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, request_id)
        else:
            return ValidationError("VALIDATION_FAILED", message, request_id)

    @staticmethod
    def _retry_after(response: httpx.Response) -> int:
        retry_after_str = response.headers.get("Retry-After", "60")
        try:
            return int(retry_after_str)
        except ValueError:
            return 60
