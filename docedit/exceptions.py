"""docedit exception classes."""


class DocEditError(Exception):
    """Base exception for all docedit errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(DocEditError):
    """Raised when editor configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class MissingDocumentPathError(ConfigurationError):
    """Raised when no document path can be derived from the page URL."""

    pass


class AuthenticationError(DocEditError):
    """Raised when the credential is rejected or cannot be obtained."""

    pass


class AuthorizationError(DocEditError):
    """Raised when access is denied."""

    pass


class NotFoundError(DocEditError):
    """Raised when a resource is not found."""

    pass


class ConflictError(DocEditError):
    """Raised when a write is rejected because the content hash is stale."""

    pass


class RateLimitedError(DocEditError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(DocEditError):
    """Raised on validation errors (422 and malformed responses)."""

    pass


class ServerError(DocEditError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class RequestTimeoutError(DocEditError):
    """Raised when a forge or token endpoint call exceeds its timeout."""

    pass


class OwnershipConflictError(DocEditError):
    """Raised when the working repository is not a fork of the upstream."""

    def __init__(self, message: str) -> None:
        super().__init__("OWNERSHIP_CONFLICT", message)


class ForkTimeoutError(DocEditError):
    """Raised when a newly created fork does not become reachable in time."""

    def __init__(self, message: str) -> None:
        super().__init__("FORK_TIMEOUT", message)


class DocumentFormatError(DocEditError):
    """Raised when a document's front matter or body cannot be parsed."""

    def __init__(self, message: str) -> None:
        super().__init__("DOCUMENT_FORMAT_ERROR", message)
