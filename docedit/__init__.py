"""docedit - edit documentation pages in place and propose changes via GitHub."""

from docedit.client import GitHubClient
from docedit.config import EditorConfig
from docedit.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DocEditError,
    DocumentFormatError,
    ForkTimeoutError,
    MissingDocumentPathError,
    NotFoundError,
    OwnershipConflictError,
    RateLimitedError,
    RequestTimeoutError,
    ServerError,
    ValidationError,
)
from docedit.logging import configure_logging, get_logger
from docedit.page import EditorPage, EditorView
from docedit.session import Redirect, SessionContext, SessionManager, SessionState
from docedit.transcoder import decode, encode
from docedit.transport import HTTPTransport, RetryConfig
from docedit.workflow import PollConfig, RepositoryWorkflow, branch_name_for

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Page controller
    "EditorPage",
    "EditorView",
    "EditorConfig",
    # Session
    "SessionManager",
    "SessionContext",
    "SessionState",
    "Redirect",
    # Workflow
    "RepositoryWorkflow",
    "PollConfig",
    "branch_name_for",
    # Transcoder
    "decode",
    "encode",
    # Client
    "GitHubClient",
    "HTTPTransport",
    "RetryConfig",
    # Exceptions
    "DocEditError",
    "ConfigurationError",
    "MissingDocumentPathError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "RequestTimeoutError",
    "OwnershipConflictError",
    "ForkTimeoutError",
    "DocumentFormatError",
    # Logging
    "configure_logging",
    "get_logger",
]
