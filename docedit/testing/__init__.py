"""docedit testing utilities.

Provides a mock forge client and fixtures for testing code built on docedit.
"""

from docedit.testing.fixtures import create_mock_forge, create_sample_config
from docedit.testing.mock import MockCall, MockGitHubClient, MockResponse

__all__ = [
    # Mock client
    "MockGitHubClient",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_forge",
    "create_sample_config",
]
