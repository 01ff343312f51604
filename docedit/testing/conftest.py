"""
Pytest plugin for docedit testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["docedit.testing.conftest"]

Or import the fixtures directly:

    from docedit.testing.fixtures import mock_client, sample_repository
"""

# Re-export all fixtures for pytest auto-discovery
from docedit.testing.fixtures import (
    editor_config,
    mock_client,
    sample_blob,
    sample_branch,
    sample_fork,
    sample_pull_request,
    sample_repository,
)

__all__ = [
    "mock_client",
    "editor_config",
    "sample_repository",
    "sample_fork",
    "sample_branch",
    "sample_blob",
    "sample_pull_request",
]
