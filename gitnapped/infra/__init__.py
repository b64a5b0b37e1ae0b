"""
Infrastructure layer for gitnapped.

Contains abstractions for external systems:
- GitClient: Git command execution

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient

__all__ = [
    'GitClient',
]
