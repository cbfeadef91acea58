"""
Infrastructure layer for repochangelog.

Contains abstractions for external systems:
- GitClient: Git command execution
- GitHubClient: GitHub API access
- ResponseCache: On-disk cache of GitHub API payloads

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, GitLogEntry
from .github_client import GitHubClient, GitHubUser, RateLimitStatus
from .response_cache import ResponseCache

__all__ = [
    'GitClient',
    'GitLogEntry',
    'GitHubClient',
    'GitHubUser',
    'RateLimitStatus',
    'ResponseCache',
]
