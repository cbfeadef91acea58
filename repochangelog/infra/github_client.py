"""
GitHub API client infrastructure for repochangelog.

Provides the two lookups the changelog needs:
- Issue / pull request data for a referenced number
- User profile data for committer attribution

Failures raise APIError with the original message. Nothing is retried:
a changelog missing data for even one commit is considered wrong.
"""

import os
import time
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

import requests

from ..domain.commit import IssueData
from ..exit_codes import APIError
from .response_cache import ResponseCache

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_WEB_URL = "https://github.com"


@dataclass
class RateLimitStatus:
    """GitHub API rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp

    @property
    def minutes_until_reset(self) -> int:
        """Minutes until rate limit resets."""
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Check if rate limit is getting low (< 100 remaining)."""
        return self.remaining < 100


@dataclass(frozen=True)
class GitHubUser:
    """A GitHub user profile."""
    login: str
    html_url: str
    name: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'GitHubUser':
        """Create from a GitHub `/users/{login}` payload."""
        return cls(
            login=data.get('login', ''),
            html_url=data.get('html_url', ''),
            name=data.get('name') or None,
        )


class GitHubClient:
    """
    GitHub REST API client for one repository.

    Example:
        client = GitHubClient("owner/repo", token=os.environ["GITHUB_AUTH"])
        issue = client.get_issue_data(42)
        print(issue.title, issue.labels)
    """

    def __init__(
        self,
        repo: str,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        web_url: str = DEFAULT_WEB_URL,
        timeout: int = 30,
        cache: Optional[ResponseCache] = None
    ):
        """
        Initialize GitHubClient.

        Args:
            repo: Repository slug, "owner/name"
            token: GitHub token (defaults to GITHUB_AUTH or GITHUB_TOKEN env var)
            api_url: REST API base URL (GitHub Enterprise installs differ)
            web_url: Web base URL used for issue links
            timeout: HTTP request timeout in seconds
            cache: Optional on-disk response cache
        """
        self.repo = repo
        self.token = token or os.environ.get('GITHUB_AUTH') or os.environ.get('GITHUB_TOKEN')
        self.api_url = api_url.rstrip('/')
        self.web_url = web_url.rstrip('/')
        self.timeout = timeout
        self.cache = cache
        self._rate_limit_status: Optional[RateLimitStatus] = None

        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'repochangelog',
        })
        if self.token:
            self.session.headers['Authorization'] = f'token {self.token}'
        else:
            logger.warning(
                "No GitHub token configured (set GITHUB_AUTH); "
                "unauthenticated requests are heavily rate limited"
            )

    @property
    def base_issue_url(self) -> str:
        """URL prefix that an issue number is appended to."""
        return f"{self.web_url}/{self.repo}/issues/"

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Rate limit status seen on the last API response."""
        return self._rate_limit_status

    def _update_rate_limit_from_headers(self, headers) -> None:
        """Update rate limit status from response headers."""
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_time = int(headers.get('X-RateLimit-Reset', 0))
        except (ValueError, TypeError):
            return

        if remaining < 0 or limit < 0:
            return

        self._rate_limit_status = RateLimitStatus(
            remaining=remaining,
            limit=limit,
            reset_time=reset_time,
        )
        if self._rate_limit_status.is_low:
            logger.warning(
                f"GitHub API rate limit low: {remaining}/{limit} remaining, "
                f"resets in {self._rate_limit_status.minutes_until_reset} minutes"
            )

    def _get(self, endpoint: str) -> Dict[str, Any]:
        """GET an API endpoint and return the decoded JSON body."""
        url = f"{self.api_url}/{endpoint}"
        logger.debug(f"GET {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise APIError(f"GitHub API request failed for {endpoint}: {e}")

        self._update_rate_limit_from_headers(response.headers)

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise APIError(str(e), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"GitHub API returned invalid JSON for {endpoint}: {e}")

    def _cached_get(self, namespace: str, key: str, endpoint: str) -> Dict[str, Any]:
        if self.cache is not None:
            data = self.cache.get(namespace, key)
            if data is not None:
                return data

        data = self._get(endpoint)

        if self.cache is not None:
            self.cache.set(namespace, key, data)
        return data

    def get_issue_data(self, number: int) -> IssueData:
        """
        Get issue (or pull request) data.

        Args:
            number: Issue or pull request number

        Returns:
            IssueData for the issue

        Raises:
            APIError: if the lookup fails
        """
        data = self._cached_get(
            f"{self.repo}/issues", str(number), f"repos/{self.repo}/issues/{number}"
        )
        return IssueData.from_api_response(data)

    def get_user_data(self, login: str) -> GitHubUser:
        """
        Get a user's profile.

        Raises:
            APIError: if the lookup fails
        """
        data = self._cached_get("users", login, f"users/{login}")
        return GitHubUser.from_api_response(data)
