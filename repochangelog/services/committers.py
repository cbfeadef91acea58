"""
Committer aggregation for repochangelog.
"""

from typing import Dict, List, Optional, Sequence
import logging

from ..domain.commit import Commit
from ..infra.github_client import GitHubClient, GitHubUser

logger = logging.getLogger(__name__)


def format_committer(login: str, user: GitHubUser) -> str:
    """'Jane Doe ([jdoe](url))', or '[jdoe](url)' when the name is unknown."""
    link = f"[{login}]({user.html_url})"
    if user.name:
        return f"{user.name} ({link})"
    return link


class CommitterAggregator:
    """
    Builds the deduplicated, sorted committer list of a release.

    Lookups are issued one at a time in commit order. Lookup failures
    propagate; there is no partial result.
    """

    def __init__(self, github_client: GitHubClient, ignore_committers: Optional[Sequence[str]] = None):
        self.github = github_client
        self.ignore_committers = list(ignore_committers or [])

    def is_ignored(self, login: str) -> bool:
        """A login is ignored when any token equals it or occurs in it."""
        return any(token == login or token in login for token in self.ignore_committers)

    def aggregate(self, commits: Sequence[Commit]) -> List[str]:
        committers: Dict[str, str] = {}

        for commit in commits:
            login = commit.user.login if commit.user else None
            if not login or login in committers:
                continue
            if self.is_ignored(login):
                logger.debug(f"Ignoring committer {login}")
                continue

            user = self.github.get_user_data(login)
            committers[login] = format_committer(login, user)

        return sorted(committers.values())
