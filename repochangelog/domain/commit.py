"""
Commit domain object for repochangelog.

A commit starts out bare (what `git log` tells us) and may be enriched
exactly once with the issue or pull request it references. Enrichment is
an explicit merge, so code reading a commit never has to guess which
fields the GitHub payload happened to carry.
"""

import re
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Dict, Any

# First-line patterns produced by the usual GitHub merge strategies
_MERGE_PR_RE = re.compile(r'^Merge pull request #(\d+) from ')
_SQUASH_PR_RE = re.compile(r'\(#(\d+)\)$')
_HOMU_PR_RE = re.compile(r'^Auto merge of #(\d+) - ')


def find_pull_request_id(message: str) -> Optional[int]:
    """
    Find the pull request number referenced by a commit message.

    Recognises merge commits ("Merge pull request #12 from ..."),
    squash merges ("Add thing (#12)") and bors/homu merges
    ("Auto merge of #12 - ...").  Only the first line is inspected.

    Returns:
        The pull request number, or None
    """
    first_line = message.split('\n', 1)[0].strip()
    for pattern in (_MERGE_PR_RE, _SQUASH_PR_RE, _HOMU_PR_RE):
        match = pattern.search(first_line)
        if match:
            return int(match.group(1))
    return None


@dataclass(frozen=True)
class Author:
    """The GitHub user an issue or pull request belongs to."""
    login: str
    html_url: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'login': self.login, 'html_url': self.html_url, 'name': self.name}


@dataclass(frozen=True)
class PullRequestRef:
    """Link to the pull request behind an issue payload."""
    number: int
    html_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {'number': self.number, 'html_url': self.html_url}


@dataclass(frozen=True)
class IssueData:
    """
    Remote metadata for the issue or pull request a commit references.

    Attributes:
        number: Issue/PR number
        title: Issue/PR title, used as the display title of the commit
        labels: Label names, in the order GitHub returns them
        pull_request: Set when the issue is a pull request
        user: Author of the issue/PR
    """
    number: int
    title: str = ""
    labels: Tuple[str, ...] = ()
    pull_request: Optional[PullRequestRef] = None
    user: Optional[Author] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'IssueData':
        """Create from a GitHub `/repos/{repo}/issues/{n}` payload."""
        number = int(data.get('number') or 0)

        labels = tuple(
            label['name'] if isinstance(label, dict) else str(label)
            for label in data.get('labels') or []
        )

        pull_request = None
        pr_info = data.get('pull_request')
        if isinstance(pr_info, dict) and pr_info.get('html_url'):
            pull_request = PullRequestRef(number=number, html_url=pr_info['html_url'])

        user = None
        user_info = data.get('user')
        if isinstance(user_info, dict) and user_info.get('login'):
            user = Author(
                login=user_info['login'],
                html_url=user_info.get('html_url', ''),
                name=user_info.get('name'),
            )

        return cls(
            number=number,
            title=data.get('title') or '',
            labels=labels,
            pull_request=pull_request,
            user=user,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'title': self.title,
            'labels': list(self.labels),
            'pull_request': self.pull_request.to_dict() if self.pull_request else None,
            'user': self.user.to_dict() if self.user else None,
        }


@dataclass(frozen=True)
class Commit:
    """
    A commit in the changelog range.

    A commit with `issue is None` is bare: it is bucketed like any other
    commit but, having no labels, never lands in a category.

    Attributes:
        sha: Full commit hash
        message: Summary line of the commit message
        date: Commit date as ISO `YYYY-MM-DD`
        tags: Tag names that point directly at this commit
        issue: Remote issue/PR metadata, once enriched
        timestamp: Commit time in UTC seconds (0 when unknown)
    """
    sha: str
    message: str
    date: str
    tags: Tuple[str, ...] = ()
    issue: Optional[IssueData] = field(default=None)
    timestamp: int = 0

    @property
    def is_enriched(self) -> bool:
        return self.issue is not None

    @property
    def title(self) -> Optional[str]:
        return self.issue.title if self.issue else None

    @property
    def labels(self) -> Tuple[str, ...]:
        return self.issue.labels if self.issue else ()

    @property
    def number(self) -> Optional[int]:
        return self.issue.number if self.issue else None

    @property
    def pull_request(self) -> Optional[PullRequestRef]:
        return self.issue.pull_request if self.issue else None

    @property
    def user(self) -> Optional[Author]:
        return self.issue.user if self.issue else None

    def has_label(self, name: str) -> bool:
        """Case-insensitive label check."""
        wanted = name.lower()
        return any(label.lower() == wanted for label in self.labels)

    def enrich(self, issue: IssueData) -> 'Commit':
        """Return a copy of this commit carrying remote issue data."""
        if self.issue is not None:
            raise ValueError(f"Commit {self.sha} is already enriched")
        return replace(self, issue=issue)

    def with_title(self, title: str) -> 'Commit':
        """Return a copy with a rewritten display title."""
        if self.issue is None:
            return self
        return replace(self, issue=replace(self.issue, title=title))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sha': self.sha,
            'message': self.message,
            'date': self.date,
            'tags': list(self.tags),
            'issue': self.issue.to_dict() if self.issue else None,
        }
