"""
Commit ingestion for repochangelog.

Lists the commits of a tag range, marks the ones tags point at, and
merges in the issue/pull request each commit message references.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple
import logging

from ..domain.commit import Commit, find_pull_request_id
from ..infra.git_client import GitClient, GitLogEntry
from ..infra.github_client import GitHubClient
from ..progress import ProgressReporter, get_progress

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 5


class CommitEnricher:
    """
    Produces the enriched, newest-first commit list of a tag range.

    Issue lookups run on a bounded thread pool; the output keeps the
    order of `git log` whatever order the lookups finish in.
    """

    def __init__(
        self,
        git_client: GitClient,
        github_client: GitHubClient,
        concurrency: int = DEFAULT_CONCURRENCY,
        progress: Optional[ProgressReporter] = None
    ):
        self.git = git_client
        self.github = github_client
        self.concurrency = concurrency
        self.progress = progress or get_progress()

    def _tags_of(self, entry: GitLogEntry, all_tags: Sequence[str]) -> Tuple[str, ...]:
        referenced = set(entry.tag_names)
        return tuple(tag for tag in all_tags if tag in referenced)

    def _enrich_one(self, entry: GitLogEntry, all_tags: Sequence[str]) -> Commit:
        commit = Commit(
            sha=entry.sha,
            message=entry.summary,
            date=entry.date,
            tags=self._tags_of(entry, all_tags),
            timestamp=entry.timestamp,
        )

        number = find_pull_request_id(entry.summary)
        if number is None:
            return commit

        logger.debug(f"{entry.sha[:8]} references #{number}")
        return commit.enrich(self.github.get_issue_data(number))

    def enrich(self, tag_from: Optional[str] = None, tag_to: Optional[str] = None) -> List[Commit]:
        """
        List and enrich the commits between two tags.

        Args:
            tag_from: Start of the range (default: the last tag)
            tag_to: End of the range (default: HEAD)

        Raises:
            GitError, APIError: collaborator failures are never swallowed
        """
        tag_from = tag_from or self.git.last_tag()
        entries = self.git.list_commits(tag_from, tag_to)
        all_tags = self.git.list_tag_names()
        logger.info(f"Found {len(entries)} commits in {tag_from}..{tag_to or 'HEAD'}")

        commits: List[Commit] = []
        with self.progress.task("Fetching PR data", total=len(entries)) as tick:
            with ThreadPoolExecutor(max_workers=self.concurrency) as executor:
                for commit in executor.map(lambda e: self._enrich_one(e, all_tags), entries):
                    tick(commit.sha[:8])
                    commits.append(commit)

        return commits
