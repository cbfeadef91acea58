"""
Changelog service for repochangelog.

Orchestrates the pipeline for one changelog run:

    git log -> enrichment -> tag buckets -> categories / committers
            -> package groups -> Release results

Every call to build() starts from scratch; nothing is shared between runs.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from ..config import repo_from_remote_url, validate_config
from ..domain.release import Release
from ..exit_codes import ConfigError
from ..infra.git_client import GitClient
from ..infra.github_client import GitHubClient
from ..infra.response_cache import ResponseCache
from ..progress import ProgressReporter, get_progress
from .bucketing import assert_newest_first, bucket_by_tag
from .classifier import CategoryClassifier
from .committers import CommitterAggregator
from .enrichment import CommitEnricher
from .packages import PackageAttributor

logger = logging.getLogger(__name__)


class ChangelogService:
    """
    Builds structured release data for a tag range.

    Example:
        service = ChangelogService.from_config(load_config())
        releases = service.build(tag_from="v1.0.0")
        print(render_markdown(releases))
    """

    def __init__(
        self,
        config: Dict[str, Any],
        git_client: GitClient,
        github_client: GitHubClient,
        progress: Optional[ProgressReporter] = None
    ):
        self.config = validate_config(config)
        self.git = git_client
        self.github = github_client
        self.progress = progress or get_progress()

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        cwd: Optional[str] = None,
        progress: Optional[ProgressReporter] = None
    ) -> 'ChangelogService':
        """
        Create a service with real git and GitHub clients.

        The repository slug falls back to the `origin` remote.

        Raises:
            ConfigError: if the configuration is invalid or no repository
                slug can be determined
        """
        validate_config(config)
        git_client = GitClient(cwd=cwd)

        repo = config.get('repo')
        if not repo:
            remote = git_client.remote_url()
            repo = repo_from_remote_url(remote) if remote else None
            if not repo:
                raise ConfigError(
                    "Could not infer 'repo' from the git remote; "
                    "set it in the changelog configuration (\"owner/name\")"
                )
            logger.debug(f"Inferred repository {repo} from origin remote")

        github_config = config.get('github', {})
        cache_dir = config.get('cache_dir')
        github_client = GitHubClient(
            repo=repo,
            token=github_config.get('token') or None,
            api_url=github_config.get('api_url', 'https://api.github.com'),
            web_url=github_config.get('web_url', 'https://github.com'),
            timeout=github_config.get('timeout_seconds', 30),
            cache=ResponseCache(Path(cache_dir)) if cache_dir else None,
        )
        return cls(config, git_client, github_client, progress=progress)

    def build(self, tag_from: Optional[str] = None, tag_to: Optional[str] = None) -> List[Release]:
        """
        Build the releases of a tag range, newest first.

        Args:
            tag_from: Start of the range (default: the last tag)
            tag_to: End of the range (default: HEAD)

        Raises:
            GitError, APIError: collaborator failures propagate unchanged
        """
        enricher = CommitEnricher(
            self.git,
            self.github,
            concurrency=self.config.get('concurrency', 5),
            progress=self.progress,
        )
        commits = enricher.enrich(tag_from, tag_to)
        assert_newest_first(commits)

        buckets = bucket_by_tag(commits)

        attributor = PackageAttributor(self.git, self.config.get('packages_dir', 'packages/'))
        classifier = CategoryClassifier(self.config['labels'], attributor, self.github.base_issue_url)
        aggregator = CommitterAggregator(self.github, self.config.get('ignore_committers'))

        releases = []
        for bucket in buckets.values():
            categories = classifier.classify(bucket.commits)

            with self.progress.task(f"Grouping {bucket.title}", total=len(categories)) as tick:
                grouped = []
                for category in categories:
                    tick(category.heading)
                    if not category.is_empty:
                        category = classifier.group_by_package(category)
                    grouped.append(category)

            releases.append(Release(
                bucket=bucket,
                categories=tuple(grouped),
                committers=tuple(aggregator.aggregate(bucket.commits)),
            ))

        return releases
