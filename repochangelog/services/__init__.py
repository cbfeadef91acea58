"""
Service layer for repochangelog.

Contains the changelog engine and the orchestration around it:
- PackageAttributor: Packages touched by a commit
- bucket_by_tag: Commits per release tag
- CategoryClassifier: Commits per configured label and package
- CommitterAggregator: Deduplicated committer list
- CommitEnricher: Commit listing and issue/PR enrichment
- ChangelogService: The whole pipeline

Services are the primary API for commands to use.
"""

from .packages import PackageAttributor
from .bucketing import bucket_by_tag, assert_newest_first
from .classifier import CategoryClassifier, classify, normalize_title
from .committers import CommitterAggregator
from .enrichment import CommitEnricher
from .changelog_service import ChangelogService

__all__ = [
    'PackageAttributor',
    'bucket_by_tag',
    'assert_newest_first',
    'CategoryClassifier',
    'classify',
    'normalize_title',
    'CommitterAggregator',
    'CommitEnricher',
    'ChangelogService',
]
