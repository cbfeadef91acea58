"""
Domain layer for repochangelog.

Contains pure domain objects with no I/O or side effects:
- Commit: A commit, optionally enriched with issue/PR metadata
- ReleaseBucket: Commits attributed to one release tag
- Category / PackageGroup: Label and package groupings within a release
- Release: The structured result handed to the assembler

All objects are immutable and provide to_dict() for JSON output.
"""

from .commit import Commit, IssueData, Author, PullRequestRef, find_pull_request_id
from .release import (
    ReleaseBucket,
    Category,
    PackageGroup,
    Release,
    UNRELEASED_TAG,
    OTHER_HEADING,
)

__all__ = [
    'Commit',
    'IssueData',
    'Author',
    'PullRequestRef',
    'find_pull_request_id',
    'ReleaseBucket',
    'Category',
    'PackageGroup',
    'Release',
    'UNRELEASED_TAG',
    'OTHER_HEADING',
]
