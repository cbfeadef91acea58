"""
Release grouping objects for repochangelog.

Buckets, categories and package groups are computed fresh for every
changelog run and thrown away after rendering.
"""

from dataclasses import dataclass
from typing import Tuple, List, Dict, Any

from .commit import Commit

# Bucket key for commits newer than the most recent tag in the range
UNRELEASED_TAG = "___unreleased___"

OTHER_HEADING = "Other"


@dataclass(frozen=True)
class ReleaseBucket:
    """
    Commits attributed to one release tag.

    Attributes:
        key: Tag name, or UNRELEASED_TAG
        date: Release date (ISO `YYYY-MM-DD`)
        commits: Commits in walk order
    """
    key: str
    date: str
    commits: Tuple[Commit, ...] = ()

    @property
    def is_unreleased(self) -> bool:
        return self.key == UNRELEASED_TAG

    @property
    def title(self) -> str:
        return "Unreleased" if self.is_unreleased else self.key

    def append(self, commit: Commit) -> 'ReleaseBucket':
        return ReleaseBucket(key=self.key, date=self.date, commits=self.commits + (commit,))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'title': self.title,
            'date': self.date,
            'commits': [c.sha for c in self.commits],
        }


@dataclass(frozen=True)
class PackageGroup:
    """Commits within a category that touched exactly the same packages."""
    packages: Tuple[str, ...]
    commits: Tuple[Commit, ...] = ()

    @property
    def is_other(self) -> bool:
        return not self.packages

    @property
    def heading(self) -> str:
        if self.is_other:
            return OTHER_HEADING
        return ", ".join(f"`{pkg}`" for pkg in self.packages)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'heading': self.heading,
            'packages': list(self.packages),
            'commits': [c.to_dict() for c in self.commits],
        }


@dataclass(frozen=True)
class Category:
    """
    A configured label with the commits of a bucket that carry it.

    `groups` is empty until the category has been split by package.
    """
    label: str
    heading: str
    commits: Tuple[Commit, ...] = ()
    groups: Tuple[PackageGroup, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.commits

    @property
    def single_implicit_group(self) -> bool:
        """True when every commit fell into the "Other" group."""
        return len(self.groups) == 1 and self.groups[0].is_other

    def to_dict(self) -> Dict[str, Any]:
        return {
            'label': self.label,
            'heading': self.heading,
            'single_implicit_group': self.single_implicit_group,
            'groups': [g.to_dict() for g in self.groups],
        }


@dataclass(frozen=True)
class Release:
    """Everything the assembler needs to render one release section."""
    bucket: ReleaseBucket
    categories: Tuple[Category, ...] = ()
    committers: Tuple[str, ...] = ()

    @property
    def visible_categories(self) -> List[Category]:
        return [c for c in self.categories if not c.is_empty]

    @property
    def has_changes(self) -> bool:
        return any(not c.is_empty for c in self.categories)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tag': self.bucket.key,
            'title': self.bucket.title,
            'date': self.bucket.date,
            'categories': [c.to_dict() for c in self.visible_categories],
            'committers': list(self.committers),
        }
