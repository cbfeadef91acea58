"""
Category classification for repochangelog.

Groups the commits of a release by configured label, then splits each
category by the set of packages its commits touched.
"""

import re
from typing import Dict, List, Mapping, Sequence, Tuple

from ..domain.commit import Commit
from ..domain.release import Category, PackageGroup
from .packages import PackageAttributor

# "fixes #12", "Closed T12", "resolve #3", ...
COMMIT_FIX_REGEX = re.compile(r'(fix|close|resolve)(e?s|e?d)? [T#](\d+)', re.IGNORECASE)

# Output of a previous rewrite: "Closes [#12](...)"
_REWRITTEN_REGEX = re.compile(r'Closes \[#\d+\]\(')


def normalize_title(title: str, base_issue_url: str) -> str:
    """
    Rewrite the first "fixes #N" style reference into an issue link.

    "Fix #12: crash" -> "Closes [#12](<base_issue_url>12): crash"

    Titles that already contain a rewritten link are returned as-is, so
    applying this twice gives the same result as applying it once.
    """
    if not title or _REWRITTEN_REGEX.search(title):
        return title
    return COMMIT_FIX_REGEX.sub(
        lambda m: f"Closes [#{m.group(3)}]({base_issue_url}{m.group(3)})",
        title,
        count=1,
    )


def classify(commits: Sequence[Commit], labels: Mapping[str, str]) -> List[Category]:
    """
    Group commits by configured label.

    Args:
        commits: Commits of one release bucket
        labels: Ordered mapping of label name -> category heading

    Returns:
        One Category per configured label, in configuration order,
        including categories with no commits. Commits matching no
        label are left out.
    """
    return [
        Category(
            label=label,
            heading=heading,
            commits=tuple(c for c in commits if c.has_label(label)),
        )
        for label, heading in labels.items()
    ]


class CategoryClassifier:
    """
    Classifies release commits and splits categories by package.

    Example:
        classifier = CategoryClassifier(labels, attributor, client.base_issue_url)
        for category in classifier.classify(bucket.commits):
            if not category.is_empty:
                category = classifier.group_by_package(category)
    """

    def __init__(
        self,
        labels: Mapping[str, str],
        attributor: PackageAttributor,
        base_issue_url: str
    ):
        self.labels = labels
        self.attributor = attributor
        self.base_issue_url = base_issue_url

    def classify(self, commits: Sequence[Commit]) -> List[Category]:
        return classify(commits, self.labels)

    def group_by_package(self, category: Category) -> Category:
        """
        Split a category's commits by the packages they touched.

        Groups appear in the order their first commit appears; a commit
        touching no package lands in the "Other" group. Display titles
        are normalized on the way.
        """
        grouped: Dict[Tuple[str, ...], List[Commit]] = {}
        for commit in category.commits:
            packages = tuple(sorted(self.attributor.unique_packages_of(commit.sha)))
            title = commit.title
            if title:
                commit = commit.with_title(normalize_title(title, self.base_issue_url))
            grouped.setdefault(packages, []).append(commit)

        groups = tuple(
            PackageGroup(packages=packages, commits=tuple(commits))
            for packages, commits in grouped.items()
        )
        return Category(
            label=category.label,
            heading=category.heading,
            commits=tuple(c for group in groups for c in group.commits),
            groups=groups,
        )
