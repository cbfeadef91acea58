"""
Rendering functions for repochangelog output.

Services return structured Release data; this module turns it into the
markdown changelog (or JSON, for tooling).
"""

import json
from typing import List, Optional, Sequence

from .domain.commit import Commit
from .domain.release import Category, Release


def render_commit(commit: Commit) -> str:
    """One changelog line: PR link, title and author."""
    line = ""
    if commit.number and commit.pull_request and commit.pull_request.html_url:
        line += f"[#{commit.number}]({commit.pull_request.html_url}) "

    line += f"{commit.title or commit.message}."

    if commit.user:
        line += f" ([@{commit.user.login}]({commit.user.html_url}))"
    return line


def render_category(category: Category) -> List[str]:
    """
    Render a category as markdown lines.

    When every commit is in the implicit "Other" group the package
    sub-headings are dropped and commits are listed flat.
    """
    lines = [f"#### {category.heading}"]
    flat = category.single_implicit_group

    for group in category.groups:
        if not flat:
            lines.append(f"* {group.heading}")
        for commit in group.commits:
            bullet = "* " if flat else "  * "
            lines.append(bullet + render_commit(commit))

    return lines


def render_release(release: Release, next_version: Optional[str] = None) -> str:
    """Render one release section."""
    title = release.bucket.title
    if release.bucket.is_unreleased and next_version:
        title = next_version

    sections = [f"## {title} ({release.bucket.date})"]
    for category in release.visible_categories:
        sections.append("\n".join(render_category(category)))

    sections.append(
        f"#### Committers: {len(release.committers)}\n"
        + "\n".join(f"- {committer}" for committer in release.committers)
    )

    return "\n\n".join(sections)


def render_markdown(releases: Sequence[Release], next_version: Optional[str] = None) -> str:
    """
    Render releases as a markdown changelog.

    Releases whose commits match no configured label are skipped.

    Args:
        releases: Releases newest first
        next_version: Title used instead of "Unreleased"
    """
    rendered = [render_release(r, next_version) for r in releases if r.has_changes]
    return "\n" + "\n\n\n".join(rendered)


def render_json(releases: Sequence[Release], pretty: bool = False) -> str:
    """Render releases with changes as a JSON document."""
    data = [r.to_dict() for r in releases if r.has_changes]
    return json.dumps(data, indent=2 if pretty else None, ensure_ascii=False)
