"""
repochangelog - Release changelogs for multi-package repositories.

Builds a changelog from the git history of a tag range and the GitHub
issues / pull requests the commits reference. Commits are grouped by
release tag, by configured label and by the `packages/<name>` directories
they touched; each release lists its committers.

Quick Start:
    from repochangelog import ChangelogService, load_config, render_markdown

    service = ChangelogService.from_config(load_config())
    releases = service.build(tag_from="v1.0.0")
    print(render_markdown(releases))

Domain Objects:
    Commit - A commit, optionally enriched with issue/PR data
    ReleaseBucket - Commits attributed to one release tag
    Category / PackageGroup - Label and package groupings
    Release - Structured result of one release section
"""

__version__ = "0.1.0"

from .domain import (
    Commit,
    IssueData,
    ReleaseBucket,
    Category,
    PackageGroup,
    Release,
    UNRELEASED_TAG,
)

from .services import (
    ChangelogService,
    PackageAttributor,
    CategoryClassifier,
    CommitterAggregator,
    CommitEnricher,
    bucket_by_tag,
)

from .config import load_config, validate_config
from .render import render_markdown, render_json

__all__ = [
    "__version__",
    # Domain objects
    "Commit",
    "IssueData",
    "ReleaseBucket",
    "Category",
    "PackageGroup",
    "Release",
    "UNRELEASED_TAG",
    # Services
    "ChangelogService",
    "PackageAttributor",
    "CategoryClassifier",
    "CommitterAggregator",
    "CommitEnricher",
    "bucket_by_tag",
    # Configuration
    "load_config",
    "validate_config",
    # Rendering
    "render_markdown",
    "render_json",
]
