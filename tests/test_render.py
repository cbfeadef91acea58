"""Tests for markdown and JSON rendering."""

import json

from repochangelog.domain import (
    Commit,
    IssueData,
    Author,
    PullRequestRef,
    ReleaseBucket,
    Category,
    PackageGroup,
    Release,
    UNRELEASED_TAG,
)
from repochangelog.render import render_commit, render_markdown, render_json


def make_commit(sha, number, title, login="alice"):
    return Commit(sha=sha, message="m", date="2024-05-01").enrich(IssueData(
        number=number,
        title=title,
        labels=("bug",),
        pull_request=PullRequestRef(number, f"https://github.com/o/r/pull/{number}"),
        user=Author(login=login, html_url=f"https://github.com/{login}"),
    ))


C1 = make_commit("c1", 1, "Fix crash")
C2 = make_commit("c2", 2, "Speed up parser", login="bob")


def release(key, categories, committers=(), date="2024-05-01"):
    return Release(bucket=ReleaseBucket(key=key, date=date), categories=tuple(categories),
                   committers=tuple(committers))


class TestRenderCommit:

    def test_pull_request_line(self):
        assert render_commit(C1) == \
            "[#1](https://github.com/o/r/pull/1) Fix crash. ([@alice](https://github.com/alice))"

    def test_issue_without_pull_request(self):
        commit = Commit(sha="c", message="m", date="d").enrich(IssueData(
            number=5, title="Docs", user=Author("bob", "https://github.com/bob")))
        assert render_commit(commit) == "Docs. ([@bob](https://github.com/bob))"


class TestRenderMarkdown:
    """Tests for render_markdown()."""

    def test_package_groups(self):
        category = Category("bug", ":bug: Bug Fix", commits=(C1, C2), groups=(
            PackageGroup(("core",), (C1,)),
            PackageGroup(("cli", "core"), (C2,)),
        ))
        md = render_markdown([release("v1.0.0", [category], ["[alice](https://github.com/alice)"])])

        assert md == (
            "\n"
            "## v1.0.0 (2024-05-01)\n"
            "\n"
            "#### :bug: Bug Fix\n"
            "* `core`\n"
            "  * [#1](https://github.com/o/r/pull/1) Fix crash. ([@alice](https://github.com/alice))\n"
            "* `cli`, `core`\n"
            "  * [#2](https://github.com/o/r/pull/2) Speed up parser. ([@bob](https://github.com/bob))\n"
            "\n"
            "#### Committers: 1\n"
            "- [alice](https://github.com/alice)"
        )

    def test_single_other_group_is_flat(self):
        category = Category("bug", "Bugs", commits=(C1,), groups=(PackageGroup((), (C1,)),))
        md = render_markdown([release("v1.0.0", [category])])

        assert "* Other" not in md
        assert "\n* [#1](https://github.com/o/r/pull/1) Fix crash." in md
        assert md.endswith("#### Committers: 0\n")

    def test_empty_categories_and_releases_skipped(self):
        category = Category("bug", "Bugs", commits=(C1,), groups=(PackageGroup((), (C1,)),))
        releases = [
            release(UNRELEASED_TAG, [Category("feat", "Features")]),
            release("v1.0.0", [Category("feat", "Features"), category]),
        ]
        md = render_markdown(releases)

        assert "Unreleased" not in md
        assert "Features" not in md
        assert md.startswith("\n## v1.0.0")

    def test_releases_separated(self):
        category = Category("bug", "Bugs", commits=(C1,), groups=(PackageGroup((), (C1,)),))
        md = render_markdown([release("v2.0.0", [category]), release("v1.0.0", [category])])
        assert "#### Committers: 0\n\n\n\n## v1.0.0" in md

    def test_next_version_titles_unreleased(self):
        category = Category("bug", "Bugs", commits=(C1,), groups=(PackageGroup((), (C1,)),))
        md = render_markdown([release(UNRELEASED_TAG, [category], date="2024-06-01")], next_version="v1.1.0")
        assert md.startswith("\n## v1.1.0 (2024-06-01)")

    def test_unreleased_title(self):
        category = Category("bug", "Bugs", commits=(C1,), groups=(PackageGroup((), (C1,)),))
        md = render_markdown([release(UNRELEASED_TAG, [category])])
        assert md.startswith("\n## Unreleased (")

    def test_nothing_to_render(self):
        assert render_markdown([]) == "\n"


class TestRenderJson:

    def test_structure(self):
        category = Category("bug", "Bugs", commits=(C1,), groups=(PackageGroup((), (C1,)),))
        data = json.loads(render_json([release("v1.0.0", [category], ["x"])]))

        assert data[0]["tag"] == "v1.0.0"
        assert data[0]["committers"] == ["x"]
        assert data[0]["categories"][0]["single_implicit_group"] is True
        assert data[0]["categories"][0]["groups"][0]["commits"][0]["sha"] == "c1"
