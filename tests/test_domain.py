"""Tests for the domain layer."""

import pytest

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
    find_pull_request_id,
)

SAMPLE_ISSUE = {
    "number": 42,
    "title": "Add --dry-run flag",
    "labels": [{"name": "enhancement"}, {"name": "cli"}],
    "pull_request": {"html_url": "https://github.com/owner/repo/pull/42"},
    "user": {"login": "alice", "html_url": "https://github.com/alice"},
}


class TestFindPullRequestId:
    """Tests for find_pull_request_id()."""

    def test_merge_commit(self):
        assert find_pull_request_id("Merge pull request #123 from alice/feature") == 123

    def test_squash_merge(self):
        assert find_pull_request_id("Add dark mode (#77)") == 77

    def test_homu_merge(self):
        assert find_pull_request_id("Auto merge of #5 - bob:patch-1, r=alice") == 5

    def test_only_first_line(self):
        assert find_pull_request_id("Refactor parser\n\nMerge pull request #9 from x/y") is None

    def test_plain_commit(self):
        assert find_pull_request_id("Fix typo in README") is None

    def test_reference_not_at_end(self):
        assert find_pull_request_id("See (#12) for context") is None


class TestIssueData:
    """Tests for IssueData.from_api_response()."""

    def test_full_payload(self):
        issue = IssueData.from_api_response(SAMPLE_ISSUE)

        assert issue.number == 42
        assert issue.title == "Add --dry-run flag"
        assert issue.labels == ("enhancement", "cli")
        assert issue.pull_request == PullRequestRef(42, "https://github.com/owner/repo/pull/42")
        assert issue.user == Author(login="alice", html_url="https://github.com/alice")

    def test_plain_issue_has_no_pull_request(self):
        payload = dict(SAMPLE_ISSUE)
        del payload["pull_request"]
        assert IssueData.from_api_response(payload).pull_request is None

    def test_missing_fields(self):
        issue = IssueData.from_api_response({"number": 3})
        assert issue.title == ""
        assert issue.labels == ()
        assert issue.user is None


class TestCommit:
    """Tests for Commit."""

    def test_bare_commit_properties(self):
        commit = Commit(sha="abc", message="msg", date="2024-01-01")

        assert not commit.is_enriched
        assert commit.title is None
        assert commit.labels == ()
        assert commit.user is None
        assert commit.number is None

    def test_enrich_returns_new_commit(self):
        commit = Commit(sha="abc", message="msg", date="2024-01-01", tags=("v1.0.0",))
        enriched = commit.enrich(IssueData.from_api_response(SAMPLE_ISSUE))

        assert enriched is not commit
        assert not commit.is_enriched
        assert enriched.is_enriched
        assert enriched.sha == "abc"
        assert enriched.tags == ("v1.0.0",)
        assert enriched.title == "Add --dry-run flag"
        assert enriched.user.login == "alice"

    def test_enrich_only_once(self):
        commit = Commit(sha="abc", message="msg", date="2024-01-01").enrich(IssueData(number=1))
        with pytest.raises(ValueError):
            commit.enrich(IssueData(number=2))

    def test_has_label_case_insensitive(self):
        commit = Commit(sha="abc", message="m", date="d").enrich(IssueData(number=1, labels=("Bug",)))
        assert commit.has_label("bug")
        assert commit.has_label("BUG")
        assert not commit.has_label("enhancement")

    def test_with_title(self):
        commit = Commit(sha="abc", message="m", date="d").enrich(IssueData(number=1, title="old"))
        renamed = commit.with_title("new")
        assert renamed.title == "new"
        assert commit.title == "old"

    def test_with_title_on_bare_commit(self):
        commit = Commit(sha="abc", message="m", date="d")
        assert commit.with_title("new") is commit

    def test_to_dict(self):
        d = Commit(sha="abc", message="m", date="d").to_dict()
        assert d == {"sha": "abc", "message": "m", "date": "d", "tags": [], "issue": None}


class TestRelease:
    """Tests for release grouping objects."""

    def test_bucket_title(self):
        assert ReleaseBucket(key=UNRELEASED_TAG, date="d").title == "Unreleased"
        assert ReleaseBucket(key="v1.0.0", date="d").title == "v1.0.0"

    def test_bucket_append(self):
        commit = Commit(sha="abc", message="m", date="d")
        bucket = ReleaseBucket(key="v1", date="d")
        appended = bucket.append(commit)
        assert appended.commits == (commit,)
        assert bucket.commits == ()

    def test_package_group_heading(self):
        assert PackageGroup(packages=()).heading == "Other"
        assert PackageGroup(packages=("cli", "core")).heading == "`cli`, `core`"

    def test_visible_categories(self):
        commit = Commit(sha="abc", message="m", date="d")
        release = Release(
            bucket=ReleaseBucket(key="v1", date="d"),
            categories=(Category("a", "A"), Category("b", "B", commits=(commit,))),
        )
        assert [c.label for c in release.visible_categories] == ["b"]
        assert release.has_changes

    def test_release_without_changes(self):
        release = Release(bucket=ReleaseBucket(key="v1", date="d"), categories=(Category("a", "A"),))
        assert not release.has_changes
        assert release.to_dict()["categories"] == []
