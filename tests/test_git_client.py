"""Tests for GitClient with mocked subprocess calls."""

import subprocess
from unittest.mock import patch, Mock

import pytest

from repochangelog.exit_codes import GitError
from repochangelog.infra.git_client import GitClient, GitLogEntry, parse_ref_names


def completed(stdout="", returncode=0, stderr=""):
    return Mock(stdout=stdout, returncode=returncode, stderr=stderr)


class TestParseRefNames:

    def test_decorations(self):
        refs = parse_ref_names("HEAD -> main, tag: v1.0.0, origin/main")
        assert refs == ("HEAD -> main", "tag: v1.0.0", "origin/main")

    def test_empty(self):
        assert parse_ref_names("") == ()

    def test_tag_names(self):
        entry = GitLogEntry(sha="a", ref_names=("tag: v1.0.0", "tag: pkg@2.0.0", "main"), summary="s", date="d")
        assert entry.tag_names == ("v1.0.0", "pkg@2.0.0")


class TestGitClient:
    """Tests for GitClient."""

    def test_list_commits_parses_log(self):
        output = (
            "aaa\x1fHEAD -> main\x1fMerge pull request #2 from x/y\x1f2024-05-02\x1f1714640000\n"
            "bbb\x1ftag: v1.0.0\x1fRelease v1.0.0; bump\x1f2024-05-01\x1f1714550000\n"
        )
        client = GitClient()
        with patch("subprocess.run", return_value=completed(output)) as run:
            entries = client.list_commits("v0.9.0")

        assert [e.sha for e in entries] == ["aaa", "bbb"]
        assert entries[1].tag_names == ("v1.0.0",)
        assert entries[1].summary == "Release v1.0.0; bump"
        assert entries[0].date == "2024-05-02"
        assert entries[0].timestamp == 1714640000
        cmd = run.call_args.args[0]
        assert cmd[0] == "git"
        assert cmd[-1] == "v0.9.0..HEAD"

    def test_list_commits_uses_utc_dates(self):
        # newest commit made at 2024-05-01T19:00-1000, the older at 2024-05-02T10:00+0900
        output = (
            "bbb\x1f\x1fSecond\x1f2024-05-02\x1f1714626000\n"
            "aaa\x1f\x1fFirst\x1f2024-05-02\x1f1714611600\n"
        )
        client = GitClient()
        with patch("subprocess.run", return_value=completed(output)) as run:
            entries = client.list_commits("v0.9.0")

        assert [e.timestamp for e in entries] == [1714626000, 1714611600]
        assert "--date=format-local:%Y-%m-%d" in run.call_args.args[0]
        assert run.call_args.kwargs["env"]["TZ"] == "UTC"

    def test_list_commits_skips_malformed_lines(self):
        output = "aaa\x1f\x1fNo timestamp\x1f2024-05-02\n"
        client = GitClient()
        with patch("subprocess.run", return_value=completed(output)):
            assert client.list_commits("v0.9.0") == []

    def test_list_commits_with_tag_to(self):
        client = GitClient()
        with patch("subprocess.run", return_value=completed("")) as run:
            assert client.list_commits("v1.0.0", "v2.0.0") == []
        assert run.call_args.args[0][-1] == "v1.0.0..v2.0.0"

    def test_changed_paths(self):
        client = GitClient()
        with patch("subprocess.run", return_value=completed("\npackages/core/a.js\nREADME.md\n")):
            assert client.changed_paths("abc") == ["packages/core/a.js", "README.md"]

    def test_list_tag_names(self):
        client = GitClient()
        with patch("subprocess.run", return_value=completed("v1.0.0\nv1.1.0\n")):
            assert client.list_tag_names() == ["v1.0.0", "v1.1.0"]

    def test_last_tag(self):
        client = GitClient()
        with patch("subprocess.run", return_value=completed("v1.1.0\n")):
            assert client.last_tag() == "v1.1.0"

    def test_runs_in_cwd(self):
        client = GitClient(cwd="/repo")
        with patch("subprocess.run", return_value=completed("/repo\n")) as run:
            assert client.root_path() == "/repo"
        assert run.call_args.kwargs["cwd"] == "/repo"

    def test_nonzero_exit_raises_with_git_message(self):
        client = GitClient()
        failure = completed(returncode=128, stderr="fatal: No names found, cannot describe anything.\n")
        with patch("subprocess.run", return_value=failure):
            with pytest.raises(GitError) as exc_info:
                client.last_tag()
        assert str(exc_info.value) == "fatal: No names found, cannot describe anything."
        assert exc_info.value.exit_code == 72

    def test_timeout_raises(self):
        client = GitClient(timeout=1)
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("git", 1)):
            with pytest.raises(GitError, match="timed out"):
                client.list_tag_names()

    def test_missing_git_raises(self):
        client = GitClient()
        with patch("subprocess.run", side_effect=FileNotFoundError("git")):
            with pytest.raises(GitError, match="not found"):
                client.list_tag_names()

    def test_remote_url(self):
        client = GitClient()
        with patch("subprocess.run", return_value=completed("git@github.com:owner/repo.git\n")):
            assert client.remote_url() == "git@github.com:owner/repo.git"

    def test_remote_url_missing(self):
        client = GitClient()
        with patch("subprocess.run", return_value=completed(returncode=1)):
            assert client.remote_url() is None
