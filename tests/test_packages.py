"""Tests for package attribution."""

from unittest.mock import Mock

import pytest

from repochangelog.exit_codes import GitError
from repochangelog.services.packages import PackageAttributor


def make_attributor(paths, packages_dir="packages/"):
    git = Mock()
    git.changed_paths.return_value = paths
    return PackageAttributor(git, packages_dir), git


class TestPackageAttributor:
    """Tests for PackageAttributor."""

    def test_extracts_first_segment(self):
        attributor, _ = make_attributor([
            "packages/core/src/index.js",
            "packages/cli/bin/run.js",
        ])
        assert attributor.unique_packages_of("abc") == ["core", "cli"]

    def test_deduplicates_in_first_seen_order(self):
        attributor, _ = make_attributor([
            "packages/cli/a.js",
            "packages/core/b.js",
            "packages/cli/c.js",
        ])
        assert attributor.unique_packages_of("abc") == ["cli", "core"]

    def test_ignores_paths_outside_prefix(self):
        attributor, _ = make_attributor([
            "README.md",
            "docs/packages/core.md",
            "src/packages/core/x.js",
            "packages/core/x.js",
        ])
        assert attributor.unique_packages_of("abc") == ["core"]

    def test_no_packages(self):
        attributor, _ = make_attributor(["README.md", ".github/workflows/ci.yml"])
        assert attributor.unique_packages_of("abc") == []

    def test_custom_prefix_without_slash(self):
        attributor, _ = make_attributor(["libs/alpha/x.py", "packages/beta/y.py"], packages_dir="libs")
        assert attributor.unique_packages_of("abc") == ["alpha"]

    def test_memoised_per_instance(self):
        attributor, git = make_attributor(["packages/core/x.js"])
        attributor.unique_packages_of("abc")
        result = attributor.unique_packages_of("abc")

        assert result == ["core"]
        git.changed_paths.assert_called_once_with("abc")

    def test_returned_list_is_a_copy(self):
        attributor, _ = make_attributor(["packages/core/x.js"])
        attributor.unique_packages_of("abc").append("oops")
        assert attributor.unique_packages_of("abc") == ["core"]

    def test_git_failure_propagates(self):
        git = Mock()
        git.changed_paths.side_effect = GitError("fatal: bad object abc")
        attributor = PackageAttributor(git)

        with pytest.raises(GitError, match="bad object"):
            attributor.unique_packages_of("abc")
