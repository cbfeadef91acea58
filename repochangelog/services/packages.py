"""
Package attribution for repochangelog.

Maps a commit to the monorepo sub-packages it touched, using the
`packages/<name>/...` path convention.
"""

from typing import Dict, List
import logging

from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)

DEFAULT_PACKAGES_DIR = "packages/"


class PackageAttributor:
    """
    Resolves the packages changed by a commit.

    Results are memoised for the lifetime of the instance; create one
    attributor per changelog run.

    Example:
        attributor = PackageAttributor(GitClient())
        attributor.unique_packages_of("a1b2c3")   # -> ["core", "cli"]
    """

    def __init__(self, git_client: GitClient, packages_dir: str = DEFAULT_PACKAGES_DIR):
        self.git = git_client
        self.prefix = packages_dir if packages_dir.endswith('/') else packages_dir + '/'
        self._cache: Dict[str, List[str]] = {}

    def package_of(self, path: str) -> str:
        """Package name for a path, or "" when outside the packages directory."""
        if not path.startswith(self.prefix):
            return ""
        return path[len(self.prefix):].split('/', 1)[0]

    def unique_packages_of(self, sha: str) -> List[str]:
        """
        Distinct package names changed by a commit, in first-seen order.

        Raises:
            GitError: if the git query fails
        """
        if sha not in self._cache:
            packages: List[str] = []
            for path in self.git.changed_paths(sha):
                name = self.package_of(path)
                if name and name not in packages:
                    packages.append(name)
            logger.debug(f"{sha[:8]} touched packages: {packages or 'none'}")
            self._cache[sha] = packages
        return list(self._cache[sha])
