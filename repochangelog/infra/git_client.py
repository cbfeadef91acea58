"""
Git client infrastructure for repochangelog.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

Unlike a best-effort client, every failure raises GitError: a changelog
built from partial git data would be wrong.
"""

import os
import subprocess
from dataclasses import dataclass
from typing import Dict, Optional, List, Tuple
import logging

from ..exit_codes import GitError

logger = logging.getLogger(__name__)

# ASCII unit separator; cannot appear in a commit subject line
FIELD_SEP = '\x1f'
LOG_FORMAT = '%H%x1f%D%x1f%s%x1f%cd%x1f%ct'

# Commit dates are rendered as UTC calendar days (with TZ=UTC)
LOG_DATE_FORMAT = '--date=format-local:%Y-%m-%d'


@dataclass(frozen=True)
class GitLogEntry:
    """A single line of `git log` output."""
    sha: str
    ref_names: Tuple[str, ...]
    summary: str
    date: str
    timestamp: int = 0

    @property
    def tag_names(self) -> Tuple[str, ...]:
        """Tag names among the ref decorations ("tag: v1.0.0")."""
        return tuple(ref[len('tag: '):] for ref in self.ref_names if ref.startswith('tag: '))


def parse_ref_names(decoration: str) -> Tuple[str, ...]:
    """Split a `%D` decoration ("HEAD -> main, tag: v1.0.0") into refs."""
    return tuple(ref.strip() for ref in decoration.split(',') if ref.strip())


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient("/path/to/repo")
        for entry in client.list_commits(client.last_tag()):
            print(entry.sha, entry.summary)
    """

    def __init__(self, cwd: Optional[str] = None, timeout: int = 30):
        """
        Initialize GitClient.

        Args:
            cwd: Repository working directory (default: current directory)
            timeout: Command timeout in seconds (default: 30)
        """
        self.cwd = cwd
        self.timeout = timeout

    def _run(self, args: List[str], env: Optional[Dict[str, str]] = None) -> str:
        """
        Run a git command and return its stdout.

        Raises:
            GitError: on a non-zero exit, a timeout, or a missing git binary
        """
        cmd = ['git'] + args
        printable = ' '.join(cmd)
        logger.debug(f"Running: {printable}")

        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                env=env,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            raise GitError(f"Git command timed out after {self.timeout}s: {printable}", printable)
        except FileNotFoundError as e:
            raise GitError(f"git executable not found: {e}", printable)

        if result.returncode != 0:
            message = (result.stderr or result.stdout or '').strip()
            raise GitError(message or f"{printable} exited with {result.returncode}", printable)

        return result.stdout

    def root_path(self) -> str:
        """Absolute path of the repository's top-level directory."""
        return self._run(['rev-parse', '--show-toplevel']).strip()

    def remote_url(self, remote: str = "origin") -> Optional[str]:
        """
        Get remote URL.

        Returns:
            Remote URL or None if the remote is not configured
        """
        try:
            output = self._run(['config', '--get', f'remote.{remote}.url'])
        except GitError:
            return None
        return output.strip() or None

    def changed_paths(self, sha: str) -> List[str]:
        """Paths changed by a commit (first-parent diff for merges)."""
        output = self._run(['show', '-m', '--name-only', '--pretty=format:', '--first-parent', sha])
        return [line.strip() for line in output.splitlines() if line.strip()]

    def list_tag_names(self) -> List[str]:
        """All tag names in the repository."""
        output = self._run(['tag'])
        return [line.strip() for line in output.splitlines() if line.strip()]

    def last_tag(self) -> str:
        """The most recent tag reachable from HEAD."""
        return self._run(['describe', '--abbrev=0', '--tags']).strip()

    def list_commits(self, tag_from: str, tag_to: Optional[str] = None) -> List[GitLogEntry]:
        """
        List commits in `tag_from..tag_to` (tag_to defaults to HEAD).

        Returns:
            GitLogEntry objects, newest first (git log order). `date` is
            the UTC commit day and `timestamp` the UTC commit time in
            seconds, whatever timezone each commit was made in.
        """
        rev_range = f"{tag_from}..{tag_to or 'HEAD'}"
        output = self._run(
            ['log', f'--pretty=format:{LOG_FORMAT}', LOG_DATE_FORMAT, rev_range],
            env={**os.environ, 'TZ': 'UTC'},
        )

        entries = []
        for line in output.splitlines():
            if not line or FIELD_SEP not in line:
                continue

            parts = line.split(FIELD_SEP, 4)
            if len(parts) < 5 or not parts[4].strip().isdigit():
                logger.debug(f"Skipping malformed log line: {line!r}")
                continue

            sha, decoration, summary, date, timestamp = parts
            entries.append(GitLogEntry(
                sha=sha.strip(),
                ref_names=parse_ref_names(decoration),
                summary=summary.strip(),
                date=date.strip(),
                timestamp=int(timestamp),
            ))

        return entries
