"""
Progress reporting utilities for repochangelog.

Progress goes to stderr so stdout stays clean for the changelog itself.
Bars are rendered with rich and only shown on a terminal (or when forced
with --verbose / REPOCHANGELOG_PROGRESS=1).
"""

import os
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn


class ProgressReporter:
    """Handles progress reporting to stderr while keeping stdout clean for data."""

    def __init__(self, enabled: Optional[bool] = None, console: Optional[Console] = None):
        """
        Initialize progress reporter.

        Args:
            enabled: Explicitly enable/disable progress. None = auto-detect
            console: Console to draw on (default: a stderr console)
        """
        if enabled is None:
            enabled = sys.stderr.isatty()
        self.enabled = enabled
        self.console = console or Console(stderr=True)

    def __call__(self, message: str, force: bool = False):
        """Output a progress message if enabled."""
        if force or self.enabled:
            self.console.print(escape(message), style="dim")

    def error(self, message: str):
        """Always output errors."""
        self.console.print(f"[red]ERROR:[/red] {escape(message)}")

    def warning(self, message: str):
        """Output warnings if enabled."""
        if self.enabled:
            self.console.print(f"[yellow]WARNING:[/yellow] {escape(message)}")

    @contextmanager
    def task(self, description: str, total: int) -> Iterator[Callable[[str], None]]:
        """
        Track a task of `total` steps.

        Example:
            with progress.task("Fetching PR data", total=len(commits)) as tick:
                for commit in commits:
                    tick(commit.sha)
        """
        bar = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("[dim]{task.fields[item]}"),
            console=self.console,
            transient=True,
            disable=not self.enabled,
        )
        task_id = bar.add_task(description, total=total, item="")

        def tick(item: str = ""):
            bar.update(task_id, advance=1, item=escape(item))

        with bar:
            yield tick


# Global progress reporter instance
_progress: Optional[ProgressReporter] = None


def get_progress(enabled: Optional[bool] = None) -> ProgressReporter:
    """
    Get the global progress reporter.

    Args:
        enabled: Override auto-detection of progress display

    Returns:
        ProgressReporter instance
    """
    global _progress
    if _progress is None or enabled is not None:
        if enabled is None and os.environ.get('REPOCHANGELOG_PROGRESS') in ('0', '1'):
            enabled = os.environ['REPOCHANGELOG_PROGRESS'] == '1'
        _progress = ProgressReporter(enabled)
    return _progress
