"""
Tag bucketing for repochangelog.

Walks commits newest first and assigns each to the release tag(s) that
contain it. The walk is a fold over an immutable state: the current tag
set plus the buckets built so far.

A commit that carries tags switches the current tag set to exactly those
tags, and is itself part of the new set. When several tags point at the
same commit (simultaneous releases), every following commit is appended
to each of their buckets, so the same commit appears in several buckets.
"""

from datetime import date
from functools import reduce
from typing import Dict, Iterable, NamedTuple, Optional, Sequence, Tuple

from ..domain.commit import Commit
from ..domain.release import ReleaseBucket, UNRELEASED_TAG


class _WalkState(NamedTuple):
    current_tags: Tuple[str, ...]
    buckets: Dict[str, ReleaseBucket]


def today_iso() -> str:
    return date.today().isoformat()


def _step(state: _WalkState, commit: Commit, today: str) -> _WalkState:
    current_tags = tuple(commit.tags) if commit.tags else state.current_tags

    updates = {}
    for tag in current_tags:
        bucket = state.buckets.get(tag)
        if bucket is None:
            release_date = today if tag == UNRELEASED_TAG else commit.date
            bucket = ReleaseBucket(key=tag, date=release_date)
        updates[tag] = bucket.append(commit)

    return _WalkState(current_tags=current_tags, buckets={**state.buckets, **updates})


def bucket_by_tag(commits: Iterable[Commit], today: Optional[str] = None) -> Dict[str, ReleaseBucket]:
    """
    Partition commits into per-release buckets.

    Args:
        commits: Commits newest first, as listed by `git log`
        today: Date used for the unreleased bucket (default: today)

    Returns:
        Buckets keyed by tag name (or UNRELEASED_TAG), in first-seen order.
        The unreleased bucket is absent when no commit precedes the first tag.
    """
    today = today or today_iso()
    initial = _WalkState(current_tags=(UNRELEASED_TAG,), buckets={})
    final = reduce(lambda state, commit: _step(state, commit, today), commits, initial)
    return final.buckets


def assert_newest_first(commits: Sequence[Commit]) -> None:
    """
    Check the ordering contract of ingested commits.

    Bucket membership depends on walk order; git log lists newest first.
    A sequence whose first commit is older than its last was almost
    certainly reversed somewhere upstream.

    Only UTC commit timestamps are compared. Calendar dates depend on
    the committer's timezone, so a newer commit can carry an earlier
    day. Commits without a timestamp are not checked.

    Raises:
        ValueError: if the sequence looks oldest first
    """
    if len(commits) < 2:
        return
    first, last = commits[0], commits[-1]
    if first.timestamp and last.timestamp and first.timestamp < last.timestamp:
        raise ValueError(
            f"Commits must be listed newest first; got {first.sha[:8]} ({first.date}) "
            f"before {last.sha[:8]} ({last.date})"
        )
