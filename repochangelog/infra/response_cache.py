"""
On-disk cache for GitHub API responses.

Issue and user payloads rarely change once a release is out, so repeated
changelog runs can reuse them. Each payload is one JSON file:

    <cache_dir>/<namespace>/<key>.json

Writes are atomic (write to temp, then rename) so concurrent enrichment
workers never observe a half-written file.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9._-]')


class ResponseCache:
    """
    JSON file cache keyed by (namespace, key).

    Example:
        cache = ResponseCache(Path("~/.cache/repochangelog"))
        cache.set("issues", "42", payload)
        payload = cache.get("issues", "42")
    """

    def __init__(self, root: Path):
        self.root = Path(root).expanduser().resolve()

    def _path_for(self, namespace: str, key: str) -> Path:
        safe_ns = _UNSAFE_CHARS.sub('_', namespace)
        safe_key = _UNSAFE_CHARS.sub('_', key)
        return self.root / safe_ns / f"{safe_key}.json"

    def get(self, namespace: str, key: str) -> Optional[Dict[str, Any]]:
        """Return the cached payload, or None on a miss or unreadable file."""
        path = self._path_for(namespace, key)
        if not path.exists():
            return None

        try:
            with open(path, 'r') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable cache entry {path}: {e}")
            return None

    def set(self, namespace: str, key: str, data: Dict[str, Any]) -> None:
        """Store a payload atomically."""
        path = self._path_for(namespace, key)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write('\n')

            os.replace(temp_path, path)

        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise
