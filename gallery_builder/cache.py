"""Content-hash change detection for fragment directories."""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional

logger = logging.getLogger(__name__)


def file_hash(path: Path) -> str | None:
    """MD5 hex digest of a file's bytes, or None if it cannot be read."""
    try:
        return hashlib.md5(path.read_bytes()).hexdigest()
    except OSError as exc:
        logger.warning(f"Failed to hash {path}: {exc}")
        return None


def directory_hash(paths: Iterable[Path], base_dir: Path) -> str:
    """Combined digest over a set of files.

    Each file contributes ``<relative-path>:<md5>``; entries are sorted by
    path and joined with ``|`` so the digest changes when any file is
    added, removed, renamed or edited.

    Args:
        paths: Files to include
        base_dir: Directory the relative paths are computed from

    Returns:
        MD5 hex digest of the combined entries
    """
    entries = []
    for path in sorted(paths, key=lambda p: p.relative_to(base_dir).as_posix()):
        digest = file_hash(path)
        if digest:
            entries.append(f"{path.relative_to(base_dir).as_posix()}:{digest}")
    return hashlib.md5("|".join(entries).encode("utf-8")).hexdigest()


class HashCache:
    """Small JSON file mapping cache keys to content digests."""

    def __init__(self, path: Path):
        self.path = path
        self._data: Optional[Dict[str, str]] = None

    @property
    def data(self) -> Dict[str, str]:
        if self._data is None:
            self._data = self.load()
        return self._data

    def load(self) -> Dict[str, str]:
        """Read the cache file; missing or corrupt caches start empty."""
        if not self.path.exists():
            return {}

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.warning(f"Ignoring unreadable cache {self.path}: {exc}")
            return {}

        if not isinstance(raw, dict):
            logger.warning(f"Ignoring malformed cache {self.path}")
            return {}
        return {str(key): str(value) for key, value in raw.items()}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def clear(self) -> None:
        self._data = {}

    def save(self) -> None:
        """Persist the cache.

        Note:
            Errors are logged but not raised.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")
            logger.debug(f"Saved cache {self.path}")
        except OSError as exc:
            logger.warning(f"Failed to save cache {self.path}: {exc}")
