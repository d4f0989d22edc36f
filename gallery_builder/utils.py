"""Shared utility helpers for the gallery build toolkit."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

__all__ = [
    "EPOCH",
    "META_KEY",
    "parse_date",
    "sort_key_date",
    "safe_filename",
    "relative_posix",
    "dedupe_by_id",
    "is_non_blank_str",
]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
META_KEY = "$meta"

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a ``yyyy-MM-dd`` or ISO-8601 date string into an aware datetime.

    Dates without a time component are interpreted as UTC midnight. Returns
    ``None`` for missing or unparseable values.
    """
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_key_date(entry: Dict[str, Any]) -> datetime:
    """Sort key for entries carrying an optional ``date`` field."""
    return parse_date(entry.get("date")) or EPOCH


def safe_filename(identifier: str) -> str:
    """Replace characters that are unsafe in file names with ``-``."""
    return _UNSAFE_FILENAME_CHARS.sub("-", identifier)


def relative_posix(path: Path, base: Path) -> str:
    """Return ``path`` relative to ``base`` using forward slashes."""
    return path.relative_to(base).as_posix()


def dedupe_by_id(entries: Iterable[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[str]]:
    """Drop entries whose ``id`` was already seen, keeping the first one.

    Returns:
        Tuple of (unique entries, duplicate ids in encounter order)
    """
    unique: List[Dict[str, Any]] = []
    duplicates: List[str] = []
    seen: set[str] = set()

    for entry in entries:
        entry_id = entry.get("id")
        if entry_id and entry_id in seen:
            duplicates.append(entry_id)
            continue
        if entry_id:
            seen.add(entry_id)
        unique.append(entry)

    return unique, duplicates


def is_non_blank_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())
