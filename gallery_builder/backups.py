"""Removal of editor and tool backup files from the project tree."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

SKIPPED_DIRECTORIES = frozenset({"node_modules", "dist", ".git", ".vscode"})
_TIMESTAMPED_BACKUP = re.compile(r"\.backup\.\d+$")


def is_backup_file(name: str) -> bool:
    """Whether a file name looks like a backup or editor leftover."""
    return bool(
        _TIMESTAMPED_BACKUP.search(name)
        or name.endswith((".backup", ".bak", "~", ".old"))
        or name.startswith(".#")
        or (len(name) > 1 and name.startswith("#") and name.endswith("#"))
    )


def cleanup_backups(root: Path, dry_run: bool = False) -> List[Path]:
    """Delete backup files below ``root``.

    Args:
        root: Directory to scan recursively
        dry_run: Only report what would be deleted

    Returns:
        Paths deleted (or that would be deleted)
    """
    deleted: List[Path] = []
    pending = [root]

    while pending:
        directory = pending.pop()
        try:
            children = sorted(directory.iterdir())
        except OSError as exc:
            logger.warning(f"Cannot read directory {directory}: {exc}")
            continue

        for child in children:
            if child.is_dir():
                if child.name not in SKIPPED_DIRECTORIES:
                    pending.append(child)
                continue
            if not child.is_file() or not is_backup_file(child.name):
                continue

            if dry_run:
                deleted.append(child)
                continue
            try:
                child.unlink()
            except OSError as exc:
                logger.error(f"Failed to delete {child}: {exc}")
                continue
            deleted.append(child)
            logger.info(f"Deleted {child.relative_to(root).as_posix()}")

    return deleted


__all__ = ["SKIPPED_DIRECTORIES", "cleanup_backups", "is_backup_file"]
