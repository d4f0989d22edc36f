"""Tests for backup file cleanup."""

import pytest

from gallery_builder.backups import cleanup_backups, is_backup_file


@pytest.mark.parametrize(
    "name, expected",
    [
        ("images.json5.backup", True),
        ("images.json5.backup.1700000000", True),
        ("config.bak", True),
        ("notes.txt~", True),
        ("draft.old", True),
        (".#lockfile", True),
        ("#autosave#", True),
        ("#", False),
        ("images.json5", False),
        ("backup.json5", False),
    ],
)
def test_is_backup_file(name, expected):
    assert is_backup_file(name) is expected


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x", encoding="utf-8")
    return path


def test_cleanup_backups_deletes_outside_skipped_directories(tmp_path):
    removed = _touch(tmp_path / "src" / "config" / "images.json5.backup")
    kept = _touch(tmp_path / "src" / "config" / "images.json5")
    vendored = _touch(tmp_path / "node_modules" / "pkg" / "index.js.bak")
    built = _touch(tmp_path / "dist" / "index.html.old")

    deleted = cleanup_backups(tmp_path)

    assert deleted == [removed]
    assert not removed.exists()
    assert kept.exists()
    assert vendored.exists()
    assert built.exists()


def test_cleanup_backups_dry_run(tmp_path):
    backup = _touch(tmp_path / "a.bak")

    assert cleanup_backups(tmp_path, dry_run=True) == [backup]
    assert backup.exists()
