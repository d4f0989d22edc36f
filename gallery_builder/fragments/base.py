"""Shared merge / split pipeline for fragment-backed collections."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..cache import HashCache, directory_hash
from ..config import Config
from ..exceptions import FragmentError, GalleryBuildError, MergeError, SplitError
from ..json5_io import dump_fragment, load_json5, write_document
from ..models import Fragment, MergeResult, SplitResult
from ..utils import META_KEY, dedupe_by_id, relative_posix, safe_filename

logger = logging.getLogger(__name__)

_SKIPPED_NAME_PARTS = (".backup", ".bak", ".tmp", ".temp")


def is_fragment_name(name: str, suffixes: Tuple[str, ...]) -> bool:
    """Whether a file name is a mergeable fragment for the given suffixes."""
    if name.startswith("."):
        return False
    if not name.endswith(suffixes):
        return False
    return not any(part in name for part in _SKIPPED_NAME_PARTS)


class ConfigCollection:
    """A directory of JSON5 fragments merged into one consolidated file.

    Subclasses set the collection name, the ``[paths]`` settings for the
    fragment directory and output file, and override ``validate``,
    ``process`` and ``sort`` for their entry type.
    """

    name = ""
    kind = "config"
    directory_setting = ""
    output_setting = ""
    suffixes: Tuple[str, ...] = (".json5",)
    fragment_suffix = ".json5"

    def __init__(self, config: Config):
        """Initialize collection.

        Args:
            config: Project configuration used to resolve paths
        """
        self.config = config
        self.directory = config.path(self.directory_setting)
        self.output = config.path(self.output_setting)
        self.backup_file = self.output.with_name(f"{self.output.name}.backup")
        self.cache = HashCache(config.cache_file(self.name))

    @property
    def cache_key(self) -> str:
        return f"{self.name}_directory_hash"

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def validate(self, entry: Any) -> bool:
        return isinstance(entry, dict) and bool(entry.get("id"))

    def process(self, entry: Dict[str, Any], fragment: Fragment) -> Dict[str, Any]:
        """Copy ``entry`` and record the fragment it came from."""
        processed = dict(entry)
        meta = dict(processed.get(META_KEY) or {})
        meta["sourceFile"] = fragment.relative_path
        processed[META_KEY] = meta
        return processed

    def sort(self, entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return entries

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    def discover_fragments(self) -> List[Fragment]:
        """Recursively find fragment files, sorted by relative path."""
        if not self.directory.is_dir():
            return []

        fragments: List[Fragment] = []
        pending = [self.directory]
        while pending:
            current = pending.pop()
            for child in current.iterdir():
                if child.is_dir():
                    if not child.name.startswith("."):
                        pending.append(child)
                elif child.is_file() and is_fragment_name(child.name, self.suffixes):
                    fragments.append(Fragment(path=child, relative_path=relative_posix(child, self.directory)))

        return sorted(fragments, key=lambda fragment: fragment.relative_path)

    def read_fragment(self, fragment: Fragment) -> Tuple[List[Dict[str, Any]], int]:
        """Load one fragment and return (processed valid entries, invalid count).

        Raises:
            FragmentError: If the file cannot be parsed.
        """
        data = load_json5(fragment.path)

        if isinstance(data, list):
            items = data
        elif isinstance(data, dict):
            items = [data]
        else:
            logger.warning(f"Skipping {fragment.relative_path}: expected an object or a list")
            return [], 0

        valid = [self.process(item, fragment) for item in items if self.validate(item)]
        invalid = len(items) - len(valid)
        if invalid:
            logger.warning(f"{fragment.relative_path}: skipped {invalid} invalid {self.name} entries")
        logger.info(f"Merged {fragment.relative_path} ({len(valid)} entries)")
        return valid, invalid

    def merge(self, force: bool = False) -> MergeResult:
        """Merge all fragments into the consolidated output file.

        Args:
            force: Rebuild even when the fragment hash is unchanged

        Returns:
            MergeResult describing what happened

        Raises:
            MergeError: If writing the output fails; the previous output is
                restored from the backup first.
        """
        result = MergeResult(collection=self.name, output=self.output)

        if not self.directory.is_dir():
            logger.info(f"{self.directory} does not exist, skipping {self.name} merge")
            result.skipped = True
            result.reason = "missing directory"
            return result

        fragments = self.discover_fragments()
        if not fragments:
            logger.info(f"No {self.name} fragments found, writing an empty {self.output.name}")
            write_document(self.output, [], self.kind)
            self.cache.clear()
            self.cache.save()
            return result

        current_hash = directory_hash([fragment.path for fragment in fragments], self.directory)
        if not force and self.output.exists() and self.cache.get(self.cache_key) == current_hash:
            logger.debug(f"{self.output.name} is up to date, skipping merge")
            result.skipped = True
            result.reason = "unchanged"
            return result

        self.backup()
        try:
            entries: List[Dict[str, Any]] = []
            for fragment in fragments:
                try:
                    valid, invalid = self.read_fragment(fragment)
                except FragmentError as exc:
                    logger.error(f"Failed to read {fragment.relative_path}: {exc}")
                    result.failed_files.append(fragment.relative_path)
                    continue
                entries.extend(valid)
                result.invalid += invalid

            unique, duplicates = dedupe_by_id(entries)
            for duplicate in duplicates:
                logger.warning(f"Duplicate {self.name} id '{duplicate}', keeping the first occurrence")

            merged = self.sort(unique)
            write_document(self.output, merged, self.kind)
        except (OSError, ValueError, TypeError, GalleryBuildError) as exc:
            self.restore()
            raise MergeError(f"Failed to merge {self.name}: {exc}", self.name) from exc

        result.files = len(fragments)
        result.entries = len(merged)
        result.duplicates = duplicates

        self.cache.set(self.cache_key, current_hash)
        self.cache.save()
        logger.info(f"Merged {result.files} files into {self.output.name} ({result.entries} entries)")
        return result

    def backup(self) -> None:
        if self.output.exists():
            shutil.copy2(self.output, self.backup_file)
            logger.debug(f"Backed up {self.output.name}")

    def restore(self) -> bool:
        if not self.backup_file.exists():
            return False
        shutil.copy2(self.backup_file, self.output)
        logger.warning(f"Restored {self.output.name} from backup")
        return True

    def cleanup(self) -> bool:
        """Remove the backup file; returns whether one existed."""
        if not self.backup_file.exists():
            return False
        self.backup_file.unlink()
        logger.info(f"Removed {self.backup_file.name}")
        return True

    # ------------------------------------------------------------------
    # Split
    # ------------------------------------------------------------------

    def load_output(self) -> List[Dict[str, Any]]:
        """Entries of the consolidated output file.

        Raises:
            FragmentError: If the file is missing, unreadable or not a list.
        """
        if not self.output.exists():
            raise FragmentError(f"{self.output} does not exist", self.output)
        data = load_json5(self.output)
        if not isinstance(data, list):
            raise FragmentError(f"{self.output} must contain a list", self.output)
        return data

    def fragment_path(self, entry: Dict[str, Any]) -> Path:
        meta = entry.get(META_KEY)
        if isinstance(meta, dict) and meta.get("sourceFile"):
            return self.directory / meta["sourceFile"]
        return self.directory / f"{safe_filename(str(entry['id']))}{self.fragment_suffix}"

    def split(self) -> SplitResult:
        """Write the entries of the consolidated output file back to fragments.

        Entries sharing a ``$meta.sourceFile`` are written together as a list;
        every other fragment holds a single object.

        Raises:
            SplitError: If the output file cannot be read.
        """
        try:
            entries = self.load_output()
        except FragmentError as exc:
            raise SplitError(f"Cannot split {self.name}: {exc}", self.name) from exc

        result = SplitResult(collection=self.name, entries=len(entries))
        self.directory.mkdir(parents=True, exist_ok=True)

        grouped: Dict[Path, List[Dict[str, Any]]] = {}
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("id"):
                logger.warning(f"Skipping {self.name} entry without id")
                result.skipped += 1
                continue
            payload = {key: value for key, value in entry.items() if key != META_KEY}
            grouped.setdefault(self.fragment_path(entry), []).append(payload)

        for target, payloads in grouped.items():
            data: Any = payloads if len(payloads) > 1 else payloads[0]
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(dump_fragment(data, target.suffix), encoding="utf-8")
            except OSError as exc:
                logger.error(f"Failed to write {target}: {exc}")
                result.failed.extend(str(payload["id"]) for payload in payloads)
                continue

            result.created.append(target)
            logger.info(f"Created {relative_posix(target, self.directory)} ({len(payloads)} entries)")

        return result


__all__ = ["ConfigCollection", "is_fragment_name"]
