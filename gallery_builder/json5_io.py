"""JSON5 reading and writing helpers.

Consolidated files are written with a generated header comment and trailing
commas so that they stay friendly to hand inspection, while fragments written
by ``split`` are plain indented JSON5.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import json5

from .exceptions import FragmentError

logger = logging.getLogger(__name__)

_HEADERS = {
    "images": (
        "// Image configuration\n"
        "// Generated from src/config/images, do not edit by hand\n"
        "// Run `gallery-builder images split` to split into fragments\n"
        "// Run `gallery-builder images merge` to merge fragments\n"
    ),
    "articles": (
        "// Article configuration\n"
        "// Generated from src/config/articles, do not edit by hand\n"
        "// Run `gallery-builder articles split` to split into fragments\n"
        "// Run `gallery-builder articles merge` to merge fragments\n"
    ),
    "characterProfiles": (
        "// Character profile configuration\n"
        "// Generated from src/config/character-profiles, do not edit by hand\n"
        "// Run `gallery-builder profiles split` to split into fragments\n"
        "// Run `gallery-builder profiles merge` to merge fragments\n"
    ),
    "config": (
        "// Configuration file (JSON5)\n"
        "// Comments and trailing commas are supported\n"
    ),
}


def load_json5(path: Path) -> Any:
    """Parse a JSON5 (or plain JSON) file.

    Raises:
        FragmentError: If the file cannot be read or is not valid JSON5.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FragmentError(f"Failed to read {path}: {exc}", path) from exc

    try:
        return json5.loads(text)
    except ValueError as exc:
        raise FragmentError(f"Invalid JSON5 in {path}: {exc}", path) from exc


def generate_header(kind: str, now: datetime | None = None) -> str:
    """Header comment for a generated file of the given kind."""
    now = now or datetime.now(timezone.utc)
    stamp = now.strftime("%Y-%m-%d %H:%M:%S")
    body = _HEADERS.get(kind, _HEADERS["config"])
    return f"{body}// Last updated: {stamp}\n\n"


def dump_json5(data: Any) -> str:
    """Indented JSON5 with trailing commas and unquoted identifier keys."""
    return json5.dumps(data, indent=2, ensure_ascii=False, trailing_commas=True)


def dump_fragment(data: Any, suffix: str = ".json5") -> str:
    """Text of a single fragment file: JSON for ``.json``, JSON5 otherwise."""
    if suffix == ".json":
        return json.dumps(data, ensure_ascii=False, indent=2) + "\n"
    return json5.dumps(data, indent=2, ensure_ascii=False) + "\n"


def format_json5(data: Any, kind: str = "config", now: datetime | None = None) -> str:
    """Format ``data`` as a generated JSON5 document with a header comment."""
    return f"{generate_header(kind, now)}{dump_json5(data)}\n"


def write_json5(path: Path, data: Any, kind: str = "config") -> None:
    """Write ``data`` as a generated JSON5 document."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_json5(data, kind), encoding="utf-8")


def write_json(path: Path, data: Any) -> None:
    """Write ``data`` as 2-space indented JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


def write_document(path: Path, data: Any, kind: str = "config") -> None:
    """Write JSON for ``.json`` targets and headed JSON5 for anything else."""
    if path.suffix == ".json":
        write_json(path, data)
    else:
        write_json5(path, data, kind)
    logger.debug(f"Wrote {path}")
