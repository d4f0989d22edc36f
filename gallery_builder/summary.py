"""Plain-text article summaries generated from markdown sources."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_LENGTH = 150

# Applied in order; fenced code and images go before inline code and links.
_MARKDOWN_RULES = [
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"#{1,6}\s+"), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*>\s+", re.MULTILINE), ""),
    (re.compile(r"\n\s*\n"), "\n"),
    (re.compile(r"\n"), " "),
]


def markdown_to_summary(text: Any, max_length: int = DEFAULT_SUMMARY_LENGTH) -> str:
    """Strip markdown formatting and truncate to ``max_length`` characters.

    Truncated summaries end with ``...``.
    """
    if not isinstance(text, str) or not text:
        return ""

    plain = text
    for pattern, replacement in _MARKDOWN_RULES:
        plain = pattern.sub(replacement, plain)
    plain = plain.strip()

    if len(plain) > max_length:
        return f"{plain[:max_length]}..."
    return plain


def _read_markdown(markdown_path: str, public_dir: Path) -> Optional[str]:
    path = public_dir / markdown_path.lstrip("/")
    if not path.is_file():
        logger.debug(f"Markdown source {path} not found")
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning(f"Failed to read markdown source {path}: {exc}")
        return None


def summary_from_markdown_path(
    markdown_path: Any,
    public_dir: Path,
    max_length: int = DEFAULT_SUMMARY_LENGTH,
) -> Union[str, Dict[str, str], None]:
    """Build a summary from the markdown file(s) an article points at.

    Args:
        markdown_path: Site-absolute path, or mapping of language code to path
        public_dir: Directory site-absolute paths are resolved against
        max_length: Maximum summary length before truncation

    Returns:
        A summary string, a per-language mapping, or None when nothing could
        be generated
    """
    if not markdown_path:
        return None

    if isinstance(markdown_path, str):
        content = _read_markdown(markdown_path, public_dir)
        if content is None:
            return None
        return markdown_to_summary(content, max_length) or None

    if isinstance(markdown_path, dict):
        summaries: Dict[str, str] = {}
        for lang, path in markdown_path.items():
            if not isinstance(path, str) or not path:
                continue
            content = _read_markdown(path, public_dir)
            if content is None:
                continue
            summary = markdown_to_summary(content, max_length)
            if summary:
                summaries[lang] = summary
        return summaries or None

    return None


__all__ = ["DEFAULT_SUMMARY_LENGTH", "markdown_to_summary", "summary_from_markdown_path"]
