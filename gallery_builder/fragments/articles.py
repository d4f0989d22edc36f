"""Article fragments."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..models import Fragment
from ..summary import summary_from_markdown_path
from ..utils import sort_key_date
from ..validation import is_valid_article
from .base import ConfigCollection

logger = logging.getLogger(__name__)


class ArticleCollection(ConfigCollection):
    """Articles merged into ``articles.json5``, newest first."""

    name = "articles"
    kind = "articles"
    directory_setting = "articles_dir"
    output_setting = "articles_output"

    def validate(self, entry: Any) -> bool:
        return is_valid_article(entry)

    def process(self, entry: Dict[str, Any], fragment: Fragment) -> Dict[str, Any]:
        """Apply article defaults and generate a summary from markdown when missing."""
        processed = super().process(entry, fragment)
        processed.setdefault("allowComments", True)
        if not processed.get("categories"):
            processed["categories"] = []

        if not processed.get("summary") and processed.get("markdownPath"):
            summary = summary_from_markdown_path(processed["markdownPath"], self.config.path("public_dir"))
            if summary:
                processed["summary"] = summary
                logger.info(f"Generated summary for article {processed['id']}")

        return processed

    def sort(self, entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return sorted(entries, key=sort_key_date, reverse=True)
