"""RSS 2.0, Atom and JSON Feed generation for articles."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from email.utils import format_datetime
from html import escape
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .config import Config
from .exceptions import FeedError, FragmentError
from .html_config import SiteInfo
from .i18n import I18nResolver, Translator
from .json5_io import load_json5
from .languages import LanguagesConfig
from .utils import EPOCH, parse_date, sort_key_date

logger = logging.getLogger(__name__)

JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"


def _xml(value: Any) -> str:
    return escape(str(value or ""), quote=True)


def _article_date(article: Dict[str, Any]) -> datetime:
    return (parse_date(article.get("date")) or EPOCH).astimezone(timezone.utc)


def _iso_millis(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class FeedBuilder:
    """Renders the three feed formats for one language."""

    def __init__(self, site: SiteInfo, i18n: I18nResolver, max_items: int = 50, ttl: int = 60):
        self.site = site
        self.i18n = i18n
        self.max_items = max_items
        self.ttl = ttl

    def _links(self, article: Dict[str, Any]) -> tuple[str, str]:
        article_id = quote(str(article["id"]), safe="")
        base = self.site.base_url
        return f"{base}/#/articles/{article_id}", f"{base}/articles/{article_id}"

    def _summary(self, article: Dict[str, Any], lang: str) -> str:
        return self.i18n.text(article.get("summary") or article.get("content") or "", lang)

    def _items(self, articles: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [article for article in articles if article.get("id")][: self.max_items]

    def rss_feed(self, articles: List[Dict[str, Any]], lang: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        language = self.i18n.languages.hreflang(lang).lower()

        items = []
        for article in self._items(articles):
            link, guid = self._links(article)
            items.append(
                "    <item>\n"
                f"      <title>{_xml(self.i18n.text(article.get('title'), lang))}</title>\n"
                f"      <link>{_xml(link)}</link>\n"
                f'      <guid isPermaLink="false">{_xml(guid)}</guid>\n'
                f"      <pubDate>{format_datetime(_article_date(article), usegmt=True)}</pubDate>\n"
                f"      <description>{_xml(self._summary(article, lang))}</description>\n"
                "    </item>"
            )

        body = "\n".join(items)
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">\n'
            "  <channel>\n"
            f"    <title>{_xml(self.site.title)}</title>\n"
            f"    <link>{_xml(self.site.url)}</link>\n"
            f"    <description>{_xml(self.site.description)}</description>\n"
            f"    <language>{_xml(language)}</language>\n"
            f"    <lastBuildDate>{format_datetime(now.astimezone(timezone.utc), usegmt=True)}</lastBuildDate>\n"
            f"    <ttl>{self.ttl}</ttl>\n"
            f"{body}\n"
            "  </channel>\n"
            "</rss>\n"
        )

    def atom_feed(self, articles: List[Dict[str, Any]], lang: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        suffix = self.i18n.languages.feed_suffix(lang)

        entries = []
        for article in self._items(articles):
            link, entry_id = self._links(article)
            entries.append(
                "  <entry>\n"
                f"    <title>{_xml(self.i18n.text(article.get('title'), lang))}</title>\n"
                f'    <link href="{_xml(link)}" />\n'
                f"    <id>{_xml(entry_id)}</id>\n"
                f"    <updated>{_iso_millis(_article_date(article))}</updated>\n"
                f"    <summary>{_xml(self._summary(article, lang))}</summary>\n"
                "  </entry>"
            )

        body = "\n".join(entries)
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<feed xmlns="http://www.w3.org/2005/Atom">\n'
            f"  <title>{_xml(self.site.title)}</title>\n"
            f'  <link href="{_xml(self.site.url)}" />\n'
            f'  <link href="{_xml(self.site.base_url)}/feeds/atom{suffix}.xml" rel="self" />\n'
            f"  <id>{_xml(self.site.url)}</id>\n"
            f"  <updated>{_iso_millis(now)}</updated>\n"
            "  <author>\n"
            f"    <name>{_xml(self.site.author)}</name>\n"
            "  </author>\n"
            f"{body}\n"
            "</feed>\n"
        )

    def json_feed(self, articles: List[Dict[str, Any]], lang: str) -> str:
        base = self.site.base_url
        suffix = self.i18n.languages.feed_suffix(lang)

        items = []
        for article in self._items(articles):
            link, item_id = self._links(article)
            items.append(
                {
                    "id": item_id,
                    "url": link,
                    "title": self.i18n.text(article.get("title"), lang),
                    "summary": self._summary(article, lang),
                    "date_published": article.get("date"),
                    "content_html": self.i18n.text(article.get("content") or "", lang),
                }
            )

        feed = {
            "version": JSON_FEED_VERSION,
            "title": self.site.title,
            "home_page_url": base,
            "feed_url": f"{base}/feeds/feed{suffix}.json",
            "description": self.site.description,
            "items": items,
        }
        return json.dumps(feed, ensure_ascii=False, indent=2) + "\n"


def load_articles(path: Path) -> List[Dict[str, Any]]:
    """Merged articles, or an empty list when unavailable."""
    if not path.exists():
        return []
    try:
        data = load_json5(path)
    except FragmentError as exc:
        logger.warning(f"Failed to read articles: {exc}")
        return []
    if not isinstance(data, list):
        return []
    return [article for article in data if isinstance(article, dict)]


def generate_feeds(config: Config, now: Optional[datetime] = None) -> List[Path]:
    """Write ``rss``, ``atom`` and ``feed`` files for every enabled language.

    The fallback language gets unsuffixed file names; other languages get a
    ``.<code>`` suffix.

    Returns:
        Paths written; empty when there are no articles

    Raises:
        FeedError: If a feed file cannot be written.
    """
    articles = load_articles(config.path("articles_output"))
    if not articles:
        logger.info("No articles found, skipping feed generation")
        return []

    languages = LanguagesConfig.load(config.path("languages_config"))
    translator = Translator.from_directory(config.path("i18n_dir"), languages)
    site = SiteInfo.load(config.path("html_config"))
    builder = FeedBuilder(
        site,
        I18nResolver(languages, translator),
        max_items=config.feeds.max_items,
        ttl=config.feeds.ttl,
    )

    articles = sorted(articles, key=sort_key_date, reverse=True)
    output_dir = config.path("feeds_dir")
    written: List[Path] = []

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        for lang in languages.enabled_languages():
            suffix = languages.feed_suffix(lang)
            documents = {
                f"rss{suffix}.xml": builder.rss_feed(articles, lang, now),
                f"atom{suffix}.xml": builder.atom_feed(articles, lang, now),
                f"feed{suffix}.json": builder.json_feed(articles, lang),
            }
            for name, text in documents.items():
                path = output_dir / name
                path.write_text(text, encoding="utf-8")
                written.append(path)
            logger.info(f"Generated feeds for {languages.native_name(lang)}")
    except OSError as exc:
        raise FeedError(f"Failed to write feeds to {output_dir}: {exc}") from exc

    return written


__all__ = ["FeedBuilder", "JSON_FEED_VERSION", "generate_feeds", "load_articles"]
