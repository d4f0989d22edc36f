"""Site metadata and placeholder rendering for the HTML entry pages."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, ValidationError

from .config import Config
from .exceptions import ConfigurationError, FragmentError
from .json5_io import load_json5
from .languages import LanguagesConfig

logger = logging.getLogger(__name__)


class ThemeColor(BaseModel):
    light: str = "#ffffff"
    dark: str = "#000000"


class SiteInfo(BaseModel):
    """Contents of ``html.json5``."""

    title: str = "Blog"
    description: str = "My Blog"
    keywords: str = ""
    author: str = "Author"
    url: str = "https://example.com"
    image: str = ""
    favicon: str = ""
    appleTouchIcon: str = ""
    themeColor: ThemeColor = ThemeColor()

    @property
    def base_url(self) -> str:
        return self.url.rstrip("/")

    @classmethod
    def load(cls, path: Path) -> "SiteInfo":
        """Load site metadata; a missing or unreadable file yields defaults."""
        if not path.exists():
            logger.warning(f"Site config {path} not found, using defaults")
            return cls()
        try:
            data = load_json5(path)
        except FragmentError as exc:
            logger.warning(f"Failed to read site config, using defaults: {exc}")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"Site config {path} is not an object, using defaults")
            return cls()
        # Blank values fall back to the defaults.
        cleaned = {key: value for key, value in data.items() if value not in (None, "")}
        try:
            return cls.model_validate(cleaned)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid site config {path}: {exc}") from exc


def _placeholders(site: SiteInfo) -> Dict[str, str]:
    return {
        "SITE_TITLE": site.title,
        "SITE_DESCRIPTION": site.description,
        "SITE_KEYWORDS": site.keywords,
        "SITE_AUTHOR": site.author,
        "SITE_URL": site.url,
        "SITE_IMAGE": site.image,
        "SITE_FAVICON": site.favicon,
        "SITE_APPLE_TOUCH_ICON": site.appleTouchIcon,
        "THEME_COLOR_LIGHT": site.themeColor.light,
        "THEME_COLOR_DARK": site.themeColor.dark,
    }


def _substitute(template: str, values: Dict[str, str]) -> str:
    for name, value in values.items():
        template = template.replace(f"{{{{{name}}}}}", value)
    return template


def feed_links(languages: LanguagesConfig) -> str:
    """``<link rel="alternate">`` tags for every enabled language's feeds."""
    lines: List[str] = []
    for code in languages.enabled_languages():
        suffix = languages.feed_suffix(code)
        hreflang = languages.hreflang(code)
        title = languages.native_name(code)
        lines.append(
            f'  <link rel="alternate" type="application/rss+xml" title="RSS Feed ({title})" '
            f'href="/feeds/rss{suffix}.xml" hreflang="{hreflang}">'
        )
        lines.append(
            f'  <link rel="alternate" type="application/atom+xml" title="Atom Feed ({title})" '
            f'href="/feeds/atom{suffix}.xml" hreflang="{hreflang}">'
        )
        lines.append(
            f'  <link rel="alternate" type="application/json" title="JSON Feed ({title})" '
            f'href="/feeds/feed{suffix}.json" hreflang="{hreflang}">'
        )
    return "\n".join(lines).strip()


def render_html(template: str, site: SiteInfo, links: str = "") -> str:
    """Fill the ``{{...}}`` placeholders of the main HTML page."""
    values = _placeholders(site)
    values["FEED_LINKS"] = links
    return _substitute(template, values)


def render_404(template: str, site: SiteInfo) -> str:
    """Fill the title and description placeholders of the 404 page."""
    return _substitute(template, {"SITE_TITLE": site.title, "SITE_DESCRIPTION": site.description})


def _read_template(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Failed to read HTML template {path}: {exc}") from exc


def render_site(config: Config) -> List[Path]:
    """Render ``index.html`` and ``404.html`` into the dist directory.

    Returns:
        Paths of the files written

    Raises:
        ConfigurationError: If the HTML template is missing or unreadable.
    """
    site = SiteInfo.load(config.path("html_config"))
    languages = LanguagesConfig.load(config.path("languages_config"))
    dist = config.path("dist_dir")
    written: List[Path] = []

    template_path = config.path("html_template")
    if not template_path.exists():
        raise ConfigurationError(f"HTML template {template_path} not found")

    dist.mkdir(parents=True, exist_ok=True)
    index = dist / template_path.name
    index.write_text(
        render_html(_read_template(template_path), site, feed_links(languages)),
        encoding="utf-8",
    )
    written.append(index)
    logger.info(f"Applied site config to {index.name}: {site.title}")

    not_found = config.path("not_found_page")
    if not_found.exists():
        target = dist / not_found.name
        target.write_text(render_404(_read_template(not_found), site), encoding="utf-8")
        written.append(target)
        logger.info(f"Updated {target.name}")

    return written


__all__ = ["SiteInfo", "ThemeColor", "feed_links", "render_404", "render_html", "render_site"]
