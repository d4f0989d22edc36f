"""Tests for site metadata and HTML placeholder rendering."""

import pytest

from gallery_builder.exceptions import ConfigurationError
from gallery_builder.html_config import SiteInfo, feed_links, render_404, render_html, render_site
from gallery_builder.languages import LanguageConfig, LanguagesConfig


def test_site_info_defaults_for_missing_and_blank_values(tmp_path, write_file):
    assert SiteInfo.load(tmp_path / "missing.json5").title == "Blog"

    path = write_file(tmp_path / "html.json5", {"title": "", "author": "Ann", "url": "https://a.example/"})
    site = SiteInfo.load(path)

    assert site.title == "Blog"
    assert site.author == "Ann"
    assert site.base_url == "https://a.example"


def test_site_info_rejects_invalid_values(tmp_path, write_file):
    path = write_file(tmp_path / "html.json5", {"title": ["not", "a", "string"]})

    with pytest.raises(ConfigurationError):
        SiteInfo.load(path)


def test_render_html_replaces_placeholders():
    site = SiteInfo(title="My Site", description="Art", themeColor={"light": "#fff", "dark": "#111"})
    template = "<title>{{SITE_TITLE}}</title><meta content='{{THEME_COLOR_DARK}}'>{{FEED_LINKS}}{{UNKNOWN}}"

    html = render_html(template, site, "<link>")

    assert html == "<title>My Site</title><meta content='#111'><link>{{UNKNOWN}}"
    assert render_404("{{SITE_TITLE}} - {{SITE_DESCRIPTION}}", site) == "My Site - Art"


def test_feed_links_per_language():
    languages = LanguagesConfig(
        languages={
            "en": LanguageConfig(name="English"),
            "zh": LanguageConfig(name="中文", aliases=["zh-CN"]),
            "ja": LanguageConfig(name="日本語", enabled=False),
        }
    )

    links = feed_links(languages)

    assert links.count("<link ") == 6
    assert 'href="/feeds/rss.xml" hreflang="en"' in links
    assert 'title="Atom Feed (中文)" href="/feeds/atom.zh.xml" hreflang="zh-CN"' in links
    assert "feed.ja.json" not in links


def test_render_site_writes_dist_pages(config, write_file):
    write_file(config.path("html_template"), "<title>{{SITE_TITLE}}</title>\n{{FEED_LINKS}}")
    write_file(config.path("not_found_page"), "{{SITE_TITLE}} not found")
    write_file(config.path("html_config"), {"title": "Gallery"})

    written = render_site(config)

    assert [path.name for path in written] == ["index.html", "404.html"]
    index = (config.path("dist_dir") / "index.html").read_text(encoding="utf-8")
    assert index.startswith("<title>Gallery</title>")
    assert "/feeds/rss.xml" in index
    assert (config.path("dist_dir") / "404.html").read_text(encoding="utf-8") == "Gallery not found"


def test_render_site_requires_template(config):
    with pytest.raises(ConfigurationError):
        render_site(config)


def test_render_site_reports_undecodable_template(config):
    template = config.path("html_template")
    template.parent.mkdir(parents=True, exist_ok=True)
    template.write_bytes(b"<title>\xff</title>")

    with pytest.raises(ConfigurationError, match="Failed to read HTML template"):
        render_site(config)


def test_site_info_falls_back_for_undecodable_file(tmp_path):
    path = tmp_path / "html.json5"
    path.write_bytes(b'{title: "\xff"}')

    assert SiteInfo.load(path).title == "Blog"
