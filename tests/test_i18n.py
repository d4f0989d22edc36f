"""Tests for I18nText resolution and translation references."""

import json

import pytest

from gallery_builder.i18n import I18nResolver, Translator, get_i18n_text, interpolate
from gallery_builder.languages import LanguageConfig, LanguagesConfig

MESSAGES = {
    "en": {
        "gallery": {"count": "{count} images", "pair": "{0} and {1}", "title": "Gallery"},
        "common": {"right": "right", "name": "{name}"},
    },
    "ja": {"gallery": {"count": "{count}枚"}},
}


@pytest.fixture
def languages():
    return LanguagesConfig(
        fallback="en",
        default="ja",
        languages={"en": LanguageConfig(name="English"), "ja": LanguageConfig(name="日本語")},
    )


@pytest.fixture
def resolver(languages):
    return I18nResolver(languages, Translator(MESSAGES, fallback="en"))


def test_interpolate_named_and_positional():
    assert interpolate("{a}-{b}", {"a": 1, "b": "x"}) == "1-x"
    assert interpolate("{0} and {1}", ["left", "right"]) == "left and right"
    assert interpolate("{missing} {a}", {"a": "x"}) == "{missing} x"
    assert interpolate("{a}", None) == "{a}"


def test_interpolate_does_not_rescan_substituted_values():
    assert interpolate("{a} {b}", {"a": "{b}", "b": "B"}) == "{b} B"


def test_text_resolves_language_maps_with_fallbacks(resolver):
    value = {"en": "Hello", "ja": "こんにちは"}

    assert resolver.text(value, "ja") == "こんにちは"
    assert resolver.text(value, "zh") == "Hello"
    assert resolver.text({"ja": "こんにちは", "zh": "你好"}, "fr") == "こんにちは"
    assert resolver.text({"zh": "你好"}, "fr") == "你好"


def test_text_handles_empty_and_unsupported_values(resolver):
    assert resolver.text(None, "en") == ""
    assert resolver.text("", "en") == ""
    assert resolver.text({}, "en") == ""
    assert resolver.text(42, "en") == ""


def test_plain_strings_are_interpolated(resolver):
    assert resolver.text("Hi {name}", "en", {"name": "Amy"}) == "Hi Amy"


def test_reference_lookup_falls_back_to_fallback_language(resolver):
    assert resolver.text("$t:gallery.title", "ja") == "Gallery"
    assert resolver.text("$t:gallery.count", "ja", {"count": 3}) == "3枚"
    assert resolver.text("$t:unknown.key", "en") == "unknown.key"


def test_reference_with_named_params(resolver):
    assert resolver.text("$t:gallery.count{count:'5'}", "en") == "5 images"
    # inline parameters win over caller parameters
    assert resolver.text("$t:gallery.count{count:'5'}", "en", {"count": 9}) == "5 images"


def test_reference_with_positional_params_resolves_nested_references(resolver):
    assert resolver.text("$t:gallery.pair['left', '$t:common.right']", "en") == "left and right"


def test_nested_reference_receives_outer_params(resolver):
    assert resolver.text("$t:gallery.pair['$t:common.name', 'x']", "en", {"name": "Amy"}) == "Amy and x"


def test_malformed_params_are_ignored(resolver):
    assert resolver.text("$t:gallery.count{count:", "en") == "{count} images"
    assert resolver.text("$t:gallery.pair[1,", "en") == "{0} and {1}"


def test_reference_without_translator_returns_key():
    resolver = I18nResolver()

    assert resolver.text("$t:gallery.title", "en") == "gallery.title"
    assert resolver.text("$t:gallery.count{count:'1'}", "en") == "gallery.count"
    assert get_i18n_text({"en": "Hello"}, "en") == "Hello"


def test_translator_from_directory(tmp_path, languages, caplog):
    (tmp_path / "en.json").write_text(json.dumps(MESSAGES["en"]), encoding="utf-8")

    translator = Translator.from_directory(tmp_path, languages)

    assert translator.translate("gallery.title", "ja") == "Gallery"
    assert list(translator.messages) == ["en"]
    assert "No message catalog for language 'ja'" in caplog.text
