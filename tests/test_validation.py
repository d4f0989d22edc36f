"""Tests for fragment validation rules."""

import pytest

from gallery_builder.validation import (
    is_valid_article,
    is_valid_image,
    validate_character_profile,
    validate_i18n_text,
)


def _profile(**overrides):
    profile = {
        "id": "amy",
        "name": {"en": "Amy", "ja": "エイミー"},
        "infoCardTemplates": [{"id": "stat", "title": "{label}", "content": "{value}"}],
        "infoCards": [{"id": "bio", "title": "Bio", "content": "Hello"}],
        "variants": [
            {
                "id": "casual",
                "name": "Casual",
                "infoCards": [{"id": "age", "template": "stat", "variables": {"label": "Age", "value": "17"}}],
                "images": [{"id": "img1", "src": "/a.png", "infoCards": []}],
            }
        ],
    }
    profile.update(overrides)
    return profile


def test_validate_i18n_text():
    assert validate_i18n_text("Amy", "name", "ctx").valid
    assert validate_i18n_text({"en": "", "ja": "エイミー"}, "name", "ctx").valid
    assert validate_i18n_text(None, "name", "ctx").valid

    assert not validate_i18n_text(None, "name", "ctx", required=True).valid
    assert not validate_i18n_text("   ", "name", "ctx").valid
    assert not validate_i18n_text({"en": " "}, "name", "ctx").valid
    assert not validate_i18n_text(["Amy"], "name", "ctx").valid


@pytest.mark.parametrize(
    "article, expected",
    [
        ({"id": "a", "title": "T", "date": "2024-01-01", "content": "x"}, True),
        ({"id": "a", "title": {"en": "T"}, "date": "2024-01-01", "markdownPath": {"en": "/a.md"}}, True),
        ({"id": "a", "title": "T", "date": "2024-01-01"}, False),
        ({"id": "a", "title": "T", "content": "x"}, False),
        ({"id": "", "title": "T", "date": "2024-01-01", "content": "x"}, False),
        ({"id": "a", "date": "2024-01-01", "content": "x"}, False),
        ({"id": "a", "title": "T", "date": "2024-01-01", "content": "x", "categories": "news"}, False),
        ({"id": "a", "title": "T", "date": "2024-01-01", "content": "x", "allowComments": "yes"}, False),
        ("not an article", False),
    ],
)
def test_is_valid_article(article, expected):
    assert is_valid_article(article) is expected


@pytest.mark.parametrize(
    "image, expected",
    [
        ({"id": "a", "src": "/a.png"}, True),
        ({"id": "g", "childImages": [{"id": "c", "src": "/c.png"}]}, True),
        ({"id": "a"}, False),
        ({"src": "/a.png"}, False),
        ({"id": "a", "src": "/a.png", "tags": "x"}, False),
        ({"id": "g", "childImages": [{"id": "c"}]}, False),
        ({"id": "g", "childImages": [{"src": "/c.png"}]}, False),
        ({"id": "g", "childImages": ["c"]}, False),
    ],
)
def test_is_valid_image(image, expected):
    assert is_valid_image(image) is expected


def test_valid_profile_has_no_errors():
    result = validate_character_profile(_profile())

    assert result.valid
    assert result.errors == []
    assert result.warnings == []


def test_profile_requires_id_name_and_variants():
    result = validate_character_profile({"variants": []})

    assert not result.valid
    assert any("string id" in error for error in result.errors)
    assert any("'name'" in error for error in result.errors)
    assert any("non-empty list" in error for error in result.errors)


def test_profile_reports_unknown_template_and_duplicate_cards():
    profile = _profile(
        infoCards=[
            {"id": "bio", "title": "Bio"},
            {"id": "bio", "title": "Again"},
            {"id": "hp", "template": "missing"},
        ]
    )

    result = validate_character_profile(profile)

    assert "character amy: duplicate card id 'bio'" in result.errors
    assert "character amy, card hp: unknown template 'missing'" in result.errors


def test_profile_checks_nested_image_cards():
    profile = _profile()
    profile["variants"][0]["images"] = [{"id": "img1", "infoCards": [{"id": "x", "title": {"en": ""}}]}, {"src": "b"}]

    result = validate_character_profile(profile)

    assert "character amy, variant casual: every image needs a string id" in result.errors
    assert any("image img1, card x" in error for error in result.errors)


def test_non_mapping_variables_is_a_warning():
    profile = _profile(infoCards=[{"id": "bio", "title": "Bio", "variables": ["a"]}])

    result = validate_character_profile(profile)

    assert result.valid
    assert result.warnings == ["character amy, card bio: variables should be a mapping"]
