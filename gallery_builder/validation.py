"""Validation of article, image and character profile fragments."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Set

from .models import ValidationResult
from .utils import is_non_blank_str


def validate_i18n_text(value: Any, field: str, context: str, required: bool = False) -> ValidationResult:
    """Validate an I18nText field.

    Args:
        value: Field value (string, language map or missing)
        field: Field name used in messages
        context: Location prefix used in messages (e.g. "character alice")
        required: Whether a missing value is an error

    Returns:
        ValidationResult with any errors found
    """
    result = ValidationResult()

    if not value:
        if required:
            result.errors.append(f"{context}: missing required field '{field}'")
        return result

    if isinstance(value, str):
        if not value.strip():
            result.errors.append(f"{context}: '{field}' must not be blank")
    elif isinstance(value, dict):
        if not any(is_non_blank_str(text) for text in value.values()):
            result.errors.append(f"{context}: '{field}' must contain at least one non-blank translation")
    else:
        result.errors.append(f"{context}: '{field}' must be a string or a language map")

    return result


def is_valid_article(obj: Any) -> bool:
    """Structural check applied to every article fragment entry."""
    if not isinstance(obj, dict):
        return False
    if not is_non_blank_str(obj.get("id")):
        return False
    if not obj.get("title"):
        return False
    if not obj.get("content") and not obj.get("markdownPath"):
        return False
    if not is_non_blank_str(obj.get("date")):
        return False
    if obj.get("categories") and not isinstance(obj["categories"], list):
        return False
    if "allowComments" in obj and not isinstance(obj["allowComments"], bool):
        return False
    markdown_path = obj.get("markdownPath")
    if markdown_path and not isinstance(markdown_path, (str, dict)):
        return False
    return True


def is_valid_image(obj: Any) -> bool:
    """Structural check applied to every image fragment entry.

    Child images of a group must each carry an ``id`` and a ``src``.
    """
    if not isinstance(obj, dict):
        return False
    if not is_non_blank_str(obj.get("id")):
        return False
    if not obj.get("src") and not obj.get("childImages"):
        return False
    if obj.get("src") and not isinstance(obj["src"], str):
        return False
    for key in ("childImages", "tags", "characters"):
        if obj.get(key) and not isinstance(obj[key], list):
            return False
    for child in obj.get("childImages") or []:
        if not isinstance(child, dict):
            return False
        if not is_non_blank_str(child.get("id")) or not is_non_blank_str(child.get("src")):
            return False
    return True


def _validate_cards(cards: Any, context: str, template_ids: Set[str], result: ValidationResult) -> None:
    if cards is None:
        return
    if not isinstance(cards, list):
        result.errors.append(f"{context}: infoCards must be a list")
        return

    card_ids: Set[str] = set()
    for card in cards:
        if not isinstance(card, dict) or not is_non_blank_str(card.get("id")):
            result.errors.append(f"{context}: every card needs a string id")
            continue

        card_id = card["id"]
        if card_id in card_ids:
            result.errors.append(f"{context}: duplicate card id '{card_id}'")
        card_ids.add(card_id)

        card_context = f"{context}, card {card_id}"
        template = card.get("template")
        if template is not None:
            if not isinstance(template, str):
                result.errors.append(f"{card_context}: template must be a string")
            elif template not in template_ids:
                result.errors.append(f"{card_context}: unknown template '{template}'")

        if card.get("variables") is not None and not isinstance(card["variables"], dict):
            result.warnings.append(f"{card_context}: variables should be a mapping")

        result.merge(validate_i18n_text(card.get("title"), "title", card_context))
        result.merge(validate_i18n_text(card.get("content"), "content", card_context))


def _template_ids(obj: Dict[str, Any], context: str, result: ValidationResult) -> Set[str]:
    template_ids: Set[str] = set()
    templates = obj.get("infoCardTemplates")
    if templates is None:
        return template_ids
    if not isinstance(templates, list):
        result.errors.append(f"{context}: infoCardTemplates must be a list")
        return template_ids

    for template in templates:
        if not isinstance(template, dict) or not is_non_blank_str(template.get("id")):
            result.errors.append(f"{context}: every template needs a string id")
            continue
        template_id = template["id"]
        if template_id in template_ids:
            result.errors.append(f"{context}: duplicate template id '{template_id}'")
        template_ids.add(template_id)

        template_context = f"{context}, template {template_id}"
        result.merge(validate_i18n_text(template.get("title"), "title", template_context))
        result.merge(validate_i18n_text(template.get("content"), "content", template_context))
    return template_ids


def _validate_images(images: Iterable[Any], context: str, template_ids: Set[str], result: ValidationResult) -> None:
    for image in images:
        if not isinstance(image, dict) or not is_non_blank_str(image.get("id")):
            result.errors.append(f"{context}: every image needs a string id")
            continue
        _validate_cards(image.get("infoCards"), f"{context}, image {image['id']}", template_ids, result)


def validate_character_profile(obj: Any) -> ValidationResult:
    """Deep validation of a character profile and all of its info cards."""
    result = ValidationResult()
    if not isinstance(obj, dict):
        result.errors.append("character profile must be an object")
        return result

    character_id = obj.get("id")
    if not is_non_blank_str(character_id):
        result.errors.append("character profile needs a string id")
    context = f"character {character_id or 'unknown'}"

    result.merge(validate_i18n_text(obj.get("name"), "name", context, required=True))

    variants = obj.get("variants")
    if not isinstance(variants, list) or not variants:
        result.errors.append(f"{context}: variants must be a non-empty list")
        variants = variants if isinstance(variants, list) else []

    template_ids = _template_ids(obj, context, result)
    _validate_cards(obj.get("infoCards"), context, template_ids, result)

    for variant in variants:
        if not isinstance(variant, dict) or not is_non_blank_str(variant.get("id")):
            result.errors.append(f"{context}: every variant needs a string id")
            continue

        variant_context = f"{context}, variant {variant['id']}"
        result.merge(validate_i18n_text(variant.get("name"), "name", variant_context, required=True))
        _validate_cards(variant.get("infoCards"), variant_context, template_ids, result)

        images = variant.get("images")
        if images is None:
            continue
        if not isinstance(images, list):
            result.errors.append(f"{variant_context}: images must be a list")
            continue
        _validate_images(images, variant_context, template_ids, result)

    return result


__all__ = [
    "validate_i18n_text",
    "is_valid_article",
    "is_valid_image",
    "validate_character_profile",
]
