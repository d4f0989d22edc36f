"""Convenience layer over the card resolver for whole character profiles."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from .card_resolver import CharacterCardResolver
from .exceptions import CardResolutionError
from .i18n import I18nResolver
from .models import (
    CardPreview,
    CharacterProfile,
    InfoCard,
    InfoCardTemplate,
    ResolvedInfoCard,
    ValidationResult,
)

logger = logging.getLogger(__name__)

CARD_LEVELS = ("character", "variant", "image")


class CharacterConfigManager:
    """Card lookups, previews and consistency checks for a character."""

    def __init__(self, resolver: Optional[CharacterCardResolver] = None, i18n: Optional[I18nResolver] = None):
        self.i18n = i18n or (resolver.i18n if resolver else I18nResolver())
        self.resolver = resolver or CharacterCardResolver(self.i18n)

    def character_cards(
        self,
        character: CharacterProfile,
        lang: str,
        variant_id: Optional[str] = None,
        image_id: Optional[str] = None,
    ) -> List[ResolvedInfoCard]:
        """Resolved cards for a position, image level first."""
        return self.resolver.resolved_cards(character, lang, variant_id, image_id)

    def cards_by_level(
        self,
        character: CharacterProfile,
        level: str,
        lang: str,
        variant_id: Optional[str] = None,
        image_id: Optional[str] = None,
    ) -> List[ResolvedInfoCard]:
        """Resolved cards declared at exactly one level.

        Raises:
            ValueError: If ``level`` is not one of character, variant, image.
        """
        if level not in CARD_LEVELS:
            raise ValueError(f"Unknown card level '{level}'. Valid levels: {', '.join(CARD_LEVELS)}")

        context = self.resolver.build_context(character, variant_id, image_id)
        cards: List[InfoCard] = []

        if level == "character":
            cards = character.info_cards or []
        elif variant_id:
            variant = character.find_variant(variant_id)
            if variant is not None and level == "variant":
                cards = variant.info_cards or []
            elif variant is not None and image_id:
                image = variant.find_image(image_id)
                cards = (image.info_cards or []) if image is not None else []

        return [self.resolver.resolve_card(card, context, lang) for card in cards]

    @staticmethod
    def _positions(character: CharacterProfile) -> Iterator[Tuple[Optional[str], Optional[str]]]:
        yield None, None
        for variant in character.variants:
            yield variant.id, None
            for image in variant.images:
                yield variant.id, image.id

    def validate_config(self, character: CharacterProfile) -> ValidationResult:
        """Check template references and resolve every position to detect cycles."""
        result = ValidationResult()

        if not character.id:
            result.errors.append("Character ID cannot be empty")
        if not character.name:
            result.errors.append("Character name cannot be empty")

        template_ids = {template.id for template in character.info_card_templates}

        def check_references(cards: Optional[List[InfoCard]], where: str) -> None:
            for card in cards or []:
                if card.template and card.template not in template_ids:
                    result.errors.append(f"Card {card.id} in {where} references non-existent template: {card.template}")

        check_references(character.info_cards, "character")
        for variant in character.variants:
            check_references(variant.info_cards, f"variant {variant.id}")
            for image in variant.images:
                check_references(image.info_cards, f"image {image.id}")

        lang = self.i18n.languages.fallback
        reported = set()
        for variant_id, image_id in self._positions(character):
            try:
                self.resolver.resolved_cards(character, lang, variant_id, image_id)
            except CardResolutionError as exc:
                message = str(exc)
                if message not in reported:
                    reported.add(message)
                    result.errors.append(message)

        return result

    @staticmethod
    def available_templates(character: CharacterProfile) -> Dict[str, InfoCardTemplate]:
        return {template.id: template for template in character.info_card_templates}

    def preview_card(
        self,
        character: CharacterProfile,
        card_id: str,
        lang: str,
        variant_id: Optional[str] = None,
        image_id: Optional[str] = None,
    ) -> CardPreview:
        """Resolve a single card by id for inspection.

        Resolution errors are reported in the preview instead of raised.
        """
        context = self.resolver.build_context(character, variant_id, image_id)

        card: Optional[InfoCard] = None
        source = ""
        for level, cards in (
            ("character", context.character_cards),
            ("variant", context.variant_cards),
            ("image", context.image_cards),
        ):
            if card_id in cards:
                card, source = cards[card_id], level
                break

        if card is None:
            return CardPreview(found=False)

        try:
            resolved = self.resolver.resolve_card(card, context, lang)
        except CardResolutionError as exc:
            logger.warning(f"Failed to resolve card '{card_id}': {exc}")
            fallback = ResolvedInfoCard(
                id=card.id,
                title=card.title,
                content=card.content,
                color=card.color,
                resolved_from="error",
            )
            return CardPreview(found=True, card=fallback, source=f"error: {exc}")

        return CardPreview(found=True, card=resolved, source=source)


__all__ = ["CARD_LEVELS", "CharacterConfigManager"]
