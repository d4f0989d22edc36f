"""Character info card resolution.

Cards live at three levels (character, variant, variant image). A card may
inherit fields from another card through ``from`` and from a reusable
template through ``template``. Variables are merged along the way and
substituted into ``{key}`` placeholders of inherited text.

Variable precedence, lowest first: template defaults, the ``from`` chain,
the card's own variables.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from .exceptions import CircularReferenceError
from .i18n import I18nResolver
from .models import (
    CardResolutionContext,
    CardTemplateInfo,
    CardVariables,
    CharacterProfile,
    I18nText,
    InfoCard,
    ResolvedInfoCard,
)

logger = logging.getLogger(__name__)


class CharacterCardResolver:
    """Resolves info cards for a character position and language."""

    def __init__(self, i18n: Optional[I18nResolver] = None):
        self.i18n = i18n or I18nResolver()

    def resolve_card(
        self,
        card: InfoCard,
        context: CardResolutionContext,
        lang: str,
        visited: Optional[Set[str]] = None,
    ) -> ResolvedInfoCard:
        """Resolve a single card.

        Args:
            card: Card to resolve
            context: Cards and templates reachable from the card's position
            lang: Language used to resolve variables and inherited text
            visited: Card ids already on the current ``from`` chain

        Returns:
            ResolvedInfoCard whose ``resolved_from`` records where the
            inherited fields came from

        Raises:
            CircularReferenceError: If the ``from`` chain loops.
        """
        visited = set(visited or ())
        if card.id in visited:
            raise CircularReferenceError(card.id)
        visited.add(card.id)

        resolved = ResolvedInfoCard(id=card.id, title=card.title, content=card.content, color=card.color)

        if card.from_:
            parent = self.find_parent_card(card.from_, context)
            if parent is None:
                logger.warning(f"Card '{card.id}' inherits from unknown card '{card.from_}'")
            else:
                parent_info = self.card_template_info(parent, context, visited)
                variables = {**parent_info.variables, **card.variables}

                if not resolved.title and parent_info.title:
                    resolved.title = self.fill_variables(parent_info.title, variables, lang)
                    resolved.resolved_from = "from"
                if not resolved.content and parent_info.content:
                    resolved.content = self.fill_variables(parent_info.content, variables, lang)
                    resolved.resolved_from = "from"
                if not resolved.color and parent_info.color:
                    resolved.color = parent_info.color
                    resolved.resolved_from = "from"

        if card.template:
            template = context.templates.get(card.template)
            if template is None:
                logger.warning(f"Card '{card.id}' uses unknown template '{card.template}'")
            else:
                variables = {**template.variables, **card.variables}
                filled = False

                if not resolved.title and template.title:
                    resolved.title = self.fill_variables(template.title, variables, lang)
                    filled = True
                if not resolved.content and template.content:
                    resolved.content = self.fill_variables(template.content, variables, lang)
                    filled = True
                if not resolved.color and template.color:
                    resolved.color = template.color
                    filled = True

                if filled and resolved.resolved_from == "self":
                    resolved.resolved_from = "template"

        return resolved

    @staticmethod
    def find_parent_card(card_id: str, context: CardResolutionContext) -> Optional[InfoCard]:
        """Look a ``from`` target up at character, then variant, then image level."""
        for cards in (context.character_cards, context.variant_cards, context.image_cards):
            if card_id in cards:
                return cards[card_id]
        return None

    def card_template_info(
        self,
        card: InfoCard,
        context: CardResolutionContext,
        visited: Optional[Set[str]] = None,
    ) -> CardTemplateInfo:
        """Raw (unsubstituted) fields of ``card`` and its accumulated variables.

        Raises:
            CircularReferenceError: If the ``from`` chain loops.
        """
        visited = set(visited or ())
        if card.id in visited:
            raise CircularReferenceError(card.id)
        visited.add(card.id)

        info = CardTemplateInfo(title=card.title, content=card.content, color=card.color, variables=dict(card.variables))

        if card.from_:
            parent = self.find_parent_card(card.from_, context)
            if parent is not None:
                parent_info = self.card_template_info(parent, context, visited)
                info.title = info.title or parent_info.title
                info.content = info.content or parent_info.content
                info.color = info.color or parent_info.color
                info.variables = {**parent_info.variables, **info.variables}

        if card.template:
            template = context.templates.get(card.template)
            if template is not None:
                info.title = info.title or template.title
                info.content = info.content or template.content
                info.color = info.color or template.color
                info.variables = {**template.variables, **info.variables}

        return info

    def fill_variables(self, text: I18nText, variables: CardVariables, lang: str) -> str:
        """Resolve every variable for ``lang`` and substitute them into ``text``."""
        params = {key: self.i18n.text(value, lang) for key, value in variables.items()}
        return self.i18n.text(text, lang, params)

    @staticmethod
    def build_context(
        character: CharacterProfile,
        variant_id: Optional[str] = None,
        image_id: Optional[str] = None,
    ) -> CardResolutionContext:
        """Collect the templates and cards visible from a character position."""
        context = CardResolutionContext(
            templates={template.id: template for template in character.info_card_templates},
            character_cards={card.id: card for card in character.info_cards or []},
        )

        if variant_id:
            variant = character.find_variant(variant_id)
            if variant is not None:
                context.variant_cards = {card.id: card for card in variant.info_cards or []}
                if image_id:
                    image = variant.find_image(image_id)
                    if image is not None:
                        context.image_cards = {card.id: card for card in image.info_cards or []}

        return context

    @staticmethod
    def select_cards(
        character: CharacterProfile,
        variant_id: Optional[str] = None,
        image_id: Optional[str] = None,
    ) -> List[InfoCard]:
        """Cards shown at a position: the nearest level that declares ``infoCards``.

        A level declaring an empty list shows no cards; a level without the
        field defers to the level above.
        """
        variant = character.find_variant(variant_id) if variant_id else None

        if variant is not None and image_id:
            image = variant.find_image(image_id)
            if image is not None and image.info_cards is not None:
                return image.info_cards

        if variant is not None and variant.info_cards is not None:
            return variant.info_cards

        return character.info_cards or []

    def resolved_cards(
        self,
        character: CharacterProfile,
        lang: str,
        variant_id: Optional[str] = None,
        image_id: Optional[str] = None,
    ) -> List[ResolvedInfoCard]:
        """Resolve the cards shown for a character, variant or variant image.

        Precedence is image over variant over character.
        """
        cards = self.select_cards(character, variant_id, image_id)
        context = self.build_context(character, variant_id, image_id)
        return [self.resolve_card(card, context, lang) for card in cards]


__all__ = ["CharacterCardResolver"]
