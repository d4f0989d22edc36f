"""Domain models shared across the gallery build toolkit."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# A plain string, a ``$t:key`` reference or a map of language code to string.
I18nText = Union[str, Dict[str, str]]
CardVariables = Dict[str, I18nText]


@dataclass(slots=True)
class ValidationResult:
    """Errors and warnings collected while validating a config object."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Fold another result into this one and return self."""

        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


@dataclass(slots=True)
class Fragment:
    """A single per-item JSON5 file inside a fragment directory."""

    path: Path
    relative_path: str


@dataclass(slots=True)
class MergeResult:
    """Outcome of merging a fragment directory into a consolidated file."""

    collection: str
    output: Path
    files: int = 0
    entries: int = 0
    invalid: int = 0
    duplicates: List[str] = field(default_factory=list)
    failed_files: List[str] = field(default_factory=list)
    skipped: bool = False
    reason: str = ""


@dataclass(slots=True)
class SplitResult:
    """Outcome of splitting a consolidated file back into fragments."""

    collection: str
    entries: int = 0
    created: List[Path] = field(default_factory=list)
    skipped: int = 0
    failed: List[str] = field(default_factory=list)


@dataclass(slots=True)
class InfoCardTemplate:
    """Reusable info card definition declared on a character."""

    id: str
    title: Optional[I18nText] = None
    content: Optional[I18nText] = None
    color: Optional[str] = None
    variables: CardVariables = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InfoCardTemplate":
        return cls(
            id=data["id"],
            title=data.get("title"),
            content=data.get("content"),
            color=data.get("color"),
            variables=dict(data.get("variables") or {}),
        )


@dataclass(slots=True)
class InfoCard:
    """Info card attached to a character, variant or variant image."""

    id: str
    title: Optional[I18nText] = None
    content: Optional[I18nText] = None
    color: Optional[str] = None
    from_: Optional[str] = None
    template: Optional[str] = None
    variables: CardVariables = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InfoCard":
        return cls(
            id=data["id"],
            title=data.get("title"),
            content=data.get("content"),
            color=data.get("color"),
            from_=data.get("from"),
            template=data.get("template"),
            variables=dict(data.get("variables") or {}),
        )


def _cards(data: Dict[str, Any]) -> Optional[List[InfoCard]]:
    # An absent ``infoCards`` key (None) differs from an explicit empty list.
    if "infoCards" not in data:
        return None
    return [InfoCard.from_dict(card) for card in data.get("infoCards") or []]


@dataclass(slots=True)
class CharacterVariantImage:
    id: str
    src: str = ""
    alt: Optional[I18nText] = None
    info_cards: Optional[List[InfoCard]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CharacterVariantImage":
        return cls(id=data["id"], src=data.get("src", ""), alt=data.get("alt"), info_cards=_cards(data))


@dataclass(slots=True)
class CharacterVariant:
    id: str
    name: I18nText = ""
    images: List[CharacterVariantImage] = field(default_factory=list)
    info_cards: Optional[List[InfoCard]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CharacterVariant":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            images=[CharacterVariantImage.from_dict(image) for image in data.get("images") or []],
            info_cards=_cards(data),
        )

    def find_image(self, image_id: str) -> Optional[CharacterVariantImage]:
        return next((image for image in self.images if image.id == image_id), None)


@dataclass(slots=True)
class CharacterProfile:
    """Character with variants, info cards and info card templates."""

    id: str
    name: I18nText
    color: Optional[str] = None
    variants: List[CharacterVariant] = field(default_factory=list)
    info_cards: Optional[List[InfoCard]] = None
    info_card_templates: List[InfoCardTemplate] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CharacterProfile":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            color=data.get("color"),
            variants=[CharacterVariant.from_dict(variant) for variant in data.get("variants") or []],
            info_cards=_cards(data),
            info_card_templates=[
                InfoCardTemplate.from_dict(template) for template in data.get("infoCardTemplates") or []
            ],
        )

    def find_variant(self, variant_id: str) -> Optional[CharacterVariant]:
        return next((variant for variant in self.variants if variant.id == variant_id), None)


@dataclass(slots=True)
class ResolvedInfoCard:
    """Info card after inheritance and template substitution."""

    id: str
    title: Optional[I18nText] = None
    content: Optional[I18nText] = None
    color: Optional[str] = None
    resolved_from: str = "self"


@dataclass(slots=True)
class CardTemplateInfo:
    """Unsubstituted card fields plus the variables accumulated along the chain."""

    title: Optional[I18nText] = None
    content: Optional[I18nText] = None
    color: Optional[str] = None
    variables: CardVariables = field(default_factory=dict)


@dataclass(slots=True)
class CardResolutionContext:
    """Cards reachable from a given character/variant/image position."""

    character_cards: Dict[str, InfoCard] = field(default_factory=dict)
    variant_cards: Dict[str, InfoCard] = field(default_factory=dict)
    image_cards: Dict[str, InfoCard] = field(default_factory=dict)
    templates: Dict[str, InfoCardTemplate] = field(default_factory=dict)


@dataclass(slots=True)
class CardPreview:
    """Result of previewing a single card by id."""

    found: bool
    card: Optional[ResolvedInfoCard] = None
    source: str = ""


@dataclass(slots=True)
class BuildStep:
    """Single step of the combined build pipeline."""

    name: str
    ok: bool
    detail: str = ""


@dataclass(slots=True)
class BuildReport:
    """Outcome of the combined build pipeline."""

    skipped: bool = False
    steps: List[BuildStep] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(step.ok for step in self.steps)
