"""Character profile fragments."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..models import Fragment
from ..validation import validate_character_profile
from .base import ConfigCollection

logger = logging.getLogger(__name__)


class CharacterProfileCollection(ConfigCollection):
    """Character profiles merged into ``character-profiles.json``, sorted by id."""

    name = "character-profiles"
    kind = "characterProfiles"
    directory_setting = "profiles_dir"
    output_setting = "profiles_output"
    suffixes = (".json", ".json5")
    fragment_suffix = ".json"

    @property
    def cache_key(self) -> str:
        return "character_profiles_directory_hash"

    def validate(self, entry: Any) -> bool:
        result = validate_character_profile(entry)
        entry_id = entry.get("id") if isinstance(entry, dict) else None
        for warning in result.warnings:
            logger.warning(f"Character {entry_id}: {warning}")
        for error in result.errors:
            logger.error(f"Character {entry_id}: {error}")
        return result.valid

    def process(self, entry: Dict[str, Any], fragment: Fragment) -> Dict[str, Any]:
        """Default every variant's ``images``; ``infoCards`` are left as declared."""
        processed = super().process(entry, fragment)
        processed["variants"] = [
            {**variant, "images": variant.get("images") or []} for variant in processed.get("variants") or []
        ]
        return processed

    def sort(self, entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return sorted(entries, key=lambda entry: str(entry.get("id", "")))
