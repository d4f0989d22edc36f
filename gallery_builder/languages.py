"""Site language configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ValidationError, model_validator

from .exceptions import ConfigurationError, FragmentError
from .json5_io import load_json5

logger = logging.getLogger(__name__)


class LanguageConfig(BaseModel):
    """Single language entry of ``languages.json5``."""

    name: str = ""
    enabled: bool = True
    giscus: Optional[str] = None
    aliases: List[str] = []


class LanguagesConfig(BaseModel):
    """Enabled languages plus the fallback and default language codes."""

    fallback: str = "en"
    default: str = "en"
    languages: Dict[str, LanguageConfig] = {"en": LanguageConfig(name="English")}

    @model_validator(mode="after")
    def validate_codes(self) -> "LanguagesConfig":
        """Validate that fallback and default refer to declared languages."""
        for role in ("fallback", "default"):
            code = getattr(self, role)
            if code not in self.languages:
                raise ValueError(f"{role} language '{code}' is not declared in languages")
        return self

    @classmethod
    def load(cls, path: Path) -> "LanguagesConfig":
        """Load ``languages.json5``; a missing file yields English only.

        Raises:
            ConfigurationError: If the file exists but is invalid.
        """
        if not path.exists():
            logger.warning(f"Language config {path} not found, using English only")
            return cls()

        try:
            return cls.model_validate(load_json5(path))
        except (FragmentError, ValidationError) as exc:
            raise ConfigurationError(f"Invalid language config {path}: {exc}") from exc

    def enabled_languages(self) -> List[str]:
        return [code for code, lang in self.languages.items() if lang.enabled]

    def is_valid_language(self, code: str) -> bool:
        lang = self.languages.get(code)
        return lang is not None and lang.enabled

    def native_name(self, code: str) -> str:
        lang = self.languages.get(code)
        return lang.name if lang and lang.name else code

    def giscus_language(self, code: str) -> str:
        """Comment widget language for ``code``, falling back to the fallback language."""
        current = self.languages.get(code)
        if current and current.giscus:
            return current.giscus

        fallback = self.languages.get(self.fallback)
        if fallback and fallback.giscus:
            return fallback.giscus

        return self.fallback

    def hreflang(self, code: str) -> str:
        lang = self.languages.get(code)
        if lang and lang.aliases:
            return lang.aliases[0]
        return code

    def feed_suffix(self, code: str) -> str:
        """File name suffix for per-language feeds (none for the fallback language)."""
        return "" if code == self.fallback else f".{code}"

    def detect_language(self, accept: Optional[str]) -> str:
        """Pick an enabled language for a browser language tag.

        Matching order: exact code, exact alias, code prefix (``zh-CN`` ->
        ``zh``), alias prefix; anything else yields the default language.
        """
        if not accept:
            return self.default

        requested = accept.strip().lower()
        for code, lang in self.languages.items():
            if not lang.enabled:
                continue

            code_lower = code.lower()
            aliases = [alias.lower() for alias in lang.aliases]

            if requested == code_lower or requested in aliases:
                return code
            if requested.startswith(f"{code_lower}-"):
                return code
            if any(requested.startswith(f"{alias}-") for alias in aliases):
                return code

        return self.default
