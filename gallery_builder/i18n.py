"""I18n text resolution for configuration values.

Configuration values of type I18nText are either a plain string, a mapping
of language code to string, or a ``$t:`` reference into the translation
catalog. References may carry inline parameters::

    $t:gallery.count{count:'3'}
    $t:gallery.pair['left', '$t:common.right']

Parameter values that are references themselves are resolved recursively.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import json5

from .exceptions import FragmentError
from .json5_io import load_json5
from .languages import LanguagesConfig

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "$t:"
_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")

Params = Union[Mapping[str, Any], Sequence[Any], None]


def interpolate(text: str, params: Params) -> str:
    """Replace ``{name}`` / ``{0}`` placeholders with values from ``params``.

    Unknown placeholders are left untouched and substituted values are not
    scanned again.
    """
    if not params:
        return text

    if isinstance(params, Mapping):
        values = {str(key): value for key, value in params.items()}
    else:
        values = {str(index): value for index, value in enumerate(params)}

    def replace(match: re.Match) -> str:
        key = match.group(1)
        if key in values:
            return str(values[key])
        return match.group(0)

    return _PLACEHOLDER.sub(replace, text)


class Translator:
    """Per-language message catalogs with dot-key lookup."""

    def __init__(self, messages: Dict[str, Dict[str, Any]], fallback: str = "en"):
        self.messages = messages
        self.fallback = fallback

    @classmethod
    def from_directory(cls, directory: Path, languages: LanguagesConfig) -> "Translator":
        """Load ``<code>.json`` catalogs for every enabled language.

        Missing or unreadable catalogs are logged and skipped.
        """
        messages: Dict[str, Dict[str, Any]] = {}
        for code in languages.enabled_languages():
            path = directory / f"{code}.json"
            if not path.exists():
                logger.warning(f"No message catalog for language '{code}' at {path}")
                continue
            try:
                data = load_json5(path)
            except FragmentError as exc:
                logger.warning(f"Skipping message catalog {path}: {exc}")
                continue
            if isinstance(data, dict):
                messages[code] = data
        return cls(messages, fallback=languages.fallback)

    def lookup(self, key: str, lang: str) -> Optional[str]:
        for code in (lang, self.fallback):
            node: Any = self.messages.get(code)
            for part in key.split("."):
                if not isinstance(node, dict) or part not in node:
                    node = None
                    break
                node = node[part]
            if isinstance(node, str):
                return node
        return None

    def translate(self, key: str, lang: str, params: Params = None) -> str:
        """Translate ``key``; unknown keys come back unchanged."""
        message = self.lookup(key, lang)
        if message is None:
            logger.debug(f"Missing translation for '{key}' ({lang})")
            return key
        return interpolate(message, params)


class I18nResolver:
    """Resolves I18nText values for a language with fallback handling."""

    def __init__(
        self,
        languages: Optional[LanguagesConfig] = None,
        translator: Optional[Translator] = None,
    ):
        self.languages = languages or LanguagesConfig()
        self.translator = translator

    def text(self, value: Any, lang: str, params: Params = None) -> str:
        """Resolve ``value`` for ``lang``.

        Mappings are tried in order: the requested language, the fallback
        language, the default language, then the first available entry.
        Anything that is neither a string nor a mapping resolves to ``""``.
        """
        if not value:
            return ""

        if isinstance(value, str):
            return self._process(value, lang, params)

        if not isinstance(value, Mapping):
            return ""

        for code in (lang, self.languages.fallback, self.languages.default):
            candidate = value.get(code)
            if candidate:
                return self._process(str(candidate), lang, params)

        for candidate in value.values():
            return self._process(str(candidate), lang, params)
        return ""

    def _process(self, text: str, lang: str, params: Params) -> str:
        if text.startswith(REFERENCE_PREFIX):
            return self.resolve_reference(text, lang, params)
        return interpolate(text, params)

    def resolve_reference(self, value: str, lang: str, params: Params = None) -> str:
        """Resolve a ``$t:key`` reference with optional inline parameters."""
        if not value.startswith(REFERENCE_PREFIX):
            return value

        content = value[len(REFERENCE_PREFIX):]
        bracket_index = content.find("[")
        brace_index = content.find("{")

        if brace_index != -1 and (bracket_index == -1 or brace_index < bracket_index):
            key = content[:brace_index]
            if self.translator is None:
                logger.warning(f"No translation catalog for reference: {key}")
                return key
            inline = {
                name: self._resolve_param(param, lang, params)
                for name, param in self._parse_named_params(content[brace_index:]).items()
            }
            if isinstance(params, Mapping):
                merged: Params = {**params, **inline}
            else:
                merged = inline
            return self.translator.translate(key, lang, merged)

        if bracket_index != -1:
            key = content[:bracket_index]
            if self.translator is None:
                logger.warning(f"No translation catalog for reference: {key}")
                return key
            positional = [
                self._resolve_param(param, lang, params)
                for param in self._parse_positional_params(content[bracket_index:])
            ]
            return self.translator.translate(key, lang, positional)

        if self.translator is None:
            logger.warning(f"No translation catalog for reference: {content}")
            return content
        return self.translator.translate(content, lang, params)

    def _resolve_param(self, param: str, lang: str, params: Params) -> str:
        if param.startswith(REFERENCE_PREFIX):
            return self.resolve_reference(param, lang, params)
        return param

    @staticmethod
    def _parse_named_params(text: str) -> Dict[str, str]:
        try:
            parsed = json5.loads(text)
        except ValueError as exc:
            logger.warning(f"Failed to parse key-value params {text}: {exc}")
            return {}
        if not isinstance(parsed, dict):
            logger.warning(f"Expected key-value params, got {type(parsed).__name__}: {text}")
            return {}
        return {str(key): str(value) for key, value in parsed.items()}

    @staticmethod
    def _parse_positional_params(text: str) -> List[str]:
        try:
            parsed = json5.loads(text)
        except ValueError as exc:
            logger.warning(f"Failed to parse parameter array {text}: {exc}")
            return []
        if not isinstance(parsed, list):
            logger.warning(f"Expected parameter array, got {type(parsed).__name__}: {text}")
            return []
        return [str(value) for value in parsed]


_default_resolver = I18nResolver()


def get_i18n_text(value: Any, lang: str, params: Params = None, resolver: Optional[I18nResolver] = None) -> str:
    """Resolve an I18nText value with the given (or default) resolver."""
    return (resolver or _default_resolver).text(value, lang, params)
