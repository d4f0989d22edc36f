"""Mapping between readable content ids and opaque URL hashes."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import Config
from .exceptions import FragmentError, GalleryBuildError
from .json5_io import load_json5, write_json

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "/"


def md5_hex(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def _entries(data: Any) -> Iterable[Dict[str, Any]]:
    if not isinstance(data, list):
        return []
    return (item for item in data if isinstance(item, dict) and item.get("id"))


def build_hash_map(
    articles: Any = None,
    images: Any = None,
    profiles: Any = None,
) -> Dict[str, str]:
    """Hash every addressable content key.

    Keys are article ids, image ids, ``group/child`` image ids, character
    ids, ``character/variant`` and ``character/variant/image``.
    """
    keys: List[str] = []

    for article in _entries(articles):
        keys.append(str(article["id"]))

    for image in _entries(images):
        keys.append(str(image["id"]))
        for child in _entries(image.get("childImages")):
            keys.append(f"{image['id']}/{child['id']}")

    for character in _entries(profiles):
        keys.append(str(character["id"]))
        for variant in _entries(character.get("variants")):
            keys.append(f"{character['id']}/{variant['id']}")
            for variant_image in _entries(variant.get("images")):
                keys.append(f"{character['id']}/{variant['id']}/{variant_image['id']}")

    return {key: md5_hex(key) for key in keys}


def _load_optional(path: Path) -> Any:
    if not path.exists():
        return None
    try:
        return load_json5(path)
    except FragmentError as exc:
        logger.warning(f"Ignoring unreadable {path.name}: {exc}")
        return None


def generate_hash_map(config: Config) -> Path:
    """Build the hash map from the merged outputs and write it as JSON.

    Raises:
        GalleryBuildError: If the map cannot be written.
    """
    mapping = build_hash_map(
        articles=_load_optional(config.path("articles_output")),
        images=_load_optional(config.path("images_output")),
        profiles=_load_optional(config.path("profiles_output")),
    )

    output = config.path("hash_map_output")
    try:
        write_json(output, mapping)
    except OSError as exc:
        raise GalleryBuildError(f"Failed to write {output}: {exc}") from exc

    logger.info(f"Wrote {len(mapping)} id hashes to {output.name}")
    return output


@dataclass(slots=True)
class ParsedParam:
    """A route parameter split into id parts."""

    parts: List[str] = field(default_factory=list)
    is_hash: bool = False
    raw: Optional[str] = None


class IdHashMap:
    """Two-way lookup over a generated id hash map."""

    def __init__(self, mapping: Dict[str, str]):
        self.mapping = dict(mapping)
        self.reverse = {digest: key for key, digest in self.mapping.items()}

    @classmethod
    def load(cls, path: Path) -> "IdHashMap":
        data = load_json5(path)
        if not isinstance(data, dict):
            raise FragmentError(f"{path} must contain an object", path)
        return cls({str(key): str(value) for key, value in data.items()})

    @staticmethod
    def _key(parts: Sequence[Optional[str]]) -> Optional[str]:
        filtered = [part for part in parts if part]
        if not filtered:
            return None
        return KEY_SEPARATOR.join(filtered)

    def encode_key(self, parts: Sequence[Optional[str]]) -> Optional[str]:
        key = self._key(parts)
        return self.mapping.get(key) if key else None

    def decode_hash(self, digest: Optional[str]) -> Optional[str]:
        if not digest:
            return None
        return self.reverse.get(digest)

    def has_hash_for_key(self, parts: Sequence[Optional[str]]) -> bool:
        key = self._key(parts)
        return bool(key and self.mapping.get(key))

    def parse_param(self, param: Optional[str]) -> ParsedParam:
        """Split a route parameter, decoding it first when it is a known hash."""
        if not param:
            return ParsedParam()

        decoded = self.decode_hash(param)
        if decoded:
            return ParsedParam(parts=[part for part in decoded.split(KEY_SEPARATOR) if part], is_hash=True, raw=param)
        return ParsedParam(parts=[part for part in param.split(KEY_SEPARATOR) if part], is_hash=False, raw=param)


__all__ = ["IdHashMap", "ParsedParam", "build_hash_map", "generate_hash_map", "md5_hex"]
