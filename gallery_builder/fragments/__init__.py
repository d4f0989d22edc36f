"""Fragment collections: merge per-item JSON5 files and split them back."""

from typing import Dict, Type

from .articles import ArticleCollection
from .base import ConfigCollection, is_fragment_name
from .character_profiles import CharacterProfileCollection
from .images import ImageCollection, expand_group, resolve_child_image

COLLECTIONS: Dict[str, Type[ConfigCollection]] = {
    "images": ImageCollection,
    "articles": ArticleCollection,
    "profiles": CharacterProfileCollection,
}

__all__ = [
    "COLLECTIONS",
    "ArticleCollection",
    "CharacterProfileCollection",
    "ConfigCollection",
    "ImageCollection",
    "expand_group",
    "is_fragment_name",
    "resolve_child_image",
]
