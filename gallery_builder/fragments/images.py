"""Image fragments and image-group inheritance."""

from __future__ import annotations

from typing import Any, Dict, List

from ..utils import sort_key_date
from ..validation import is_valid_image
from .base import ConfigCollection

# Fields a child image takes from its group unless it sets them itself.
INHERITED_FIELDS = ("artist", "authorLinks", "tags", "characters", "date")
_TEXT_DEFAULTS = {"name": "", "listName": "", "description": ""}
_DEFAULT_ARTIST = "N/A"


def resolve_child_image(parent: Dict[str, Any], child: Dict[str, Any]) -> Dict[str, Any]:
    """Return the full view of ``child`` with group fields filled in.

    Args:
        parent: Group image carrying ``childImages``
        child: One entry of the group's ``childImages``

    Returns:
        New dict; neither argument is modified
    """
    resolved: Dict[str, Any] = {"id": child["id"], "src": child.get("src")}

    for key, default in _TEXT_DEFAULTS.items():
        value = child.get(key)
        resolved[key] = value if value is not None else parent.get(key, default)

    for key in INHERITED_FIELDS:
        value = child.get(key)
        if value is None:
            value = parent.get(key)
        if value is not None:
            resolved[key] = value

    resolved.setdefault("artist", _DEFAULT_ARTIST)
    return resolved


def expand_group(image: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Flatten an image (group) into displayable images.

    The parent itself is included when it has its own ``src``; children
    follow in declaration order.
    """
    expanded: List[Dict[str, Any]] = []
    if image.get("src"):
        expanded.append({key: value for key, value in image.items() if key != "childImages"})
    for child in image.get("childImages") or []:
        expanded.append(resolve_child_image(image, child))
    return expanded


class ImageCollection(ConfigCollection):
    """Images merged into ``images.json5``, newest first."""

    name = "images"
    kind = "images"
    directory_setting = "images_dir"
    output_setting = "images_output"

    def validate(self, entry: Any) -> bool:
        return is_valid_image(entry)

    def sort(self, entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return sorted(entries, key=sort_key_date, reverse=True)
