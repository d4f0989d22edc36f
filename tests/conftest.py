from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict

import json5
import pytest

from gallery_builder.config import SKIP_PREBUILD_ENV, Config


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(root=tmp_path.resolve())


@pytest.fixture
def write_file() -> Callable[[Path, Any], Path]:
    """Write ``data`` as JSON5 (or raw text for strings) creating parents."""

    def _write(path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = data if isinstance(data, str) else json5.dumps(data, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(SKIP_PREBUILD_ENV, raising=False)
    monkeypatch.setenv("GALLERY_NO_THEME", "1")


@pytest.fixture
def profile_data() -> Dict[str, Any]:
    """Character profile exercising every card level, ``from`` and templates."""
    return {
        "id": "amy",
        "name": {"en": "Amy", "ja": "エイミー"},
        "infoCardTemplates": [
            {
                "id": "stat",
                "title": "{label}",
                "content": "{label}: {value}",
                "color": "#111",
                "variables": {"value": "?"},
            }
        ],
        "infoCards": [
            {
                "id": "bio",
                "title": "Bio",
                "content": {"en": "Hello {name}", "ja": "こんにちは {name}"},
                "color": "#abc",
                "variables": {"name": "Amy"},
            },
            {"id": "hp", "template": "stat", "variables": {"label": "HP", "value": "100"}},
        ],
        "variants": [
            {
                "id": "casual",
                "name": "Casual",
                "infoCards": [
                    {"id": "bio2", "from": "bio", "variables": {"name": {"en": "Casual Amy", "ja": "カジュアル"}}}
                ],
                "images": [
                    {"id": "img1", "src": "/1.png", "infoCards": []},
                    {"id": "img2", "src": "/2.png"},
                    {
                        "id": "img3",
                        "src": "/3.png",
                        "infoCards": [{"id": "hp2", "from": "hp", "variables": {"value": "50"}}],
                    },
                ],
            },
            {"id": "formal", "name": "Formal"},
        ],
    }
