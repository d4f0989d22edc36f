"""Configuration utilities for the gallery build CLI."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

try:
    import tomllib as tomli  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli  # type: ignore[no-redef]
from pydantic import BaseModel, ValidationError, field_validator
from tomli_w import dump as toml_dump

from .exceptions import ConfigurationError

CONFIG_FILE_NAME = "gallery-builder.toml"
CONFIG_VERSION = "1.0.0"
SKIP_PREBUILD_ENV = "GALLERY_SKIP_PREBUILD"


class PathsConfig(BaseModel):
    """Project-relative locations of sources and generated artefacts."""

    images_dir: str = "src/config/images"
    images_output: str = "src/config/images.json5"
    articles_dir: str = "src/config/articles"
    articles_output: str = "src/config/articles.json5"
    profiles_dir: str = "src/config/character-profiles"
    profiles_output: str = "src/config/character-profiles.json"
    hash_map_output: str = "src/config/id-hash-map.json"
    html_config: str = "src/config/html.json5"
    languages_config: str = "src/config/languages.json5"
    i18n_dir: str = "src/i18n"
    cache_dir: str = "."
    public_dir: str = "public"
    feeds_dir: str = "public/feeds"
    assets_dir: str = "public/assets"
    thumbnails_dir: str = "public/assets/thumbnails"
    html_template: str = "index.html"
    not_found_page: str = "public/404.html"
    dist_dir: str = "dist"

    @field_validator("*")
    @classmethod
    def validate_not_blank(cls, v: str, info) -> str:
        """Validate that every path is set."""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} must not be empty")
        return v


class FeedsConfig(BaseModel):
    """Settings for RSS/Atom/JSON feed generation."""

    max_items: int = 50
    ttl: int = 60

    @field_validator("max_items", "ttl")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        """Validate that numeric fields are positive."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive, got {v}")
        return v


class ThumbnailsConfig(BaseModel):
    """Settings for thumbnail generation and WebP conversion."""

    max_width: int = 480
    max_height: int = 480
    quality: int = 80
    webp_quality: int = 100
    extensions: list[str] = [".png", ".jpg", ".jpeg", ".gif", ".webp"]

    @field_validator("max_width", "max_height")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive, got {v}")
        return v

    @field_validator("quality", "webp_quality")
    @classmethod
    def validate_quality(cls, v: int, info) -> int:
        """Validate that quality settings are within Pillow's range."""
        if not 1 <= v <= 100:
            raise ValueError(f"{info.field_name} must be between 1 and 100, got {v}")
        return v

    @field_validator("extensions")
    @classmethod
    def normalise_extensions(cls, v: list[str]) -> list[str]:
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]


class BuildConfig(BaseModel):
    """Settings for the combined build pipeline."""

    skip_prebuild: bool = False
    thumbnails: bool = True


@dataclass(slots=True)
class Config:
    """Top-level configuration container."""

    root: Path = field(default_factory=Path.cwd)
    version: str = CONFIG_VERSION
    paths: PathsConfig = field(default_factory=PathsConfig)
    feeds: FeedsConfig = field(default_factory=FeedsConfig)
    thumbnails: ThumbnailsConfig = field(default_factory=ThumbnailsConfig)
    build: BuildConfig = field(default_factory=BuildConfig)

    @property
    def config_file(self) -> Path:
        return self.root / CONFIG_FILE_NAME

    @classmethod
    def load(cls, root: Path | None = None) -> "Config":
        """Load configuration data from the project root.

        Args:
            root: Project root directory; defaults to the working directory.

        Returns:
            Config: The loaded configuration object, or defaults when the
            project has no configuration file.

        Raises:
            ConfigurationError: If the configuration file is corrupted or invalid.
        """
        root = (root or Path.cwd()).resolve()
        path = root / CONFIG_FILE_NAME

        if not path.exists():
            return cls(root=root)

        try:
            with path.open("rb") as handle:
                raw: Dict[str, Any] = tomli.load(handle)
        except (OSError, tomli.TOMLDecodeError) as exc:
            raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

        version = raw.get("version", CONFIG_VERSION)

        try:
            paths = PathsConfig(**raw.get("paths", {}))
            feeds = FeedsConfig(**raw.get("feeds", {}))
            thumbnails = ThumbnailsConfig(**raw.get("thumbnails", {}))
            build = BuildConfig(**raw.get("build", {}))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc

        return cls(root=root, version=version, paths=paths, feeds=feeds, thumbnails=thumbnails, build=build)

    def dump(self, backup: bool = True) -> Path:
        """Persist the configuration to the project root.

        Args:
            backup: If True and the config file exists, create a backup before overwriting.

        Returns:
            Path of the written configuration file.
        """
        path = self.config_file
        self.root.mkdir(parents=True, exist_ok=True)

        if backup and path.exists():
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            backup_path = path.parent / f"{path.stem}.{timestamp}.bak"
            shutil.copy2(path, backup_path)

        with path.open("wb") as handle:
            toml_dump(self.to_dict(), handle)
        return path

    def to_dict(self) -> Dict[str, Any]:
        """Return a serialisable representation (the project root is implied)."""

        return {
            "version": self.version,
            "paths": self.paths.model_dump(),
            "feeds": self.feeds.model_dump(),
            "thumbnails": self.thumbnails.model_dump(),
            "build": self.build.model_dump(),
        }

    def path(self, name: str) -> Path:
        """Resolve a ``[paths]`` entry against the project root.

        Raises:
            ConfigurationError: If ``name`` is not a known path setting.
        """
        if name not in PathsConfig.model_fields:
            raise ConfigurationError(f"Unknown path setting '{name}'")
        return (self.root / getattr(self.paths, name)).resolve()

    def cache_file(self, collection: str) -> Path:
        """Location of the content-hash cache for ``collection``."""
        return self.path("cache_dir") / f".{collection}-cache.json"

    def skip_prebuild(self) -> bool:
        """Whether build-time processing should be skipped (pre-processed in CI)."""
        env = os.getenv(SKIP_PREBUILD_ENV, "").lower()
        if env:
            return env in ("1", "true", "yes")
        return self.build.skip_prebuild

    def _sections(self) -> Dict[str, BaseModel]:
        return {
            "paths": self.paths,
            "feeds": self.feeds,
            "thumbnails": self.thumbnails,
            "build": self.build,
        }

    def _resolve_key(self, key: str) -> tuple[BaseModel, str]:
        parts = key.split(".")
        if len(parts) != 2:
            raise ConfigurationError(f"Invalid key format '{key}'. Expected format: section.field")

        section, field_name = parts
        sections = self._sections()

        if section not in sections:
            valid_sections = ", ".join(sections.keys())
            raise ConfigurationError(f"Invalid section '{section}'. Valid sections: {valid_sections}")

        config_obj = sections[section]
        if field_name not in type(config_obj).model_fields:
            valid_fields = ", ".join(type(config_obj).model_fields.keys())
            raise ConfigurationError(
                f"Invalid field '{field_name}' for section '{section}'. Valid fields: {valid_fields}"
            )
        return config_obj, field_name

    def set_value(self, key: str, value: str) -> None:
        """Set a configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g. 'feeds.max_items')
            value: Value to set (converted to the field's type)

        Raises:
            ConfigurationError: If key is invalid or value cannot be converted
        """
        config_obj, field_name = self._resolve_key(key)
        field_type = type(config_obj).model_fields[field_name].annotation

        try:
            if field_type is int:
                converted: Any = int(value)
            elif field_type is bool:
                converted = value.lower() in ("true", "1", "yes", "on")
            elif field_type == list[str]:
                converted = [item.strip() for item in value.split(",") if item.strip()]
            else:
                converted = value

            current_data = config_obj.model_dump()
            current_data[field_name] = converted
            validated_model = type(config_obj).model_validate(current_data)
        except ValidationError as exc:
            error_msg = "; ".join(f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in exc.errors())
            raise ConfigurationError(f"Validation error for {key}: {error_msg}") from exc
        except (ValueError, TypeError) as exc:
            raise ConfigurationError(f"Cannot convert '{value}' to {field_type} for {key}") from exc

        for name in type(validated_model).model_fields:
            setattr(config_obj, name, getattr(validated_model, name))

    def get_value(self, key: str) -> Any:
        """Get a configuration value using dot notation.

        Raises:
            ConfigurationError: If key is invalid
        """
        config_obj, field_name = self._resolve_key(key)
        return getattr(config_obj, field_name)
