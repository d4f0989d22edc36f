"""Tests for project configuration loading and editing."""

import pytest

from gallery_builder.config import CONFIG_FILE_NAME, SKIP_PREBUILD_ENV, Config
from gallery_builder.exceptions import ConfigurationError


def test_load_returns_defaults_without_config_file(tmp_path):
    config = Config.load(tmp_path)

    assert config.root == tmp_path.resolve()
    assert config.paths.images_dir == "src/config/images"
    assert config.feeds.max_items == 50
    assert not config.config_file.exists()


def test_dump_and_load_round_trip(tmp_path):
    config = Config.load(tmp_path)
    config.set_value("feeds.max_items", "20")
    config.set_value("paths.public_dir", "static")
    config.dump()

    loaded = Config.load(tmp_path)

    assert loaded.feeds.max_items == 20
    assert loaded.paths.public_dir == "static"
    assert loaded.path("public_dir") == (tmp_path / "static").resolve()


def test_dump_creates_backup_of_existing_file(tmp_path):
    config = Config.load(tmp_path)
    config.dump()
    config.dump()

    backups = list(tmp_path.glob("gallery-builder.*.bak"))
    assert len(backups) == 1


def test_set_value_converts_types(tmp_path):
    config = Config.load(tmp_path)

    config.set_value("build.thumbnails", "false")
    config.set_value("thumbnails.extensions", "PNG, jpg")

    assert config.get_value("build.thumbnails") is False
    assert config.get_value("thumbnails.extensions") == [".png", ".jpg"]


@pytest.mark.parametrize(
    "key, value",
    [
        ("feeds.max_items", "0"),
        ("feeds.max_items", "many"),
        ("thumbnails.quality", "101"),
        ("feeds.unknown", "1"),
        ("nosection.field", "1"),
        ("feeds", "1"),
        ("paths.images_dir", "  "),
    ],
)
def test_set_value_rejects_invalid_input(tmp_path, key, value):
    config = Config.load(tmp_path)

    with pytest.raises(ConfigurationError):
        config.set_value(key, value)


def test_load_rejects_invalid_toml(tmp_path):
    (tmp_path / CONFIG_FILE_NAME).write_text("[feeds\nmax_items = ", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        Config.load(tmp_path)


def test_load_rejects_invalid_values(tmp_path):
    (tmp_path / CONFIG_FILE_NAME).write_text("[feeds]\nttl = -1\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        Config.load(tmp_path)


def test_unknown_path_setting_is_rejected(tmp_path):
    with pytest.raises(ConfigurationError):
        Config.load(tmp_path).path("nowhere")


def test_cache_file_location(tmp_path):
    config = Config.load(tmp_path)

    assert config.cache_file("images") == tmp_path.resolve() / ".images-cache.json"


def test_skip_prebuild_prefers_environment(tmp_path, monkeypatch):
    config = Config.load(tmp_path)
    assert config.skip_prebuild() is False

    config.build.skip_prebuild = True
    assert config.skip_prebuild() is True

    monkeypatch.setenv(SKIP_PREBUILD_ENV, "false")
    assert config.skip_prebuild() is False

    config.build.skip_prebuild = False
    monkeypatch.setenv(SKIP_PREBUILD_ENV, "true")
    assert config.skip_prebuild() is True
