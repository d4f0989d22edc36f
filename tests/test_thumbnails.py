"""Tests for thumbnail generation and WebP conversion."""

import os

import pytest
from PIL import Image

from gallery_builder.exceptions import ThumbnailError
from gallery_builder.thumbnails import (
    convert_file_to_webp,
    convert_to_webp,
    find_images,
    generate_thumbnails,
    make_thumbnail,
    thumbnail_path,
)


def _png(path, size=(1000, 500), mode="RGB"):
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size).save(path, format="PNG")
    return path


def _animated_gif(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    frames = [Image.new("RGB", (20, 20), color) for color in ((255, 0, 0), (0, 255, 0), (0, 0, 255))]
    frames[0].save(path, format="GIF", save_all=True, append_images=frames[1:], duration=100, loop=0)
    return path


@pytest.fixture
def assets(config):
    return config.path("assets_dir")


def test_find_images_skips_thumbnails_and_other_files(config, assets):
    _png(assets / "a.png")
    _png(assets / "sub" / "b.PNG")
    _png(config.path("thumbnails_dir") / "a.webp")
    (assets / "notes.txt").write_text("x", encoding="utf-8")

    found = find_images(assets, [".png", ".webp"], skip_dir=config.path("thumbnails_dir"))

    assert [path.relative_to(assets).as_posix() for path in found] == ["a.png", "sub/b.PNG"]


def test_thumbnail_path_mirrors_source(tmp_path):
    assets = tmp_path / "assets"

    assert thumbnail_path(assets / "art" / "cat.jpg", assets, tmp_path / "thumbs") == tmp_path / "thumbs" / "art" / "cat.jpg.webp"


def test_make_thumbnail_fits_within_bounds(tmp_path):
    source = _png(tmp_path / "wide.png")
    target = tmp_path / "out" / "wide.webp"

    make_thumbnail(source, target, (200, 200), quality=80)

    with Image.open(target) as thumb:
        assert thumb.format == "WEBP"
        assert thumb.size == (200, 100)


def test_make_thumbnail_converts_palette_images(tmp_path):
    source = _png(tmp_path / "palette.png", size=(50, 50), mode="P")
    target = tmp_path / "palette.webp"

    make_thumbnail(source, target, (20, 20), quality=80)

    assert target.exists()


def test_make_thumbnail_rejects_non_images(tmp_path):
    source = tmp_path / "broken.png"
    source.write_bytes(b"not an image")

    with pytest.raises(ThumbnailError):
        make_thumbnail(source, tmp_path / "broken.webp", (20, 20), quality=80)


def test_generate_thumbnails_is_incremental_and_prunes(config, assets):
    source = _png(assets / "art" / "cat.png")
    (assets / "broken.png").write_bytes(b"nope")
    thumbs = config.path("thumbnails_dir")
    stale = _png(thumbs / "gone.webp", size=(10, 10))

    report = generate_thumbnails(config)

    target = thumbs / "art" / "cat.png.webp"
    assert report.generated == [target]
    assert report.failed == ["broken.png"]
    assert report.removed == [stale]
    assert not stale.exists()

    second = generate_thumbnails(config)
    assert second.generated == []
    assert second.up_to_date == 1

    old = target.stat().st_mtime - 100
    os.utime(target, (old, old))
    assert generate_thumbnails(config).generated == [target]
    assert source.exists()


def test_generate_thumbnails_keeps_same_named_sources_apart(config, assets):
    _png(assets / "a.png", size=(40, 20))
    Image.new("RGB", (20, 40)).save(assets / "a.jpg", format="JPEG")
    thumbs = config.path("thumbnails_dir")

    report = generate_thumbnails(config)

    assert sorted(path.name for path in report.generated) == ["a.jpg.webp", "a.png.webp"]
    with Image.open(thumbs / "a.png.webp") as thumb:
        assert thumb.size == (40, 20)
    with Image.open(thumbs / "a.jpg.webp") as thumb:
        assert thumb.size == (20, 40)

    second = generate_thumbnails(config)
    assert second.up_to_date == 2
    assert second.removed == []


def test_generate_thumbnails_without_assets(config):
    report = generate_thumbnails(config)

    assert report.generated == []
    assert report.failed == []


def test_convert_file_to_webp_in_place(tmp_path):
    path = _png(tmp_path / "a.png", size=(30, 30))

    assert convert_file_to_webp(path, quality=90) is False
    with Image.open(path) as image:
        assert image.format == "WEBP"

    assert convert_file_to_webp(path, quality=90) is None


def test_convert_file_to_webp_keeps_animation(tmp_path):
    path = _animated_gif(tmp_path / "anim.gif")

    assert convert_file_to_webp(path, quality=90) is True
    with Image.open(path) as image:
        assert image.format == "WEBP"
        assert image.is_animated


def test_convert_to_webp_report(config, assets):
    png = _png(assets / "a.png", size=(30, 30))
    gif = _animated_gif(assets / "b.gif")
    broken = assets / "c.jpg"
    broken.write_bytes(b"nope")

    report = convert_to_webp(config)

    assert report.converted == [png, gif]
    assert report.animated == [gif]
    assert report.failed == [str(broken)]

    again = convert_to_webp(config, files=[png])
    assert again.skipped == [png]
