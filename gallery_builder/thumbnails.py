"""Thumbnail generation and in-place WebP conversion for gallery assets."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Iterable, List, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from .config import Config
from .exceptions import ThumbnailError

logger = logging.getLogger(__name__)

THUMBNAIL_SUFFIX = ".webp"


@dataclass(slots=True)
class ThumbnailReport:
    generated: List[Path] = field(default_factory=list)
    up_to_date: int = 0
    removed: List[Path] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ConversionReport:
    converted: List[Path] = field(default_factory=list)
    animated: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def find_images(assets_dir: Path, extensions: Iterable[str], skip_dir: Optional[Path] = None) -> List[Path]:
    """Image files under ``assets_dir``, excluding the thumbnails directory."""
    if not assets_dir.is_dir():
        return []

    wanted = {ext.lower() for ext in extensions}
    images = []
    for path in assets_dir.rglob("*"):
        if not path.is_file() or path.suffix.lower() not in wanted:
            continue
        if skip_dir is not None and skip_dir in path.parents:
            continue
        images.append(path)
    return sorted(images)


def thumbnail_path(source: Path, assets_dir: Path, thumbnails_dir: Path) -> Path:
    """Thumbnail location mirroring ``source``'s path below the assets directory.

    The source extension is kept, so ``a.png`` and ``a.jpg`` get separate
    thumbnails ``a.png.webp`` and ``a.jpg.webp``.
    """
    relative = source.relative_to(assets_dir)
    return thumbnails_dir / relative.parent / f"{relative.name}{THUMBNAIL_SUFFIX}"


def needs_thumbnail(source: Path, thumbnail: Path) -> bool:
    if not thumbnail.exists():
        return True
    return thumbnail.stat().st_mtime < source.stat().st_mtime


def make_thumbnail(source: Path, target: Path, max_size: tuple[int, int], quality: int) -> None:
    """Write a WebP thumbnail of ``source`` no larger than ``max_size``.

    Raises:
        ThumbnailError: If the source cannot be decoded or the target written.
    """
    try:
        with Image.open(source) as image:
            image = ImageOps.exif_transpose(image)
            if image.mode not in ("RGB", "RGBA"):
                image = image.convert("RGBA" if "A" in image.getbands() or image.mode == "P" else "RGB")
            image.thumbnail(max_size, Image.Resampling.LANCZOS)
            target.parent.mkdir(parents=True, exist_ok=True)
            image.save(target, format="WEBP", quality=quality, method=6)
    except (OSError, UnidentifiedImageError) as exc:
        raise ThumbnailError(f"Failed to create thumbnail for {source}: {exc}") from exc


def generate_thumbnails(config: Config) -> ThumbnailReport:
    """Create missing or outdated thumbnails and remove orphaned ones."""
    assets_dir = config.path("assets_dir")
    thumbnails_dir = config.path("thumbnails_dir")
    settings = config.thumbnails
    report = ThumbnailReport()

    if not assets_dir.is_dir():
        logger.info(f"{assets_dir} does not exist, skipping thumbnails")
        return report

    expected = set()
    for source in find_images(assets_dir, settings.extensions, skip_dir=thumbnails_dir):
        target = thumbnail_path(source, assets_dir, thumbnails_dir)
        expected.add(target)

        if not needs_thumbnail(source, target):
            report.up_to_date += 1
            continue

        try:
            make_thumbnail(source, target, (settings.max_width, settings.max_height), settings.quality)
        except ThumbnailError as exc:
            logger.error(str(exc))
            report.failed.append(source.relative_to(assets_dir).as_posix())
            continue
        report.generated.append(target)
        logger.debug(f"Generated thumbnail {target.relative_to(thumbnails_dir).as_posix()}")

    if thumbnails_dir.is_dir():
        for stale in sorted(thumbnails_dir.rglob("*")):
            if stale.is_file() and stale not in expected:
                stale.unlink()
                report.removed.append(stale)
                logger.debug(f"Removed stale thumbnail {stale.name}")

    logger.info(
        f"Thumbnails: {len(report.generated)} generated, {report.up_to_date} up to date, "
        f"{len(report.removed)} removed"
    )
    return report


def convert_file_to_webp(path: Path, quality: int) -> Optional[bool]:
    """Re-encode ``path`` as WebP in place, keeping its file name.

    Returns:
        None if the file already is WebP, otherwise whether it was animated

    Raises:
        ThumbnailError: If the file cannot be decoded or re-encoded.
    """
    try:
        with Image.open(path) as image:
            if image.format == "WEBP":
                return None
            animated = bool(getattr(image, "is_animated", False))
            buffer = BytesIO()
            if animated:
                image.save(buffer, format="WEBP", quality=quality, save_all=True)
            else:
                if image.mode not in ("RGB", "RGBA"):
                    image = image.convert("RGBA")
                image.save(buffer, format="WEBP", quality=quality)
        path.write_bytes(buffer.getvalue())
    except (OSError, UnidentifiedImageError) as exc:
        raise ThumbnailError(f"Failed to convert {path}: {exc}") from exc
    return animated


def convert_to_webp(config: Config, files: Optional[Iterable[Path]] = None) -> ConversionReport:
    """Convert asset images to WebP in place; files already in WebP are skipped."""
    assets_dir = config.path("assets_dir")
    if files is None:
        files = find_images(assets_dir, config.thumbnails.extensions, skip_dir=config.path("thumbnails_dir"))

    report = ConversionReport()
    for path in files:
        try:
            animated = convert_file_to_webp(path, config.thumbnails.webp_quality)
        except ThumbnailError as exc:
            logger.error(str(exc))
            report.failed.append(str(path))
            continue

        if animated is None:
            report.skipped.append(path)
            continue
        report.converted.append(path)
        if animated:
            report.animated.append(path)
        logger.debug(f"Converted {path.name}{' (animated)' if animated else ''}")

    logger.info(
        f"WebP conversion: {len(report.converted)} converted, {len(report.skipped)} skipped, "
        f"{len(report.failed)} failed"
    )
    return report


__all__ = [
    "ConversionReport",
    "ThumbnailReport",
    "convert_file_to_webp",
    "convert_to_webp",
    "find_images",
    "generate_thumbnails",
    "make_thumbnail",
    "thumbnail_path",
]
