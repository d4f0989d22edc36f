"""Combined pre-build pipeline."""

from __future__ import annotations

import logging
from typing import Callable, List, Tuple

from .config import Config
from .exceptions import GalleryBuildError
from .feeds import generate_feeds
from .fragments import COLLECTIONS
from .id_hash import generate_hash_map
from .models import BuildReport, BuildStep
from .thumbnails import generate_thumbnails

logger = logging.getLogger(__name__)


def _merge_step(config: Config, name: str, force: bool) -> Callable[[], str]:
    def run() -> str:
        result = COLLECTIONS[name](config).merge(force=force)
        if result.skipped:
            return f"skipped ({result.reason})"
        return f"{result.entries} entries from {result.files} files"

    return run


def _hash_map_step(config: Config) -> str:
    return generate_hash_map(config).name


def _feeds_step(config: Config) -> str:
    written = generate_feeds(config)
    return f"{len(written)} feed files" if written else "no articles"


def _thumbnails_step(config: Config) -> str:
    report = generate_thumbnails(config)
    if report.failed:
        raise GalleryBuildError(f"{len(report.failed)} thumbnails failed: {', '.join(report.failed)}")
    return f"{len(report.generated)} generated, {len(report.removed)} removed"


def build_steps(config: Config, force: bool = False) -> List[Tuple[str, Callable[[], str]]]:
    steps: List[Tuple[str, Callable[[], str]]] = [
        (f"merge {name}", _merge_step(config, name, force)) for name in ("images", "articles", "profiles")
    ]
    steps.append(("id hash map", lambda: _hash_map_step(config)))
    steps.append(("feeds", lambda: _feeds_step(config)))
    if config.build.thumbnails:
        steps.append(("thumbnails", lambda: _thumbnails_step(config)))
    return steps


def run_build(config: Config, force: bool = False) -> BuildReport:
    """Run every pre-build step; a failing step does not stop the others.

    Nothing runs when pre-build processing is disabled through
    ``GALLERY_SKIP_PREBUILD`` or ``build.skip_prebuild``.
    """
    report = BuildReport()
    if config.skip_prebuild():
        logger.info("Pre-build processing disabled, skipping")
        report.skipped = True
        return report

    for name, step in build_steps(config, force):
        try:
            detail = step()
        except GalleryBuildError as exc:
            logger.error(f"Build step '{name}' failed: {exc}")
            report.steps.append(BuildStep(name=name, ok=False, detail=str(exc)))
            continue
        except Exception as exc:
            logger.exception(f"Build step '{name}' failed unexpectedly")
            report.steps.append(BuildStep(name=name, ok=False, detail=str(exc)))
            continue
        report.steps.append(BuildStep(name=name, ok=True, detail=detail))
        logger.info(f"Build step '{name}': {detail}")

    return report


__all__ = ["build_steps", "run_build"]
