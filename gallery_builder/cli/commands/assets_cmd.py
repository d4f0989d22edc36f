"""Image asset commands."""

from __future__ import annotations

import typer

from ...thumbnails import convert_to_webp, find_images, generate_thumbnails
from ..utils import console, load_config

PREVIEW_COUNT = 5


def thumbnails() -> None:
    """Generate missing or outdated thumbnails and remove stale ones."""
    config = load_config()
    report = generate_thumbnails(config)

    console.print_success(
        f"✓ {len(report.generated)} generated, {report.up_to_date} up to date, {len(report.removed)} removed"
    )
    if report.failed:
        console.print_error(f"Failed: {', '.join(report.failed)}")
        raise typer.Exit(code=1)


def webp(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Convert asset images to WebP in place (file names are kept)."""
    config = load_config()
    assets_dir = config.path("assets_dir")
    if not assets_dir.is_dir():
        console.print_error(f"Assets directory {assets_dir} does not exist")
        raise typer.Exit(code=1)

    files = find_images(assets_dir, config.thumbnails.extensions, skip_dir=config.path("thumbnails_dir"))
    if not files:
        console.print("[muted]No images found[/]")
        return

    console.print_warning("This rewrites the original image files as WebP.")
    console.print(f"[label]Images:[/] {len(files)}")
    for path in files[:PREVIEW_COUNT]:
        console.print(f"  [path]{path.relative_to(assets_dir).as_posix()}[/]")
    if len(files) > PREVIEW_COUNT:
        console.print(f"  [muted]... and {len(files) - PREVIEW_COUNT} more[/]")

    if not yes and not typer.confirm("Continue?", default=False):
        console.print("[muted]Cancelled[/]")
        raise typer.Exit(code=0)

    report = convert_to_webp(config, files)
    console.print_success(
        f"✓ Converted {len(report.converted)} ({len(report.animated)} animated), "
        f"skipped {len(report.skipped)} already WebP"
    )
    if report.failed:
        console.print_error(f"Failed: {', '.join(report.failed)}")
        raise typer.Exit(code=1)


def register_commands(app: typer.Typer) -> None:
    """Register asset commands with the main CLI app."""
    app.command("thumbnails")(thumbnails)
    app.command("webp")(webp)
