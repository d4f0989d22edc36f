"""Combined build and housekeeping commands."""

from __future__ import annotations

import typer
from rich import box
from rich.table import Table

from ...backups import cleanup_backups
from ...pipeline import run_build
from ..utils import console, load_config


def build(
    force: bool = typer.Option(False, "--force", "-f", help="Merge even if fragments are unchanged"),
) -> None:
    """Run all pre-build steps: merges, id hash map, feeds and thumbnails."""
    config = load_config()
    report = run_build(config, force=force)

    if report.skipped:
        console.print("[muted]Pre-build processing disabled, nothing to do[/]")
        return

    table = Table(title="Build", box=box.ROUNDED, title_style="title")
    table.add_column("Step", style="label", no_wrap=True)
    table.add_column("Status")
    table.add_column("Detail", style="value")
    for step in report.steps:
        status = "[success]ok[/]" if step.ok else "[danger]failed[/]"
        table.add_row(step.name, status, step.detail)
    console.print(table)

    if not report.ok:
        console.print_error("One or more build steps failed")
        raise typer.Exit(code=1)


def cleanup_backups_command(
    dry_run: bool = typer.Option(False, "--dry-run", help="Only list the files that would be deleted"),
) -> None:
    """Delete backup files (*.backup, *.bak, *~, ...) from the project tree."""
    config = load_config()
    deleted = cleanup_backups(config.root, dry_run=dry_run)

    for path in deleted:
        console.print(f"  [path]{path.relative_to(config.root).as_posix()}[/]")
    verb = "Would delete" if dry_run else "Deleted"
    console.print_success(f"✓ {verb} {len(deleted)} backup files")


def register_commands(app: typer.Typer) -> None:
    """Register build commands with the main CLI app."""
    app.command("build")(build)
    app.command("cleanup-backups")(cleanup_backups_command)
