"""Command line interface for the gallery build toolkit.

Command modules live in ``commands/`` and register themselves on the main
Typer app; shared state (console, project root, config loading) lives in
``utils``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import typer

from .commands import assets_cmd, build_cmd, collections_cmd, config_cmd, content_cmd
from .utils import configure_logging, console, set_project_root

__all__ = ["app", "main"]

app = typer.Typer(help="Merge content fragments and generate build artefacts for the gallery site.")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output for debugging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-essential output",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    project: Optional[Path] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project root (defaults to the current directory)",
        file_okay=False,
    ),
) -> None:
    """CLI entry-point callback for shared initialisation."""
    console.set_quiet(quiet)

    if no_color:
        os.environ["NO_COLOR"] = "1"
        console.no_color = True

    configure_logging(verbose, quiet)
    set_project_root(project)


collections_cmd.register_commands(app)
content_cmd.register_commands(app)
assets_cmd.register_commands(app)
build_cmd.register_commands(app)
config_cmd.register_commands(app)


def main() -> None:
    app()
