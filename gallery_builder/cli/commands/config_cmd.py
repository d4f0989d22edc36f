"""Configuration commands.

Settings live in ``gallery-builder.toml`` at the project root and are
addressed in dot notation (``section.field``).
"""

from __future__ import annotations

import typer
from rich import box
from rich.table import Table

from ...config import Config
from ...exceptions import ConfigurationError
from ..utils import console, load_config

config_app = typer.Typer(help="Manage configuration settings")


@config_app.command("show")
def show_config() -> None:
    """Display the effective configuration."""
    config = load_config()

    table = Table(
        title="Gallery Builder Configuration",
        box=box.ROUNDED,
        title_style="title",
        expand=True,
        show_lines=True,
    )
    table.add_column("Section", style="label", no_wrap=True)
    table.add_column("Values", style="value")

    for section, values in config.to_dict().items():
        if not isinstance(values, dict):
            table.add_row(f"[accent]{section}[/]", str(values))
            continue
        rendered = "\n".join(f"[label]{key}[/]: [value]{value}[/]" for key, value in values.items())
        table.add_row(f"[accent]{section}[/]", rendered)

    console.print(table)
    source = config.config_file if config.config_file.exists() else "defaults"
    console.print(f"[muted]Source: {source}[/]")


@config_app.command("get")
def config_get(
    key: str = typer.Argument(..., help="Configuration key in dot notation (e.g. feeds.max_items)"),
) -> None:
    """Get a configuration value.

    Examples:
        gallery-builder config get feeds.max_items
        gallery-builder config get paths.images_dir
    """
    config = load_config()
    try:
        value = config.get_value(key)
    except ConfigurationError as exc:
        console.print_error(exc)
        raise typer.Exit(code=1) from exc
    console.print(f"{key} = {value}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Configuration key in dot notation (e.g. feeds.max_items)"),
    value: str = typer.Argument(..., help="Value to set"),
) -> None:
    """Set a configuration value.

    Examples:
        gallery-builder config set feeds.max_items 20
        gallery-builder config set build.thumbnails false
    """
    config = load_config()
    try:
        config.set_value(key, value)
        config.dump()
    except ConfigurationError as exc:
        console.print_error(exc)
        raise typer.Exit(code=1) from exc
    console.print_success(f"✓ Configuration updated: {key} = {value}")


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing configuration file"),
) -> None:
    """Write a configuration file with the default settings."""
    config = load_config()
    if config.config_file.exists() and not force:
        console.print_error(f"{config.config_file.name} already exists (use --force to overwrite)")
        raise typer.Exit(code=1)

    path = Config(root=config.root).dump(backup=True)
    console.print_success(f"✓ Wrote {path}")


def register_commands(app: typer.Typer) -> None:
    """Register config commands with the main CLI app."""
    app.add_typer(config_app, name="config")
