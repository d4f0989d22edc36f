"""Shared state and helpers for CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich import box
from rich.logging import RichHandler
from rich.table import Table

from ..config import Config
from ..console import Console
from ..exceptions import ConfigurationError, FragmentError
from ..i18n import I18nResolver, Translator
from ..json5_io import load_json5
from ..languages import LanguagesConfig
from ..models import CharacterProfile

console = Console()

_state: Dict[str, Optional[Path]] = {"project": None}


def set_project_root(root: Optional[Path]) -> None:
    _state["project"] = root


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route library logging through rich; verbosity follows the CLI flags."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, markup=False)],
        force=True,
    )


def load_config() -> Config:
    """Load the project configuration or exit with an error message."""
    try:
        return Config.load(_state["project"])
    except ConfigurationError as exc:
        console.print_error(exc, "Configuration error:")
        console.print("[info]Run [accent]gallery-builder config init[/] to create a configuration file")
        raise typer.Exit(code=1) from exc


def build_i18n(config: Config) -> I18nResolver:
    """I18n resolver backed by the project's languages and message catalogs.

    Exits with an error message when the language config is invalid.
    """
    try:
        languages = LanguagesConfig.load(config.path("languages_config"))
    except ConfigurationError as exc:
        console.print_error(exc, "Configuration error:")
        raise typer.Exit(code=1) from exc
    translator = Translator.from_directory(config.path("i18n_dir"), languages)
    return I18nResolver(languages, translator)


def load_profiles(config: Config) -> List[CharacterProfile]:
    """Character profiles from the merged profiles file.

    Raises:
        FragmentError: If the file is missing or malformed.
    """
    path = config.path("profiles_output")
    if not path.exists():
        raise FragmentError(f"{path} does not exist, run 'gallery-builder profiles merge' first", path)
    data = load_json5(path)
    if not isinstance(data, list):
        raise FragmentError(f"{path} must contain a list", path)
    try:
        return [CharacterProfile.from_dict(item) for item in data if isinstance(item, dict)]
    except KeyError as exc:
        raise FragmentError(f"{path} contains an entry without {exc}", path) from exc


def key_value_table(title: str, rows: Dict[str, Any]) -> Table:
    table = Table(title=title, box=box.ROUNDED, title_style="title", show_header=False)
    table.add_column("Key", style="label", no_wrap=True)
    table.add_column("Value", style="value")
    for key, value in rows.items():
        table.add_row(key, str(value))
    return table


__all__ = [
    "build_i18n",
    "configure_logging",
    "console",
    "key_value_table",
    "load_config",
    "load_profiles",
    "set_project_root",
]
