"""Commands generating derived site content: feeds, id hashes, HTML, cards."""

from __future__ import annotations

from typing import Optional

import typer
from rich import box
from rich.table import Table

from ...character_manager import CharacterConfigManager
from ...exceptions import GalleryBuildError
from ...feeds import generate_feeds
from ...html_config import render_site
from ...id_hash import generate_hash_map
from ..utils import build_i18n, console, key_value_table, load_config, load_profiles


def feeds() -> None:
    """Generate RSS, Atom and JSON feeds for every enabled language."""
    config = load_config()
    try:
        written = generate_feeds(config)
    except GalleryBuildError as exc:
        console.print_error(exc, "Feed generation failed:")
        raise typer.Exit(code=1) from exc

    if not written:
        console.print("[muted]No articles found, no feeds generated[/]")
        return
    for path in written:
        console.print(f"  [path]{path.relative_to(config.root).as_posix()}[/]")
    console.print_success(f"✓ Generated {len(written)} feed files")


def hash_map() -> None:
    """Write the id hash map for the merged content."""
    config = load_config()
    try:
        output = generate_hash_map(config)
    except GalleryBuildError as exc:
        console.print_error(exc)
        raise typer.Exit(code=1) from exc
    console.print_success(f"✓ Wrote {output.relative_to(config.root).as_posix()}")


def html() -> None:
    """Render index.html and 404.html with the site configuration."""
    config = load_config()
    try:
        written = render_site(config)
    except GalleryBuildError as exc:
        console.print_error(exc)
        raise typer.Exit(code=1) from exc
    for path in written:
        console.print_success(f"✓ Rendered {path.relative_to(config.root).as_posix()}")


def cards(
    character_id: str = typer.Argument(..., help="Character id"),
    variant: Optional[str] = typer.Option(None, "--variant", help="Variant id"),
    image: Optional[str] = typer.Option(None, "--image", help="Variant image id"),
    lang: str = typer.Option("en", "--lang", "-l", help="Language to resolve text in"),
    card: Optional[str] = typer.Option(None, "--card", help="Preview a single card by id"),
) -> None:
    """Show the resolved info cards of a character position."""
    config = load_config()
    manager = CharacterConfigManager(i18n=build_i18n(config))

    try:
        profiles = load_profiles(config)
    except GalleryBuildError as exc:
        console.print_error(exc)
        raise typer.Exit(code=1) from exc

    character = next((profile for profile in profiles if profile.id == character_id), None)
    if character is None:
        console.print_error(f"Unknown character '{character_id}'")
        raise typer.Exit(code=1)

    if card:
        preview = manager.preview_card(character, card, lang, variant, image)
        if not preview.found or preview.card is None:
            console.print_error(f"Card '{card}' not found")
            raise typer.Exit(code=1)
        resolved = preview.card
        details = {
            "Title": manager.i18n.text(resolved.title, lang),
            "Content": manager.i18n.text(resolved.content, lang),
            "Color": resolved.color or "",
            "Resolved from": resolved.resolved_from,
            "Source": preview.source,
        }
        console.print(key_value_table(f"Card: {card}", details))
        return

    try:
        rows = manager.character_cards(character, lang, variant, image)
    except GalleryBuildError as exc:
        console.print_error(exc, "Card resolution failed:")
        raise typer.Exit(code=1) from exc

    table = Table(title=f"Info cards: {character_id}", box=box.ROUNDED, title_style="title", show_lines=True)
    table.add_column("ID", style="accent", no_wrap=True)
    table.add_column("Title", style="value")
    table.add_column("Content", style="value")
    table.add_column("Color", style="muted")
    table.add_column("From", style="label")
    for resolved in rows:
        table.add_row(
            resolved.id,
            manager.i18n.text(resolved.title, lang),
            manager.i18n.text(resolved.content, lang),
            resolved.color or "",
            resolved.resolved_from,
        )
    console.print(table)


def register_commands(app: typer.Typer) -> None:
    """Register content commands with the main CLI app."""
    app.command("feeds")(feeds)
    app.command("hash-map")(hash_map)
    app.command("html")(html)
    app.command("cards")(cards)
