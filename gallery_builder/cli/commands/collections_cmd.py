"""Merge, split and cleanup commands for the fragment collections."""

from __future__ import annotations

from typing import List, Optional, Type

import typer
from rich import box
from rich.table import Table

from ...article_queries import SORT_ORDERS, calculate_pagination, filter_articles, paginate_articles
from ...character_manager import CharacterConfigManager
from ...exceptions import GalleryBuildError
from ...fragments import COLLECTIONS, ConfigCollection
from ...json5_io import load_json5
from ...models import CharacterProfile, ValidationResult
from ...validation import validate_character_profile
from ..utils import build_i18n, console, load_config

HELP = {
    "images": "Manage image fragments",
    "articles": "Manage article fragments",
    "profiles": "Manage character profile fragments",
}


def _make_app(name: str, collection_cls: Type[ConfigCollection]) -> typer.Typer:
    sub_app = typer.Typer(help=HELP[name])

    @sub_app.command("merge")
    def merge(
        force: bool = typer.Option(False, "--force", "-f", help="Merge even if fragments are unchanged"),
    ) -> None:
        """Merge fragments into the consolidated file."""
        config = load_config()
        try:
            result = collection_cls(config).merge(force=force)
        except GalleryBuildError as exc:
            console.print_error(exc, "Merge failed:")
            raise typer.Exit(code=1) from exc

        if result.skipped:
            console.print(f"[muted]{name}: skipped ({result.reason})[/]")
            return

        console.print_success(
            f"✓ Merged {result.files} files into {result.output.name} ({result.entries} entries)"
        )
        if result.duplicates:
            console.print_warning(f"Dropped {len(result.duplicates)} duplicates: {', '.join(result.duplicates)}")
        if result.invalid:
            console.print_warning(f"Skipped {result.invalid} invalid entries")
        if result.failed_files:
            console.print_warning(f"Unreadable fragments: {', '.join(result.failed_files)}")

    @sub_app.command("split")
    def split() -> None:
        """Split the consolidated file back into fragments."""
        config = load_config()
        try:
            result = collection_cls(config).split()
        except GalleryBuildError as exc:
            console.print_error(exc, "Split failed:")
            raise typer.Exit(code=1) from exc

        console.print_success(f"✓ Split {result.entries} entries into {len(result.created)} files")
        if result.skipped:
            console.print_warning(f"Skipped {result.skipped} entries without id")
        if result.failed:
            console.print_warning(f"Failed to write: {', '.join(result.failed)}")
            raise typer.Exit(code=1)

    @sub_app.command("cleanup")
    def cleanup() -> None:
        """Remove the backup left by the last merge."""
        config = load_config()
        if collection_cls(config).cleanup():
            console.print_success("✓ Removed backup file")
        else:
            console.print("[muted]No backup file to remove[/]")

    return sub_app


images_app = _make_app("images", COLLECTIONS["images"])
articles_app = _make_app("articles", COLLECTIONS["articles"])
profiles_app = _make_app("profiles", COLLECTIONS["profiles"])


@articles_app.command("list")
def list_articles(
    lang: str = typer.Option("en", "--lang", "-l", help="Language used for titles"),
    category: Optional[List[str]] = typer.Option(None, "--category", "-c", help="Filter by category"),
    search: str = typer.Option("", "--search", "-s", help="Search text"),
    sort_by: str = typer.Option("date-desc", "--sort", help=f"Sort order: {', '.join(SORT_ORDERS)}"),
    page: int = typer.Option(1, "--page", help="Page number"),
    page_size: str = typer.Option("20", "--page-size", help="Articles per page or 'all'"),
) -> None:
    """List merged articles."""
    if sort_by not in SORT_ORDERS:
        console.print_error(f"Unknown sort order '{sort_by}'. Valid orders: {', '.join(SORT_ORDERS)}")
        raise typer.Exit(code=1)

    if page_size != "all" and (not page_size.isdigit() or int(page_size) <= 0):
        console.print_error(f"Invalid page size '{page_size}'")
        raise typer.Exit(code=1)
    size = page_size if page_size == "all" else int(page_size)

    config = load_config()
    try:
        articles = COLLECTIONS["articles"](config).load_output()
    except GalleryBuildError as exc:
        console.print_error(exc)
        raise typer.Exit(code=1) from exc

    i18n = build_i18n(config)
    filtered = filter_articles(articles, lang, category or [], search, sort_by, i18n)
    pagination = calculate_pagination(len(filtered), page, size)
    shown = paginate_articles(filtered, pagination.current_page, size)

    table = Table(
        title=f"Articles (page {pagination.current_page}/{max(pagination.total_pages, 1)})",
        box=box.ROUNDED,
        title_style="title",
    )
    table.add_column("ID", style="accent", no_wrap=True)
    table.add_column("Date", style="muted")
    table.add_column("Title", style="value")
    table.add_column("Categories", style="label")
    for article in shown:
        table.add_row(
            str(article.get("id")),
            str(article.get("date", "")),
            i18n.text(article.get("title"), lang),
            ", ".join(article.get("categories") or []),
        )
    console.print(table)
    console.print(f"[muted]{pagination.total_items} matching articles[/]")


@profiles_app.command("validate")
def validate_profiles() -> None:
    """Validate character profile fragments and their info cards."""
    config = load_config()
    collection = COLLECTIONS["profiles"](config)
    manager = CharacterConfigManager(i18n=build_i18n(config))

    failures = 0
    checked = 0
    for fragment in collection.discover_fragments():
        try:
            data = load_json5(fragment.path)
        except GalleryBuildError as exc:
            console.print_error(exc)
            failures += 1
            continue

        for item in data if isinstance(data, list) else [data]:
            checked += 1
            result = validate_character_profile(item)
            if result.valid:
                result.merge(manager.validate_config(CharacterProfile.from_dict(item)))
            failures += _report(fragment.relative_path, item, result)

    if failures:
        console.print_error(f"{failures} of {checked} profiles failed validation")
        raise typer.Exit(code=1)
    console.print_success(f"✓ {checked} profiles valid")


def _report(source: str, item: object, result: ValidationResult) -> int:
    character_id = item.get("id", "unknown") if isinstance(item, dict) else "unknown"
    for warning in result.warnings:
        console.print_warning(f"{source} ({character_id}): {warning}")
    for error in result.errors:
        console.print(f"[danger]{source} ({character_id}):[/] {error}")
    return 0 if result.valid else 1


def register_commands(app: typer.Typer) -> None:
    """Register collection commands with the main CLI app."""
    app.add_typer(images_app, name="images")
    app.add_typer(articles_app, name="articles")
    app.add_typer(profiles_app, name="profiles")
