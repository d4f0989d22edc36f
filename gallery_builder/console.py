"""Rich console used by the command line interface."""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.theme import Theme

_default_theme = Theme(
    {
        "accent": "bold rgb(255,149,0)",
        "muted": "dim",
        "title": "bold rgb(120,200,255)",
        "path": "italic rgb(191,160,255)",
        "label": "bold rgb(160,160,160)",
        "value": "rgb(240,240,240)",
        "info": "rgb(120,200,255)",
        "success": "bold rgb(104,255,203)",
        "warning": "bold rgb(255,213,128)",
        "danger": "bold rgb(255,128,128)",
        "divider": "rgb(85,85,85)",
    }
)


class Console(RichConsole):
    """Rich console pre-configured with a custom theme."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:  # noqa: D401 - mirror rich API
        disable_theme = os.getenv("GALLERY_NO_THEME", "").lower() in ("1", "true", "yes")
        theme = kwargs.pop("theme", None)
        if theme is None and not disable_theme:
            theme = _default_theme
        if theme is None:
            theme = Theme({name: "" for name in _default_theme.styles})
        super().__init__(*args, theme=theme, **kwargs)
        self._quiet = False

    def set_quiet(self, quiet: bool) -> None:
        """Enable or disable quiet mode."""
        self._quiet = quiet

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print with respect to quiet mode."""
        if not self._quiet:
            super().print(*args, **kwargs)

    def print_error(self, error: Exception | str, context: str = "") -> None:
        """Print error message with consistent formatting.

        Errors are shown even in quiet mode.

        Args:
            error: Exception instance or error message string
            context: Optional context prefix (e.g., "Merge failed:")
        """
        if context:
            super().print(f"[danger]{context}[/] {escape(str(error))}")
        else:
            super().print(f"[danger]Error:[/] {escape(str(error))}")

    def print_success(self, message: str) -> None:
        self.print(f"[success]{message}[/]")

    def print_warning(self, message: str) -> None:
        self.print(f"[warning]{message}[/]")


__all__ = ["Console"]
