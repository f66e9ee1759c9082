"""
Console output utilities for modcatalog using Rich.

User-facing output for CLI commands goes through this module; diagnostic
output goes through :mod:`modcatalog.utils.logger`.
"""

from __future__ import annotations

import sys
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

from modcatalog.utils.logger import stream_supports_color

MODCATALOG_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
    }
)

# Rich markup color per action or latest-version label
_LABEL_COLORS: Dict[str, str] = {
    "install-stable": "cyan",
    "update-stable": "yellow",
    "install-pre-release": "magenta",
    "update-pre-release": "magenta",
    "uninstall": "red",
    "stable": "green",
    "pre-release": "magenta",
    "installed": "dim",
    "major": "red",
    "minor": "yellow",
    "patch": "green",
    "new": "cyan",
    "downgrade": "red",
    "update": "yellow",
}

_console: Optional[Console] = None
_console_lock = threading.Lock()
_color_override: Optional[bool] = None


def _get_console() -> Console:
    """Return the shared Rich console, creating it on first use."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                if _color_override is None:
                    use_color = stream_supports_color(sys.stdout)
                else:
                    use_color = _color_override
                _console = Console(
                    theme=MODCATALOG_THEME,
                    no_color=not use_color,
                    highlight=use_color,
                )
    return _console


def reconfigure_console(*, color: Optional[bool] = None) -> None:
    """Drop the shared console so the next call rebuilds it.

    Args:
        color: Force colors on or off; ``None`` detects from the terminal.
    """
    global _console, _color_override
    with _console_lock:
        _console = None
        _color_override = color


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _get_console().print(f"{prefix} {message}", style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _get_console().print(f"{prefix} {message}", style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _get_console().print(f"{prefix} {message}", style="warning")


def print_table(
    rows: Sequence[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    caption: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
    row_styler: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None,
) -> None:
    """Render row dictionaries as a Rich table.

    Args:
        rows: Row dictionaries; values are rendered with ``str``.
        headers: Column order. Defaults to the keys of the first row.
        title: Optional table title.
        caption: Optional table caption.
        column_styles: Per-column ``style``/``justify``/``no_wrap`` options.
        row_styler: Callback returning a style for a whole row.
    """
    if not rows:
        return

    columns = headers or list(rows[0].keys())
    styles = column_styles or {}

    table = Table(title=title, caption=caption, header_style="bold")
    for column in columns:
        options = styles.get(column, {})
        table.add_column(
            column,
            style=options.get("style"),
            justify=options.get("justify", "default"),
            no_wrap=options.get("no_wrap", False),
            overflow="fold",
        )

    for row in rows:
        table.add_row(
            *(str(row.get(column, "")) for column in columns),
            style=row_styler(row) if row_styler else None,
        )

    _get_console().print(table)


def colorize_label(label: Optional[str]) -> str:
    """Wrap an action, status or update-type label in Rich markup.

    Example:
        >>> colorize_label("update-stable")
        '[yellow]update-stable[/yellow]'
        >>> colorize_label(None)
        '-'
    """
    if not label:
        return "-"
    color = _LABEL_COLORS.get(label.lower())
    return f"[{color}]{label}[/{color}]" if color else label
