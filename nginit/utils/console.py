"""
Console output utilities for ng-init using Rich.

This module provides user-facing output and prompt helpers for CLI
commands and the interactive wizard. For diagnostic or debug output, use
:mod:`nginit.utils.logger`.

Guidelines:
- print_* functions: user-facing status messages
- print_table / print_rule: structured output
- confirm / ask / select: interactive input
- Logging should never go through this module
"""

from __future__ import annotations

import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
    Sequence,
    Union,
)

from rich.table import Table
from rich.theme import Theme
from rich.prompt import Prompt
from rich.console import Console

# ---------------------------------------------------------------------------
# Theme configuration
# ---------------------------------------------------------------------------

NGINIT_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
    }
)

# ---------------------------------------------------------------------------
# Console lifecycle management
# ---------------------------------------------------------------------------

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return a singleton Rich Console instance."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=NGINIT_THEME,
                    no_color=not use_color,
                    highlight=use_color,
                )
    return _console


def reconfigure_console() -> None:
    """Reset the global console instance.

    Useful if environment variables (e.g. NO_COLOR) change at runtime.
    """
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()


# ---------------------------------------------------------------------------
# Status message helpers
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    """Print a success message."""
    _get_console().print(f"{prefix} {message}", style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error message."""
    _get_console().print(f"{prefix} {message}", style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning message."""
    _get_console().print(f"{prefix} {message}", style="warning")


def print_info(message: str, *, style: str = "info") -> None:
    """Print an informational message."""
    _get_console().print(message, style=style)


def print_rule(title: str = "") -> None:
    """Print a horizontal rule, optionally titled."""
    _get_console().rule(title, style="dim")


@contextmanager
def status(message: str) -> Iterator[None]:
    """Show a spinner while a long-running step executes."""
    with _get_console().status(message, spinner="dots"):
        yield


# ---------------------------------------------------------------------------
# Structured output
# ---------------------------------------------------------------------------


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    caption: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
    row_styler: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None,
    show_row_lines: bool = False,
) -> None:
    """Render structured data as a Rich table.

    Args:
        data: List of row dictionaries.
        headers: Column order. Defaults to keys of the first row.
        title: Optional table title.
        caption: Optional table caption.
        column_styles: Per-column style configuration.
        row_styler: Optional callback returning a row style.
        show_row_lines: Whether to draw horizontal lines between rows.
    """
    if not data:
        return

    if headers is None:
        headers = list(data[0].keys())

    table = Table(
        title=title,
        caption=caption,
        show_header=True,
        header_style="bold",
        show_lines=show_row_lines,
    )

    column_styles = column_styles or {}
    for header in headers:
        config = column_styles.get(header, {})
        table.add_column(
            header,
            style=config.get("style"),
            justify=config.get("justify", "default"),
            no_wrap=config.get("no_wrap", False),
            width=config.get("width"),
            overflow=config.get("overflow", "fold"),
        )

    for row in data:
        values = [str(row.get(h, "")) for h in headers]
        style = row_styler(row) if row_styler else None
        table.add_row(*values, style=style)

    _get_console().print(table)


# ---------------------------------------------------------------------------
# User interaction
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Choice:
    """One entry of a :func:`select` prompt."""

    label: str
    value: Any
    description: Optional[str] = None


ChoiceLike = Union[Choice, str]


def _as_choice(item: ChoiceLike) -> Choice:
    return item if isinstance(item, Choice) else Choice(label=item, value=item)


def confirm(message: str, *, default: bool = False) -> bool:
    """Prompt the user for a yes/no confirmation.

    - "y", "yes"   → return True
    - "n", "no"    → return False
    - empty or unrecognized input → return ``default``
    - Ctrl+C / EOF → return False

    Args:
        message: Prompt message shown to the user.
        default: Choice used when the user presses Enter.

    Returns:
        True if confirmed, False otherwise.
    """
    console = _get_console()
    suffix = " [Y/n]: " if default else " [y/N]: "
    console.print(f"{message}{suffix}", end="", style="info")

    try:
        response = input().strip().lower()
    except (KeyboardInterrupt, EOFError):
        console.print()
        return False

    if not response:
        return default

    if response in ("y", "yes"):
        return True
    if response in ("n", "no"):
        return False

    return default


def ask(
    message: str,
    *,
    default: Optional[str] = None,
    validate: Optional[Callable[[str], Union[bool, str]]] = None,
) -> str:
    """Prompt for free text, re-asking until ``validate`` accepts it.

    ``validate`` returns ``True`` to accept, or an error message string.
    """
    console = _get_console()
    while True:
        if default is None:
            answer = Prompt.ask(f"[info]{message}[/info]", console=console)
        else:
            answer = Prompt.ask(
                f"[info]{message}[/info]", console=console, default=default
            )
        answer = (answer or "").strip()

        if validate is None:
            return answer

        verdict = validate(answer)
        if verdict is True:
            return answer
        print_error(str(verdict) if verdict else "Invalid value")


def select(
    message: str,
    choices: Sequence[ChoiceLike],
    *,
    default: Any = None,
) -> Any:
    """Present a numbered menu and return the value of the chosen entry.

    Raises:
        ValueError: ``choices`` is empty.
    """
    items = [_as_choice(c) for c in choices]
    if not items:
        raise ValueError("select() requires at least one choice")

    console = _get_console()
    console.print(f"{message}", style="info")

    default_index = 1
    for index, item in enumerate(items, start=1):
        if default is not None and item.value == default:
            default_index = index
        line = f"  {index:>2}. {item.label}"
        if item.description:
            line += f" [dim]- {item.description}[/dim]"
        console.print(line)

    valid = [str(i) for i in range(1, len(items) + 1)]
    answer = Prompt.ask(
        "Choose",
        console=console,
        choices=valid,
        default=str(default_index),
        show_choices=False,
    )
    return items[int(answer) - 1].value


class Prompter:
    """Thin object wrapper over the prompt functions.

    The wizard talks to a ``Prompter`` instead of the module functions so
    that tests can substitute a scripted implementation.
    """

    def confirm(self, message: str, *, default: bool = False) -> bool:
        return confirm(message, default=default)

    def ask(
        self,
        message: str,
        *,
        default: Optional[str] = None,
        validate: Optional[Callable[[str], Union[bool, str]]] = None,
    ) -> str:
        return ask(message, default=default, validate=validate)

    def select(
        self,
        message: str,
        choices: Sequence[ChoiceLike],
        *,
        default: Any = None,
    ) -> Any:
        return select(message, choices, default=default)


# ---------------------------------------------------------------------------
# Domain-specific formatting
# ---------------------------------------------------------------------------


def colorize_source(source: str, *, warning: bool = False) -> str:
    """Return a Rich-markup label for a resolution source.

    Args:
        source: ``"dynamic"`` or ``"fallback"``.
        warning: Whether the result carries a compatibility warning.

    Returns:
        Rich markup string.
    """
    if warning:
        return f"[red]{source}[/red]"

    color_map = {
        "dynamic": "green",
        "fallback": "yellow",
    }
    color = color_map.get(source.lower())
    return f"[{color}]{source}[/{color}]" if color else source
