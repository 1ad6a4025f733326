"""Rich console singletons shared by the hook and the CLI."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.text import Text

_console: Optional[Console] = None
_err_console: Optional[Console] = None


def get_console() -> Console:
    """Get or create the stdout console singleton."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_err_console() -> Console:
    """Get or create the stderr console used for advisory notices."""
    global _err_console
    if _err_console is None:
        _err_console = Console(stderr=True)
    return _err_console


def print_notice(message: str, style: str = "") -> None:
    """Print a plain-text notice on stderr. Brackets are not read as markup."""
    get_err_console().print(Text(message, style=style))
