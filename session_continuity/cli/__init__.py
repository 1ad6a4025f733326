"""CLI package for session-continuity.

Modules:
    app.py      - Main Typer app and commands (session-start, status, outcomes)
    common.py   - Shared helpers (get_console, get_err_console, load_config_safe)

Usage:
    from session_continuity.cli import app, cli_main
"""
from session_continuity.cli.app import app, cli_main

__all__ = ["app", "cli_main"]
