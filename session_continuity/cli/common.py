"""Common utilities and global state for the CLI.

Contains project directory management and config loading. Console singletons
live in utils.console so the hook layer can share them.
This module should NOT import from app.py to avoid circular imports.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from session_continuity.utils.console import get_console, get_err_console, print_notice

if TYPE_CHECKING:
    from session_continuity.config import ContinuityConfig

# ============================================================================
# Global State
# ============================================================================

# Global project directory override (set via --project flag)
_project_dir: Optional[str] = None


def get_project_dir() -> Optional[str]:
    """Get the project directory override if set."""
    return _project_dir


def set_project_dir(path: Optional[str]) -> None:
    """Set the project directory override."""
    global _project_dir
    _project_dir = path


# ============================================================================
# Config Helpers
# ============================================================================


def load_config_safe() -> "ContinuityConfig":
    """
    Load config for the selected project, falling back to defaults.

    A broken config file must not stop the hook, so ConfigError is reported
    on stderr and the defaults are used instead.
    """
    from session_continuity.config import ConfigError, ContinuityConfig, load_config, resolve_project_root

    project_dir = get_project_dir()
    try:
        return load_config(project_root=project_dir)
    except ConfigError as e:
        print_notice(f"Ignoring invalid continuity config: {e}", "yellow")
        return ContinuityConfig(project_root=resolve_project_root(project_dir))


__all__ = [
    "get_console",
    "get_err_console",
    "get_project_dir",
    "load_config_safe",
    "set_project_dir",
]
