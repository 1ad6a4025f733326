"""
Configuration loading and validation for session continuity.

This module handles:
- Resolving the project root (explicit value, CLAUDE_PROJECT_DIR, or cwd)
- Loading optional overrides from .claude/continuity.yaml
- Environment variable resolution (${VAR} syntax)
- Default values for every field

Configuration is resolved once at the boundary and passed explicitly into
the resolvers and the assembler. Nothing is cached between invocations.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

PROJECT_DIR_ENV_VAR = "CLAUDE_PROJECT_DIR"
DEFAULT_CONFIG_FILE = Path(".claude") / "continuity.yaml"


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


@dataclass
class ContinuityConfig:
    """
    Main configuration for session continuity.

    Directory fields are relative to project_root unless absolute.
    """
    project_root: str = "."
    ledgers_dir: str = "thoughts/ledgers"                 # CONTINUITY_<prefix>-*.md
    handoffs_dir: str = "thoughts/shared/handoffs"        # <session>/task-*.md, auto-handoff-*.md
    ledger_prefix: str = "CLAUDE"                         # Session prefix in ledger filenames
    index_path: str = ".claude/cache/artifact-index/context.db"
    sqlite_binary: str = "sqlite3"                        # CLI used to query the index
    outcome_timeout_seconds: float = 3.0                  # Bound on the index query
    outcome_limit: int = 5                                # Max unmarked outcomes reported
    handoff_preview_chars: int = 2000                     # Handoff text surfaced on clear/compact

    def __post_init__(self) -> None:
        """Convert project_root to an absolute path."""
        self.project_root = str(Path(self.project_root).absolute())

    def _under_root(self, value: str) -> Path:
        path = Path(value)
        if path.is_absolute():
            return path
        return Path(self.project_root) / path

    @property
    def ledgers_path(self) -> Path:
        """Absolute path to the ledgers directory."""
        return self._under_root(self.ledgers_dir)

    @property
    def handoffs_path(self) -> Path:
        """Absolute path to the per-session handoffs root."""
        return self._under_root(self.handoffs_dir)

    @property
    def index_db_path(self) -> Path:
        """Absolute path to the artifact index database."""
        return self._under_root(self.index_path)


def _resolve_env_vars(value: Any) -> Any:
    """
    Resolve environment variables in a value.

    Supports ${VAR} syntax for environment variable substitution.
    Returns the original value if it's not a string.
    """
    if isinstance(value, str):
        pattern = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

        def replace(match: re.Match) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ConfigError(f"Environment variable ${{{var_name}}} is not set")
            return env_value

        return pattern.sub(replace, value)

    if isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}

    if isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]

    return value


def resolve_project_root(project_root: Optional[str] = None) -> str:
    """
    Resolve the project root directory.

    Precedence: explicit argument, then $CLAUDE_PROJECT_DIR, then cwd.
    """
    if project_root:
        return project_root
    env_root = os.environ.get(PROJECT_DIR_ENV_VAR)
    if env_root:
        return env_root
    return str(Path.cwd())


def _typed(data: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    """Read a key from the config dict, checking its type."""
    if key not in data or data[key] is None:
        return default
    value = data[key]
    if kind is float and isinstance(value, int) and not isinstance(value, bool):
        value = float(value)
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise ConfigError(f"{key} must be of type {kind.__name__}, got {type(value).__name__}")
    return value


def _parse_config(root: str, data: dict[str, Any]) -> ContinuityConfig:
    """Parse configuration from a dict of overrides."""
    defaults = ContinuityConfig(project_root=root)
    config = ContinuityConfig(
        project_root=root,
        ledgers_dir=_typed(data, "ledgers_dir", str, defaults.ledgers_dir),
        handoffs_dir=_typed(data, "handoffs_dir", str, defaults.handoffs_dir),
        ledger_prefix=_typed(data, "ledger_prefix", str, defaults.ledger_prefix),
        index_path=_typed(data, "index_path", str, defaults.index_path),
        sqlite_binary=_typed(data, "sqlite_binary", str, defaults.sqlite_binary),
        outcome_timeout_seconds=_typed(
            data, "outcome_timeout_seconds", float, defaults.outcome_timeout_seconds
        ),
        outcome_limit=_typed(data, "outcome_limit", int, defaults.outcome_limit),
        handoff_preview_chars=_typed(
            data, "handoff_preview_chars", int, defaults.handoff_preview_chars
        ),
    )

    if config.outcome_timeout_seconds <= 0:
        raise ConfigError("outcome_timeout_seconds must be positive")
    if config.outcome_limit < 0:
        raise ConfigError("outcome_limit must not be negative")
    if config.handoff_preview_chars <= 0:
        raise ConfigError("handoff_preview_chars must be positive")

    return config


def load_config(
    project_root: Optional[str] = None,
    config_path: Optional[str] = None,
) -> ContinuityConfig:
    """
    Load configuration for a project.

    Args:
        project_root: Optional project root. Falls back to $CLAUDE_PROJECT_DIR
                      and then the current directory.
        config_path: Optional path to a YAML file. If not provided, looks for
                     .claude/continuity.yaml under the project root.

    Returns:
        ContinuityConfig: Loaded configuration. Defaults when no file exists.

    Raises:
        ConfigError: If the config file is invalid.
    """
    root = resolve_project_root(project_root)

    if config_path is None:
        path = Path(root) / DEFAULT_CONFIG_FILE
        if not path.exists():
            return ContinuityConfig(project_root=root)
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e}")

    if not raw_data:
        return ContinuityConfig(project_root=root)

    if not isinstance(raw_data, dict):
        raise ConfigError("Configuration file must contain a mapping")

    data = _resolve_env_vars(raw_data)
    return _parse_config(root, data)
