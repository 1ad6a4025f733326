"""Hooks module for session_continuity.

This module provides the host-facing SessionStart hook.
"""

from session_continuity.hooks.session_start import (
    ContextAssembler,
    HookOutput,
    SessionStartInput,
    SessionType,
    run_session_start,
)

__all__ = [
    "ContextAssembler",
    "HookOutput",
    "SessionStartInput",
    "SessionType",
    "run_session_start",
]
