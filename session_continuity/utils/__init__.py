"""Utility modules for session continuity."""

from session_continuity.utils.fs import (
    ArtifactFilter,
    read_text_safe,
    scan_artifacts,
)

__all__ = [
    "ArtifactFilter",
    "read_text_safe",
    "scan_artifacts",
]
