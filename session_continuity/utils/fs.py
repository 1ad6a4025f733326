"""
File system utilities for session continuity.

This module provides read-only helpers used by the resolvers:
- Artifact scanning (prefix/suffix filter, newest first by mtime)
- Tolerant text reads that return None instead of raising
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactFilter:
    """
    Filename filter made of (prefix, suffix) pairs.

    A name matches when it starts with the prefix and ends with the suffix
    of at least one pair.
    """

    patterns: tuple[tuple[str, str], ...]

    @classmethod
    def single(cls, prefix: str, suffix: str) -> "ArtifactFilter":
        return cls(patterns=((prefix, suffix),))

    def matches(self, name: str) -> bool:
        return any(
            name.startswith(prefix) and name.endswith(suffix)
            for prefix, suffix in self.patterns
        )


def scan_artifacts(directory: str | Path, artifact_filter: ArtifactFilter) -> list[Path]:
    """
    List files matching a filter, most recently modified first.

    Missing or unreadable directories are a normal state (a fresh project
    has no ledgers yet) and yield an empty list. Entries with equal
    modification times keep their directory listing order.

    Args:
        directory: Directory to scan.
        artifact_filter: Filename filter to apply.

    Returns:
        list[Path]: Matching file paths, newest first.
    """
    directory = Path(directory)

    try:
        names = os.listdir(directory)
    except OSError:
        return []

    stamped: list[tuple[float, Path]] = []
    for name in names:
        if not artifact_filter.matches(name):
            continue
        path = directory / name
        try:
            if not path.is_file():
                continue
            mtime = path.stat().st_mtime
        except OSError:
            # Removed between listing and stat
            logger.debug("Skipping vanished artifact %s", path)
            continue
        stamped.append((mtime, path))

    # sort() is stable, so ties stay in listing order
    stamped.sort(key=lambda item: item[0], reverse=True)
    return [path for _, path in stamped]


def read_text_safe(path: str | Path, encoding: str = "utf-8") -> Optional[str]:
    """
    Read a file's contents, returning None when it cannot be read.

    Args:
        path: Path to the file to read.
        encoding: Character encoding. Defaults to utf-8.

    Returns:
        The file contents, or None if missing, unreadable or undecodable.
    """
    try:
        return Path(path).read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Could not read %s: %s", path, e)
        return None
