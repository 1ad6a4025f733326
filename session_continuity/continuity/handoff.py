"""
HandoffResolver - latest handoff lookup for session continuity.

A session's handoff directory holds two incompatible kinds of markdown
handoffs, told apart by filename prefix:

- task-<digits>-*.md: written at the end of a task, carries a
  "status: success|partial|blocked" marker and a "What Was Done" section
- auto-handoff-<timestamp>-*.md: written automatically before context
  compaction, carries a "type: auto-handoff" frontmatter marker and an
  "In Progress" section

The variant is decided once from the filename and carried on the result as
HandoffKind, so formatting code never re-inspects the filename.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from session_continuity.continuity.extract import FieldRule, extract_field, search_pattern
from session_continuity.utils.fs import ArtifactFilter, read_text_safe, scan_artifacts

TASK_PREFIX = "task-"
AUTO_PREFIX = "auto-handoff-"
HANDOFF_SUFFIX = ".md"

HANDOFF_FILTER = ArtifactFilter(
    patterns=((TASK_PREFIX, HANDOFF_SUFFIX), (AUTO_PREFIX, HANDOFF_SUFFIX))
)

SUMMARY_MAX_CHARS = 150

TASK_NUMBER_RE = re.compile(r"task-(\d+)")
TASK_STATUS_RE = re.compile(r"status:\s*(success|partial|blocked)", re.IGNORECASE)
AUTO_TIMESTAMP_RE = re.compile(r"auto-handoff-(\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2})")
AUTO_TYPE_RE = re.compile(r"type:\s*auto-handoff", re.IGNORECASE)

TASK_SUMMARY_RULE = FieldRule(
    name="summary",
    heading="What Was Done",
    max_lines=2,
    max_chars=SUMMARY_MAX_CHARS,
    default="No summary available",
)
AUTO_SUMMARY_RULE = FieldRule(
    name="summary",
    heading="In Progress",
    max_lines=3,
    max_chars=SUMMARY_MAX_CHARS,
    default="Auto-handoff from pre-compact",
)


class HandoffKind(Enum):
    """Handoff variant, decided by filename prefix."""

    TASK = "task"
    AUTO = "auto"

    @classmethod
    def classify(cls, filename: str) -> "HandoffKind":
        if filename.startswith(AUTO_PREFIX):
            return cls.AUTO
        return cls.TASK


@dataclass
class HandoffSummary:
    """Normalized view of the latest handoff in a directory.

    Attributes:
        filename: Handoff filename.
        path: Absolute path to the handoff file.
        kind: TASK or AUTO.
        task_number: Digits for task handoffs, timestamp token (or "auto")
            for auto handoffs, "??" when a task filename carries no number.
        status: success/partial/blocked/unknown, or auto-handoff/unknown.
        summary: One-line summary, at most 150 characters.
        raw_content: Full handoff text ("" when unreadable).
    """

    filename: str
    path: Path
    kind: HandoffKind
    task_number: str
    status: str
    summary: str
    raw_content: str = ""

    @property
    def is_auto_handoff(self) -> bool:
        return self.kind is HandoffKind.AUTO

    def status_line(self) -> str:
        """One-line status, e.g. "task-12 (partial)" or "auto (auto-handoff)"."""
        if self.is_auto_handoff:
            return f"auto ({self.status})"
        return f"task-{self.task_number} ({self.status})"


class HandoffResolver:
    """
    Resolves the most recent handoff in a session's handoff directory.

    Stateless: every call re-reads the directory.
    """

    def list_handoffs(self, handoff_dir: str | Path) -> list[str]:
        """All handoff filenames in the directory, most recent first."""
        return [path.name for path in scan_artifacts(handoff_dir, HANDOFF_FILTER)]

    def resolve(self, handoff_dir: str | Path) -> Optional[HandoffSummary]:
        """
        Summarize the most recently modified handoff.

        Args:
            handoff_dir: Directory holding task-*.md / auto-handoff-*.md files.

        Returns:
            HandoffSummary for the newest handoff, or None when the directory
            is missing or holds no handoffs.
        """
        candidates = scan_artifacts(handoff_dir, HANDOFF_FILTER)
        if not candidates:
            return None

        latest = candidates[0]
        content = read_text_safe(latest) or ""
        kind = HandoffKind.classify(latest.name)

        if kind is HandoffKind.AUTO:
            return self._resolve_auto(latest, content)
        return self._resolve_task(latest, content)

    def _resolve_auto(self, path: Path, content: str) -> HandoffSummary:
        status = "auto-handoff" if AUTO_TYPE_RE.search(content) else "unknown"
        return HandoffSummary(
            filename=path.name,
            path=path,
            kind=HandoffKind.AUTO,
            task_number=search_pattern(path.name, AUTO_TIMESTAMP_RE, default="auto"),
            status=status,
            summary=extract_field(content, AUTO_SUMMARY_RULE),
            raw_content=content,
        )

    def _resolve_task(self, path: Path, content: str) -> HandoffSummary:
        status = search_pattern(content, TASK_STATUS_RE, default="unknown")
        return HandoffSummary(
            filename=path.name,
            path=path,
            kind=HandoffKind.TASK,
            task_number=search_pattern(path.name, TASK_NUMBER_RE, default="??"),
            status=status.lower(),
            summary=extract_field(content, TASK_SUMMARY_RULE),
            raw_content=content,
        )
