"""
LedgerResolver - latest continuity ledger lookup.

A continuity ledger is a markdown file named CONTINUITY_<PREFIX>-<session>.md
recording what a work session is trying to achieve:

    ## Goal
    Ship the exporter rewrite

    ## State
    - Done: parser
    - Now: wiring the CLI

The newest ledger wins. Its session name locates the session's handoff
directory, whose latest handoff is resolved alongside it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from session_continuity.continuity.extract import FieldRule, extract_fields
from session_continuity.continuity.handoff import HandoffResolver, HandoffSummary
from session_continuity.utils.fs import ArtifactFilter, read_text_safe, scan_artifacts

LEDGER_SUFFIX = ".md"
GOAL_MAX_CHARS = 100

LEDGER_RULES = (
    FieldRule(
        name="goal",
        heading="Goal",
        max_lines=1,
        max_chars=GOAL_MAX_CHARS,
        default="No goal found",
    ),
    FieldRule(name="focus", marker="- Now: ", default="Unknown"),
)


def ledger_file_prefix(session_prefix: str) -> str:
    """Filename prefix for ledgers, e.g. "CONTINUITY_CLAUDE-"."""
    return f"CONTINUITY_{session_prefix}-"


@dataclass
class LedgerSummary:
    """Fields extracted from the latest ledger.

    Attributes:
        filename: Ledger filename.
        path: Absolute path to the ledger.
        session_name: Filename minus the CONTINUITY_<PREFIX>- prefix and .md.
        goal_summary: First line of the Goal section, at most 100 characters.
        current_focus: Text following the "- Now: " marker.
        raw_content: Full ledger text.
    """

    filename: str
    path: Path
    session_name: str
    goal_summary: str
    current_focus: str
    raw_content: str = ""


@dataclass
class LedgerView:
    """Latest ledger plus the latest handoff of the same session."""

    ledger: LedgerSummary
    handoff_dir: Path
    handoff: Optional[HandoffSummary] = None


class LedgerResolver:
    """
    Resolves the latest ledger and its session's latest handoff.

    Attributes:
        handoffs_root: Directory containing one handoff directory per session.
        session_prefix: Session prefix used in ledger filenames.
    """

    def __init__(
        self,
        handoffs_root: str | Path,
        session_prefix: str = "CLAUDE",
        handoff_resolver: Optional[HandoffResolver] = None,
    ):
        self.handoffs_root = Path(handoffs_root)
        self.session_prefix = session_prefix
        self.handoff_resolver = handoff_resolver or HandoffResolver()

    @property
    def file_prefix(self) -> str:
        return ledger_file_prefix(self.session_prefix)

    def session_name_for(self, filename: str) -> str:
        """Strip the fixed prefix and suffix from a ledger filename."""
        name = filename
        if name.startswith(self.file_prefix):
            name = name[len(self.file_prefix):]
        if name.endswith(LEDGER_SUFFIX):
            name = name[: -len(LEDGER_SUFFIX)]
        return name

    def resolve(self, ledger_dir: str | Path) -> Optional[LedgerView]:
        """
        Find the newest ledger and summarize it.

        Args:
            ledger_dir: Directory holding CONTINUITY_<PREFIX>-*.md files.

        Returns:
            LedgerView, or None when no ledger exists.
        """
        ledgers = scan_artifacts(
            ledger_dir, ArtifactFilter.single(self.file_prefix, LEDGER_SUFFIX)
        )
        if not ledgers:
            return None

        latest = ledgers[0]
        content = read_text_safe(latest) or ""
        fields = extract_fields(content, LEDGER_RULES)
        session_name = self.session_name_for(latest.name)

        summary = LedgerSummary(
            filename=latest.name,
            path=latest,
            session_name=session_name,
            goal_summary=fields["goal"],
            current_focus=fields["focus"],
            raw_content=content,
        )

        handoff_dir = self.handoffs_root / session_name
        return LedgerView(
            ledger=summary,
            handoff_dir=handoff_dir,
            handoff=self.handoff_resolver.resolve(handoff_dir),
        )
