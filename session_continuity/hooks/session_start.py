"""SessionStart hook: rebuilds working context from ledgers and handoffs.

The host sends a JSON payload on stdin when a session begins and reads a
JSON envelope from stdout. What goes into the envelope depends on why the
session started:

- startup: a one-line pointer to the latest ledger, nothing more
- resume: a status line naming the ledger, goal and focus
- clear/compact: the status line plus additionalContext holding the full
  ledger, unmarked outcomes, the latest handoff and the handoff catalog

Human-facing notices go to stderr; stdout only ever carries the envelope.
A valid envelope is produced even when every lookup fails.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from session_continuity.config import ContinuityConfig
from session_continuity.continuity.handoff import HandoffKind, HandoffResolver, HandoffSummary
from session_continuity.continuity.ledger import LedgerResolver, LedgerView
from session_continuity.continuity.outcomes import OutcomeReporter, UnmarkedOutcome
from session_continuity.utils.console import print_notice

logger = logging.getLogger(__name__)

HOOK_EVENT_NAME = "SessionStart"
SECTION_BREAK = "\n\n---\n\n"
TRUNCATION_MARKER = "\n\n[... truncated, read full file if needed]"
OUTCOME_ID_CHARS = 8
OUTCOME_PREVIEW_CHARS = 60

MARK_OUTCOME_SNIPPET = (
    "\nTo mark an outcome:\n"
    "```bash\n"
    "uv run python scripts/artifact_mark.py --handoff <ID> "
    "--outcome SUCCEEDED|PARTIAL_PLUS|PARTIAL_MINUS|FAILED\n"
    "```\n"
)


class SessionType(Enum):
    """Why the session started."""

    STARTUP = "startup"
    RESUME = "resume"
    CLEAR = "clear"
    COMPACT = "compact"

    @classmethod
    def parse(cls, value: Any) -> Optional["SessionType"]:
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @property
    def wants_full_context(self) -> bool:
        """Only heavy restarts receive additionalContext."""
        return self in (SessionType.CLEAR, SessionType.COMPACT)


@dataclass
class SessionStartInput:
    """Hook input payload.

    Attributes:
        session_type: Resolved start reason.
        session_id: Host session identifier ("" when absent).
    """

    session_type: SessionType = SessionType.STARTUP
    session_id: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "SessionStartInput":
        """Build from the decoded stdin payload.

        "source" is authoritative; the deprecated "type" is only consulted
        when "source" is missing or not a known value. Anything else is
        treated as a startup.
        """
        if not isinstance(payload, dict):
            return cls()

        session_type = (
            SessionType.parse(payload.get("source"))
            or SessionType.parse(payload.get("type"))
            or SessionType.STARTUP
        )
        session_id = payload.get("session_id")
        return cls(
            session_type=session_type,
            session_id=session_id if isinstance(session_id, str) else "",
        )

    @classmethod
    def from_json(cls, raw: str) -> "SessionStartInput":
        """Parse stdin text; malformed JSON is treated as an empty payload."""
        if not raw or not raw.strip():
            return cls()
        try:
            return cls.from_payload(json.loads(raw))
        except json.JSONDecodeError as e:
            logger.debug("Ignoring malformed hook input: %s", e)
            return cls()


@dataclass
class HookOutput:
    """Output envelope written to stdout.

    The envelope always carries result="continue". message/systemMessage
    and hookSpecificOutput are only emitted when non-empty.
    """

    message: str = ""
    additional_context: str = ""
    result: str = "continue"

    def to_dict(self) -> dict[str, Any]:
        output: dict[str, Any] = {"result": self.result}
        if self.message:
            output["message"] = self.message
            output["systemMessage"] = self.message
        if self.additional_context:
            output["hookSpecificOutput"] = {
                "hookEventName": HOOK_EVENT_NAME,
                "additionalContext": self.additional_context,
            }
        return output

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


def truncate_with_marker(text: str, max_chars: int) -> str:
    """Cut text to max_chars, appending a marker when anything was dropped."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def format_unmarked_outcomes(records: List[UnmarkedOutcome]) -> str:
    """Render the Unmarked Session Outcomes section ("" for no records)."""
    if not records:
        return ""

    lines = [
        "## Unmarked Session Outcomes",
        "",
        "The following handoffs have no outcome marked. "
        "Consider marking them to improve future session recommendations:",
        "",
    ]
    for record in records:
        label = f"task-{record.task_number}" if record.task_number else "handoff"
        if record.summary:
            preview = record.summary[:OUTCOME_PREVIEW_CHARS]
            if len(record.summary) > OUTCOME_PREVIEW_CHARS:
                preview += "..."
        else:
            preview = "(no summary)"
        lines.append(
            f"- **{record.session_name}/{label}** "
            f"(ID: `{record.id[:OUTCOME_ID_CHARS]}`): {preview}"
        )
    return "\n".join(lines) + "\n" + MARK_OUTCOME_SNIPPET


def format_handoff(handoff: HandoffSummary, preview_chars: int) -> str:
    """Render the latest handoff section."""
    if handoff.kind is HandoffKind.AUTO:
        heading = "## Latest auto-handoff"
    else:
        heading = "## Latest task handoff"

    parts = [heading, "", f"**File:** {handoff.filename}"]
    if handoff.kind is HandoffKind.TASK:
        parts.append(f"**Task:** {handoff.task_number} ({handoff.status})")
    parts.append(f"**Summary:** {handoff.summary}")
    parts.append("")
    parts.append(truncate_with_marker(handoff.raw_content, preview_chars))
    return "\n".join(parts)


def format_handoff_catalog(session_name: str, filenames: List[str]) -> str:
    """Render the list of all handoffs for a session, newest first."""
    lines = [f"## All Handoffs in {session_name}", ""]
    for name in filenames:
        tag = " (auto)" if HandoffKind.classify(name) is HandoffKind.AUTO else ""
        lines.append(f"- {name}{tag}")
    return "\n".join(lines)


class ContextAssembler:
    """
    Composes the hook output from the resolved ledger view.

    Attributes:
        config: Continuity configuration (project root, limits).
        outcome_reporter: Source of unmarked outcomes for clear/compact.
        handoff_resolver: Used to list sibling handoffs.
    """

    def __init__(
        self,
        config: ContinuityConfig,
        outcome_reporter: Optional[OutcomeReporter] = None,
        handoff_resolver: Optional[HandoffResolver] = None,
        notify: Optional[Callable[[str, str], None]] = None,
    ):
        self.config = config
        self.outcome_reporter = outcome_reporter or OutcomeReporter(
            index_path=config.index_db_path,
            sqlite_binary=config.sqlite_binary,
            timeout_seconds=config.outcome_timeout_seconds,
            limit=config.outcome_limit,
        )
        self.handoff_resolver = handoff_resolver or HandoffResolver()
        self._notify = notify or print_notice

    def assemble(self, session_type: SessionType, view: Optional[LedgerView]) -> HookOutput:
        """
        Build the output envelope.

        Args:
            session_type: Why the session started.
            view: Latest ledger view, or None when no ledger exists.

        Returns:
            HookOutput for the host.
        """
        if view is None:
            if session_type is SessionType.STARTUP:
                return HookOutput()
            self._notify(
                "No ledger found. Run /continuity_ledger to track session state.",
                "yellow",
            )
            return HookOutput(
                message=(
                    f"[{session_type.value}] No ledger found. "
                    "Consider running /continuity_ledger to track session state."
                )
            )

        ledger = view.ledger

        if session_type is SessionType.STARTUP:
            message = f"Ledger available: {ledger.session_name} -> {ledger.current_focus}"
            if view.handoff is not None:
                message += f" | Last handoff: {view.handoff.status_line()}"
            message += " (run /resume_handoff to continue)"
            return HookOutput(message=message)

        self._notify(f"Ledger loaded: {ledger.session_name} -> {ledger.current_focus}", "green")
        message = (
            f"[{session_type.value}] Loaded: {ledger.filename} | "
            f"Goal: {ledger.goal_summary} | Focus: {ledger.current_focus}"
        )

        if not session_type.wants_full_context:
            return HookOutput(message=message)

        return HookOutput(message=message, additional_context=self.build_additional_context(view))

    def build_additional_context(self, view: LedgerView) -> str:
        """Compose the side-channel payload used for clear/compact."""
        ledger = view.ledger
        context = f"Continuity ledger loaded from {ledger.filename}:\n\n{ledger.raw_content}"

        outcomes = format_unmarked_outcomes(
            self.outcome_reporter.query_records(self.config.project_root)
        )
        if outcomes:
            context += SECTION_BREAK + outcomes

        if view.handoff is not None:
            context += SECTION_BREAK + format_handoff(
                view.handoff, self.config.handoff_preview_chars
            )

            siblings = self.handoff_resolver.list_handoffs(view.handoff_dir)
            if len(siblings) > 1:
                context += SECTION_BREAK + format_handoff_catalog(ledger.session_name, siblings)

        return context


def run_session_start(raw_input: str, config: ContinuityConfig) -> HookOutput:
    """
    Run the SessionStart hook for one invocation.

    Args:
        raw_input: Text received on stdin.
        config: Configuration resolved at the boundary.

    Returns:
        HookOutput. Resolution errors degrade to the "no ledger" branch;
        assembly errors degrade to a bare continue.
    """
    hook_input = SessionStartInput.from_json(raw_input)
    handoff_resolver = HandoffResolver()
    resolver = LedgerResolver(
        handoffs_root=config.handoffs_path,
        session_prefix=config.ledger_prefix,
        handoff_resolver=handoff_resolver,
    )

    try:
        view = resolver.resolve(config.ledgers_path)
    except Exception as e:
        logger.warning("Ledger resolution failed: %s", e, exc_info=True)
        view = None

    assembler = ContextAssembler(config, handoff_resolver=handoff_resolver)
    try:
        return assembler.assemble(hook_input.session_type, view)
    except Exception as e:
        logger.warning("Context assembly failed: %s", e, exc_info=True)
        return HookOutput()
