"""
Unit tests for LedgerResolver.

The resolver picks the newest CONTINUITY_<PREFIX>-*.md ledger, extracts its
goal and current focus, and resolves the latest handoff of the same session.
"""

import pytest

from session_continuity.continuity.handoff import HandoffKind
from session_continuity.continuity.ledger import LedgerResolver, ledger_file_prefix


class TestLedgerSelection:
    """Tests for finding the latest ledger."""

    def test_missing_directory_returns_none(self, tmp_path):
        resolver = LedgerResolver(handoffs_root=tmp_path / "handoffs")
        assert resolver.resolve(tmp_path / "ledgers") is None

    def test_no_matching_files_returns_none(self, tmp_path, write_artifact, ledger_text):
        write_artifact(tmp_path / "ledgers" / "notes.md", ledger_text)
        write_artifact(tmp_path / "ledgers" / "CONTINUITY_OTHER-x.md", ledger_text)
        resolver = LedgerResolver(handoffs_root=tmp_path / "handoffs")
        assert resolver.resolve(tmp_path / "ledgers") is None

    def test_newest_ledger_wins(self, tmp_path, write_artifact):
        ledgers = tmp_path / "ledgers"
        write_artifact(ledgers / "CONTINUITY_CLAUDE-zeta.md", "- Now: old", mtime=1000)
        write_artifact(ledgers / "CONTINUITY_CLAUDE-alpha.md", "- Now: new", mtime=2000)

        view = LedgerResolver(handoffs_root=tmp_path / "handoffs").resolve(ledgers)

        assert view.ledger.session_name == "alpha"
        assert view.ledger.current_focus == "new"

    def test_custom_session_prefix(self, tmp_path, write_artifact, ledger_text):
        ledgers = tmp_path / "ledgers"
        write_artifact(ledgers / "CONTINUITY_CODEX-beta.md", ledger_text)

        view = LedgerResolver(handoffs_root=tmp_path, session_prefix="CODEX").resolve(ledgers)

        assert view.ledger.session_name == "beta"

    def test_file_prefix(self):
        assert ledger_file_prefix("CLAUDE") == "CONTINUITY_CLAUDE-"


class TestLedgerFields:
    """Tests for extracted ledger fields."""

    def test_extracts_goal_and_focus(self, tmp_path, write_artifact, ledger_text):
        ledgers = tmp_path / "ledgers"
        write_artifact(ledgers / "CONTINUITY_CLAUDE-exporter.md", ledger_text)

        view = LedgerResolver(handoffs_root=tmp_path / "handoffs").resolve(ledgers)

        assert view.ledger.filename == "CONTINUITY_CLAUDE-exporter.md"
        assert view.ledger.session_name == "exporter"
        assert view.ledger.goal_summary == "Ship the exporter rewrite with streaming output"
        assert view.ledger.current_focus == "wiring the CLI"
        assert view.ledger.raw_content == ledger_text

    def test_defaults_when_fields_missing(self, tmp_path, write_artifact):
        ledgers = tmp_path / "ledgers"
        write_artifact(ledgers / "CONTINUITY_CLAUDE-bare.md", "just some notes\n")

        view = LedgerResolver(handoffs_root=tmp_path / "handoffs").resolve(ledgers)

        assert view.ledger.goal_summary == "No goal found"
        assert view.ledger.current_focus == "Unknown"

    def test_goal_bounded_to_100_chars(self, tmp_path, write_artifact):
        ledgers = tmp_path / "ledgers"
        write_artifact(ledgers / "CONTINUITY_CLAUDE-long.md", "## Goal\n" + "g" * 1000 + "\n")

        view = LedgerResolver(handoffs_root=tmp_path / "handoffs").resolve(ledgers)

        assert view.ledger.goal_summary == "g" * 100

    def test_session_name_keeps_inner_dashes(self):
        resolver = LedgerResolver(handoffs_root="unused")
        assert resolver.session_name_for("CONTINUITY_CLAUDE-my-long-session.md") == "my-long-session"


class TestLedgerHandoff:
    """Tests for the combined ledger + handoff view."""

    def test_resolves_session_handoff(self, project_with_ledger):
        config, _ = project_with_ledger

        view = LedgerResolver(handoffs_root=config.handoffs_path).resolve(config.ledgers_path)

        assert view.handoff_dir == config.handoffs_path / "exporter"
        assert view.handoff is not None
        assert view.handoff.kind is HandoffKind.TASK
        assert view.handoff.filename == "task-3-streaming.md"

    def test_handoff_missing_is_none(self, tmp_path, write_artifact, ledger_text):
        ledgers = tmp_path / "ledgers"
        write_artifact(ledgers / "CONTINUITY_CLAUDE-solo.md", ledger_text)

        view = LedgerResolver(handoffs_root=tmp_path / "handoffs").resolve(ledgers)

        assert view.handoff is None

    def test_other_sessions_handoffs_ignored(
        self, tmp_path, write_artifact, ledger_text, task_handoff_text
    ):
        ledgers = tmp_path / "ledgers"
        write_artifact(ledgers / "CONTINUITY_CLAUDE-solo.md", ledger_text)
        write_artifact(tmp_path / "handoffs" / "other" / "task-1.md", task_handoff_text)

        view = LedgerResolver(handoffs_root=tmp_path / "handoffs").resolve(ledgers)

        assert view.handoff is None
