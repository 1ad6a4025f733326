# tests/conftest.py

import os
from pathlib import Path

import pytest

from session_continuity.config import ContinuityConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "continuity"


@pytest.fixture
def write_artifact():
    """Write a file, optionally pinning its modification time."""

    def _write(path: Path, content: str, mtime: float | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write


@pytest.fixture
def ledger_text():
    """Ledger with a Goal section and a '- Now:' focus line."""
    return (FIXTURES_DIR / "ledger.md").read_text(encoding="utf-8")


@pytest.fixture
def task_handoff_text():
    """Task handoff with status: partial and a What Was Done section."""
    return (FIXTURES_DIR / "task_handoff.md").read_text(encoding="utf-8")


@pytest.fixture
def auto_handoff_text():
    """Auto handoff with a type marker and an In Progress section."""
    return (FIXTURES_DIR / "auto_handoff.md").read_text(encoding="utf-8")


@pytest.fixture
def project(tmp_path):
    """Empty project root with a config pointing at it."""
    root = tmp_path / "project"
    root.mkdir()
    config = ContinuityConfig(project_root=str(root))
    yield config, root


@pytest.fixture
def project_with_ledger(project, write_artifact, ledger_text, task_handoff_text, auto_handoff_text):
    """Project with one ledger and two handoffs for session 'exporter'."""
    config, root = project
    write_artifact(
        config.ledgers_path / "CONTINUITY_CLAUDE-exporter.md", ledger_text, mtime=1_700_000_000
    )
    handoff_dir = config.handoffs_path / "exporter"
    write_artifact(handoff_dir / "task-3-streaming.md", task_handoff_text, mtime=1_700_000_100)
    write_artifact(
        handoff_dir / "auto-handoff-2024-01-02T03-04-05-exporter.md",
        auto_handoff_text,
        mtime=1_700_000_050,
    )
    yield config, root
