"""Tests for artifact scanning and tolerant reads."""

import os
from pathlib import Path

import pytest

from session_continuity.utils.fs import (
    ArtifactFilter,
    read_text_safe,
    scan_artifacts,
)


def _touch(path: Path, mtime: float) -> None:
    path.write_text("x")
    os.utime(path, (mtime, mtime))


class TestArtifactFilter:
    """Tests for prefix/suffix matching."""

    def test_single_pair(self):
        f = ArtifactFilter.single("CONTINUITY_CLAUDE-", ".md")
        assert f.matches("CONTINUITY_CLAUDE-foo.md")
        assert not f.matches("CONTINUITY_CLAUDE-foo.txt")
        assert not f.matches("OTHER-foo.md")

    def test_any_pair_matches(self):
        f = ArtifactFilter(patterns=(("task-", ".md"), ("auto-handoff-", ".md")))
        assert f.matches("task-1.md")
        assert f.matches("auto-handoff-x.md")
        assert not f.matches("handoff.md")


class TestScanArtifacts:
    """Tests for scan_artifacts."""

    def test_missing_directory_returns_empty(self, tmp_path):
        assert scan_artifacts(tmp_path / "nope", ArtifactFilter.single("", ".md")) == []

    def test_file_instead_of_directory_returns_empty(self, tmp_path):
        path = tmp_path / "file.md"
        path.write_text("x")
        assert scan_artifacts(path, ArtifactFilter.single("", ".md")) == []

    def test_orders_newest_first_regardless_of_name(self, tmp_path):
        _touch(tmp_path / "a.md", 100)
        _touch(tmp_path / "b.md", 300)
        _touch(tmp_path / "c.md", 200)

        result = scan_artifacts(tmp_path, ArtifactFilter.single("", ".md"))

        assert [p.name for p in result] == ["b.md", "c.md", "a.md"]

    def test_skips_non_matching_and_directories(self, tmp_path):
        _touch(tmp_path / "keep.md", 100)
        _touch(tmp_path / "skip.txt", 200)
        (tmp_path / "dir.md").mkdir()

        result = scan_artifacts(tmp_path, ArtifactFilter.single("", ".md"))

        assert [p.name for p in result] == ["keep.md"]

    def test_ties_follow_listing_order(self, tmp_path):
        for name in ("x.md", "y.md", "z.md"):
            _touch(tmp_path / name, 500)

        result = scan_artifacts(tmp_path, ArtifactFilter.single("", ".md"))

        listing = [n for n in os.listdir(tmp_path) if n.endswith(".md")]
        assert [p.name for p in result] == listing


class TestReadTextSafe:
    """Tests for read_text_safe."""

    def test_reads_text(self, tmp_path):
        path = tmp_path / "a.md"
        path.write_text("hello", encoding="utf-8")
        assert read_text_safe(path) == "hello"

    def test_missing_file_returns_none(self, tmp_path):
        assert read_text_safe(tmp_path / "missing.md") is None

    def test_undecodable_returns_none(self, tmp_path):
        path = tmp_path / "bin.md"
        path.write_bytes(b"\xff\xfe\xfa")
        assert read_text_safe(path) is None
