"""Tests for detect_source()."""

import io
from pathlib import Path

import pytest

from taskdown.sources.detect import STDIN_LOCATION, detect_source
from taskdown.sources.markdown import MarkdownNoteSource
from taskdown.sources.text import TextNoteSource


class TestDetectSource:
    def test_markdown_file(self, tmp_path: Path) -> None:
        note = tmp_path / "a.md"
        note.write_text("- [ ] x\n")
        assert isinstance(detect_source(str(note)), MarkdownNoteSource)

    def test_directory(self, tmp_path: Path) -> None:
        assert isinstance(detect_source(str(tmp_path)), MarkdownNoteSource)

    def test_stdin(self) -> None:
        source = detect_source(STDIN_LOCATION, stdin=io.StringIO("- [ ] x\n"))
        assert isinstance(source, TextNoteSource)
        assert len(source.get_tasks()) == 1

    def test_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="No notes found"):
            detect_source(str(tmp_path / "missing.md"))

    def test_unsupported_file_raises(self, tmp_path: Path) -> None:
        other = tmp_path / "a.txt"
        other.write_text("- [ ] x\n")
        with pytest.raises(FileNotFoundError):
            detect_source(str(other))
