"""MarkdownNoteSource — checklist lines from a markdown file or directory."""

import hashlib
import logging
from datetime import UTC, datetime
from pathlib import Path

from taskdown.tasks.codec import is_task_line
from taskdown.tasks.models import LineRecord

from .protocol import NoteSource

logger = logging.getLogger(__name__)

_NOTE_SUFFIX = ".md"
_ENCODING = "utf-8"


def _iso_from_stamp(stamp: float) -> str:
    return datetime.fromtimestamp(stamp, UTC).isoformat()


class MarkdownNoteSource(NoteSource):
    """Read checklist items from ``.md`` notes on disk.

    Supports:
    - a single note file, or a directory searched recursively for ``*.md``
    - record paths relative to the root, so ``path:`` globs are portable
    - ids derived from path and line number, stable until lines move
    - in-place line replacement that keeps the rest of the file intact
    """

    source_name = "markdown"

    @classmethod
    def can_handle(cls, location: Path) -> bool:
        if location.is_file():
            return location.suffix == _NOTE_SUFFIX
        return location.is_dir()

    def __init__(self, root: Path) -> None:
        if not root.exists():
            raise FileNotFoundError(f"No notes found at {root}")
        self._root = root

    def _note_files(self) -> list[Path]:
        if self._root.is_file():
            return [self._root]
        return sorted(self._root.rglob(f"*{_NOTE_SUFFIX}"))

    def _relative(self, note: Path) -> str:
        if self._root.is_file():
            return note.name
        return note.relative_to(self._root).as_posix()

    @staticmethod
    def _read_note(note: Path) -> str | None:
        """Return the text of ``note``, or None if it is not valid UTF-8."""
        try:
            return note.read_text(encoding=_ENCODING)
        except UnicodeDecodeError as exc:
            logger.warning("Skipping %s: not valid UTF-8 (%s)", note, exc.reason)
            return None

    def get_records(self) -> list[LineRecord]:
        records: list[LineRecord] = []
        for note in self._note_files():
            text = self._read_note(note)
            if text is None:
                continue
            stat = note.stat()
            rel = self._relative(note)
            for lineno, line in enumerate(text.splitlines(), start=1):
                if not is_task_line(line):
                    continue
                records.append(
                    LineRecord(
                        id=self._make_id(rel, lineno),
                        markdown=line,
                        updated=_iso_from_stamp(stat.st_mtime),
                        created=_iso_from_stamp(stat.st_ctime),
                        path=rel,
                    )
                )
        return records

    def replace_line(self, record_id: str, line: str) -> None:
        """Rewrite one line of a note, preserving its line ending."""
        for note in self._note_files():
            text = self._read_note(note)
            if text is None:
                continue
            rel = self._relative(note)
            lines = text.splitlines(keepends=True)
            for idx, original in enumerate(lines):
                if self._make_id(rel, idx + 1) != record_id:
                    continue
                ending = original[len(original.rstrip("\r\n")) :]
                lines[idx] = line + ending
                note.write_text("".join(lines), encoding=_ENCODING)
                logger.info("Rewrote line %d of %s", idx + 1, rel)
                return
        raise KeyError(record_id)

    def append_line(self, line: str, note: Path | None = None) -> LineRecord:
        """Append a new checklist line to ``note`` (the root file by default)."""
        target = note or self._root
        if target.is_dir():
            raise ValueError("A note file is required when the source is a directory")
        content = target.read_text(encoding=_ENCODING) if target.exists() else ""
        if content and not content.endswith("\n"):
            content += "\n"
        target.write_text(content + line + "\n", encoding=_ENCODING)
        rel = self._relative(target) if target.is_relative_to(self._root) else target.name
        lineno = content.count("\n") + 1
        logger.info("Appended line %d to %s", lineno, rel)
        stat = target.stat()
        return LineRecord(
            id=self._make_id(rel, lineno),
            markdown=line,
            updated=_iso_from_stamp(stat.st_mtime),
            created=_iso_from_stamp(stat.st_ctime),
            path=rel,
        )

    @staticmethod
    def _make_id(rel_path: str, lineno: int) -> str:
        """Generate a stable ID from a note path and line number."""
        digest = hashlib.sha256(f"{rel_path}:{lineno}".encode()).hexdigest()[:8]
        return f"md-{digest}"
