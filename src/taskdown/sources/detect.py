"""Pick the NoteSource for a command-line location."""

import sys
from pathlib import Path
from typing import TextIO

from .markdown import MarkdownNoteSource
from .protocol import NoteSource
from .text import TextNoteSource

# Location that means "read the notes from standard input"
STDIN_LOCATION = "-"

# Auto-detection order; the first source whose can_handle() matches wins.
_AUTO_DETECT_ORDER: list[type[NoteSource]] = [
    MarkdownNoteSource,
]


def detect_source(location: str, stdin: TextIO | None = None) -> NoteSource:
    """Return a NoteSource for ``location``.

    Args:
        location: A note file, a directory of notes, or ``-`` for stdin.
        stdin: Stream to read when ``location`` is ``-``.

    Raises:
        FileNotFoundError: if no source can read ``location``.
    """
    if location == STDIN_LOCATION:
        return TextNoteSource((stdin or sys.stdin).read())

    path = Path(location).expanduser()
    for source_cls in _AUTO_DETECT_ORDER:
        if source_cls.can_handle(path):
            return source_cls(path)  # type: ignore[call-arg]
    raise FileNotFoundError(f"No notes found at {location}")
