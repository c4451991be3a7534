"""Note sources that feed checklist lines to the codec."""

from taskdown.sources.detect import detect_source
from taskdown.sources.markdown import MarkdownNoteSource
from taskdown.sources.protocol import NoteSource
from taskdown.sources.text import TextNoteSource

__all__ = [
    "MarkdownNoteSource",
    "NoteSource",
    "TextNoteSource",
    "detect_source",
]
