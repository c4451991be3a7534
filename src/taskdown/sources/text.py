"""TextNoteSource — wraps an in-memory block of note text."""

from taskdown.tasks.codec import is_task_line
from taskdown.tasks.models import LineRecord

from .protocol import NoteSource


class TextNoteSource(NoteSource):
    """The simplest note source: text held in memory (e.g. read from stdin).

    Records are identified by line number. Replacements change the held
    text only; read it back through ``text``.
    Not auto-detected — used when the caller already has the text.
    """

    source_name = "text"

    def __init__(self, text: str, name: str = "stdin") -> None:
        self._lines = text.splitlines()
        self._name = name

    @property
    def text(self) -> str:
        return "\n".join(self._lines) + "\n" if self._lines else ""

    @staticmethod
    def _make_id(lineno: int) -> str:
        return f"line-{lineno}"

    def get_records(self) -> list[LineRecord]:
        return [
            LineRecord(id=self._make_id(lineno), markdown=line, path=self._name)
            for lineno, line in enumerate(self._lines, start=1)
            if is_task_line(line)
        ]

    def replace_line(self, record_id: str, line: str) -> None:
        for idx in range(len(self._lines)):
            if self._make_id(idx + 1) == record_id:
                self._lines[idx] = line
                return
        raise KeyError(record_id)
