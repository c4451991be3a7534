"""NoteSource abstract base class definition."""

from abc import ABC, abstractmethod
from pathlib import Path

from taskdown.tasks.codec import TaskCodec
from taskdown.tasks.models import LineRecord, Task


class NoteSource(ABC):
    """Base class for note storage backends.

    A source hands out checklist lines as ``LineRecord`` objects and takes
    replacement lines back. Parsing and rendering stay in the codec; the
    source only knows where lines live.

    Subclasses should define ``source_name`` and implement ``can_handle``
    to participate in auto-detection via ``detect_source()``.
    """

    source_name: str = ""

    @classmethod
    # location is needed by subclass overrides but unused in the default impl
    def can_handle(cls, location: Path) -> bool:  # noqa: ARG003
        """Return True if this source can read notes at ``location``.

        The default returns False (opt-in).
        """
        return False

    @abstractmethod
    def get_records(self) -> list[LineRecord]:
        """Return every checklist-shaped line with its storage metadata."""
        ...

    @abstractmethod
    def replace_line(self, record_id: str, line: str) -> None:
        """Overwrite the stored line identified by ``record_id``.

        Raises:
            KeyError: if no line has that id.
        """
        ...

    def get_tasks(self, codec: TaskCodec | None = None) -> list[Task]:
        """Parse all records into tasks."""
        return (codec or TaskCodec()).parse_records(self.get_records())

    def save_task(self, task: Task, codec: TaskCodec | None = None) -> str:
        """Render ``task`` and write it over its line. Returns the new line."""
        line = (codec or TaskCodec()).format(task)
        self.replace_line(task.id, line)
        return line
