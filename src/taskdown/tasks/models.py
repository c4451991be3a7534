"""Task model, status/priority enums, and normalization helpers."""

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

UNTITLED_DESCRIPTION = "Untitled Task"

_WHITESPACE = re.compile(r"\s+")


class TaskStatus(StrEnum):
    todo = "todo"
    in_progress = "in_progress"
    done = "done"
    cancelled = "cancelled"


class TaskPriority(StrEnum):
    high = "high"
    medium = "medium"
    low = "low"


class TagStyle(StrEnum):
    """How tags are delimited in a note: ``#tag#`` or ``#tag``."""

    wrapped = "wrapped"
    bare = "bare"


# Ordinal used by priority sorting
PRIORITY_ORDER: dict[TaskPriority, int] = {
    TaskPriority.high: 3,
    TaskPriority.medium: 2,
    TaskPriority.low: 1,
}


def normalize_description(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


@dataclass
class TaskDates:
    """ISO ``YYYY-MM-DD`` dates attached to a task, one per kind."""

    due: str | None = None
    start: str | None = None
    scheduled: str | None = None
    done: str | None = None
    cancelled: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {
            key: value
            for key, value in (
                ("due", self.due),
                ("start", self.start),
                ("scheduled", self.scheduled),
                ("done", self.done),
                ("cancelled", self.cancelled),
            )
            if value is not None
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskDates":
        return cls(
            due=data.get("due"),
            start=data.get("start"),
            scheduled=data.get("scheduled"),
            done=data.get("done"),
            cancelled=data.get("cancelled"),
        )


@dataclass
class Recurrence:
    rule: str
    base_on_done_date: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"rule": self.rule, "base_on_done_date": self.base_on_done_date}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Recurrence":
        return cls(
            rule=data["rule"],
            base_on_done_date=data.get("base_on_done_date", False),
        )


@dataclass
class Task:
    """One checklist item parsed from (or destined for) a note line.

    ``path``, ``created`` and ``updated`` are copied through from the
    storage collaborator untouched. ``source_text`` is the line the task
    was parsed from, or the line the codec last rendered for it.
    """

    id: str
    description: str = UNTITLED_DESCRIPTION
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.low
    dates: TaskDates = field(default_factory=TaskDates)
    tags: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    recurrence: Recurrence | None = None
    source_text: str = ""
    path: str | None = None
    created: str | None = None
    updated: str | None = None
    indent: str = ""

    def equivalent(self, other: "Task") -> bool:
        """Compare every field except ``source_text``.

        Descriptions are compared after whitespace normalization.
        """
        return (
            self.id == other.id
            and normalize_description(self.description)
            == normalize_description(other.description)
            and self.status == other.status
            and self.priority == other.priority
            and self.dates == other.dates
            and self.tags == other.tags
            and self.dependencies == other.dependencies
            and self.recurrence == other.recurrence
            and self.path == other.path
            and self.created == other.created
            and self.updated == other.updated
            and self.indent == other.indent
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "status": str(self.status),
            "priority": str(self.priority),
            "dates": self.dates.to_dict(),
            "tags": self.tags,
            "dependencies": self.dependencies,
            "recurrence": self.recurrence.to_dict() if self.recurrence else None,
            "source_text": self.source_text,
            "path": self.path,
            "created": self.created,
            "updated": self.updated,
            "indent": self.indent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        recurrence = data.get("recurrence")
        return cls(
            id=data["id"],
            description=data.get("description", UNTITLED_DESCRIPTION),
            status=TaskStatus(data.get("status", "todo")),
            priority=TaskPriority(data.get("priority", "low")),
            dates=TaskDates.from_dict(data.get("dates", {})),
            tags=list(data.get("tags", [])),
            dependencies=list(data.get("dependencies", [])),
            recurrence=Recurrence.from_dict(recurrence) if recurrence else None,
            source_text=data.get("source_text", ""),
            path=data.get("path"),
            created=data.get("created"),
            updated=data.get("updated"),
            indent=data.get("indent", ""),
        )


@dataclass
class TaskMeta:
    """Storage-side metadata copied onto a parsed task unmodified."""

    path: str | None = None
    created: str | None = None
    updated: str | None = None


@dataclass
class LineRecord:
    """One stored line as handed over by a note source."""

    id: str
    markdown: str
    updated: str | None = None
    created: str | None = None
    path: str | None = None

    @property
    def meta(self) -> TaskMeta:
        return TaskMeta(path=self.path, created=self.created, updated=self.updated)
