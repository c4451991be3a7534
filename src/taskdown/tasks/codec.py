"""TaskCodec — parse checklist lines into tasks and render tasks back.

A line is a task when it looks like ``- [ ] content`` (the list marker may
be ``-``, ``*``, ``1.`` or missing). Metadata is carried by emoji markers
inside the content:

    - [x] ⏫ Pay rent 📅2024-06-01 🔁 every month when done ✅ 2024-06-01 #home# ⛔abc123

Parsing is best-effort and never raises: lines that are not checklist
items yield ``None``, malformed tokens are left out of the task.
"""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date

from . import markers
from .models import (
    UNTITLED_DESCRIPTION,
    LineRecord,
    Recurrence,
    TagStyle,
    Task,
    TaskDates,
    TaskMeta,
    TaskPriority,
    TaskStatus,
    normalize_description,
)

logger = logging.getLogger(__name__)

# Matches lines like: "- [ ] Task", "  * [/] Task", "3. [x] Task", "[-] Task"
_CHECKLIST_PATTERN = re.compile(
    r"^(?P<indent>\s*)(?:(?:[-*]|\d+\.)\s*)?\[(?P<mark>[^\]])\]\s+(?P<content>.*)$"
)

# Emoji are sometimes followed by a variation selector
_VS = "\ufe0f?"

_PRIORITY_PATTERN = re.compile(
    "(?:"
    + "|".join(re.escape(m) for m in markers.PRIORITY_MARKERS.values())
    + ")"
    + _VS
)
_DATE_PATTERN = re.compile(
    "(?P<marker>"
    + "|".join(re.escape(m) for m in markers.DATE_MARKERS)
    + ")"
    + _VS
    + r"\s*(?P<date>\d{4}-\d{2}-\d{2})"
)
_DEPENDENCY_PATTERN = re.compile(
    re.escape(markers.DEPENDENCY) + _VS + r"\s*(?P<ref>[\w-]+)"
)
_RECURRENCE_PATTERN = re.compile(
    re.escape(markers.RECURRENCE)
    + _VS
    + r"\s*(?P<rule>[^"
    + "".join(re.escape(c) for c in markers.RULE_TERMINATORS)
    + r"\n]*)"
)
_WHEN_DONE_PATTERN = re.compile(r"\bwhen\s+done\b", re.IGNORECASE)

_TAG_PATTERNS: dict[TagStyle, re.Pattern[str]] = {
    TagStyle.wrapped: re.compile(r"#(?P<tag>[\w/-]+)#"),
    TagStyle.bare: re.compile(r"(?<!\S)#(?P<tag>[\w/-]+)"),
}

# Dates rendered right after the description, in this order. The done
# date is rendered separately, after the recurrence rule.
_LEADING_DATES = (
    ("due", markers.DUE),
    ("start", markers.START),
    ("scheduled", markers.SCHEDULED),
    ("cancelled", markers.CANCELLED),
)


def is_task_line(line: str) -> bool:
    """Return True if ``line`` has the checklist-item shape."""
    return _CHECKLIST_PATTERN.match(line) is not None


def _unique(values: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def _valid_iso_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


@dataclass
class TaskCodec:
    """Bidirectional codec between checklist lines and ``Task`` objects.

    Args:
        tag_style: Tag delimiter convention of the notes being read/written.
        clock: Returns "today"; used for completion dates the task lacks.
    """

    tag_style: TagStyle = TagStyle.wrapped
    clock: Callable[[], date] = field(default=date.today)

    @property
    def _tag_pattern(self) -> re.Pattern[str]:
        return _TAG_PATTERNS[self.tag_style]

    def parse(
        self, line: str, external_id: str, meta: TaskMeta | None = None
    ) -> Task | None:
        """Parse one line, or return None if it is not a checklist item."""
        match = _CHECKLIST_PATTERN.match(line)
        if not match:
            return None

        content = match.group("content")
        recurrence, content_rest = self._parse_recurrence(content, line)
        meta = meta or TaskMeta()

        return Task(
            id=external_id,
            description=self._parse_description(content_rest),
            status=markers.STATUS_MARKS.get(match.group("mark"), TaskStatus.todo),
            priority=self._parse_priority(content),
            dates=self._parse_dates(content),
            tags=_unique(m.group("tag") for m in self._tag_pattern.finditer(content)),
            dependencies=_unique(
                m.group("ref") for m in _DEPENDENCY_PATTERN.finditer(content)
            ),
            recurrence=recurrence,
            source_text=line,
            path=meta.path,
            created=meta.created,
            updated=meta.updated,
            indent=match.group("indent"),
        )

    def parse_records(self, records: Iterable[LineRecord]) -> list[Task]:
        """Parse a batch of stored lines, skipping the ones that are not tasks."""
        tasks: list[Task] = []
        for record in records:
            task = self.parse(record.markdown, record.id, record.meta)
            if task is not None:
                tasks.append(task)
        return tasks

    @staticmethod
    def _parse_priority(content: str) -> TaskPriority:
        if markers.HIGH_PRIORITY in content:
            return TaskPriority.high
        if markers.MEDIUM_PRIORITY in content:
            return TaskPriority.medium
        return TaskPriority.low

    @staticmethod
    def _parse_dates(content: str) -> TaskDates:
        dates = TaskDates()
        for match in _DATE_PATTERN.finditer(content):
            kind = markers.DATE_MARKERS[match.group("marker")]
            value = match.group("date")
            if not _valid_iso_date(value):
                logger.debug("Dropping invalid %s date %r", kind, value)
                continue
            setattr(dates, kind, value)
        return dates

    @staticmethod
    def _parse_recurrence(content: str, line: str) -> tuple[Recurrence | None, str]:
        """Extract the recurrence rule and return the content without it."""
        match = _RECURRENCE_PATTERN.search(content)
        if not match:
            return None, content

        rest = content[: match.start()] + " " + content[match.end() :]
        rule = normalize_description(_WHEN_DONE_PATTERN.sub(" ", match.group("rule")))
        if not rule:
            return None, rest
        return (
            Recurrence(
                rule=rule,
                base_on_done_date=_WHEN_DONE_PATTERN.search(line) is not None,
            ),
            rest,
        )

    def _parse_description(self, content: str) -> str:
        text = _PRIORITY_PATTERN.sub(" ", content)
        text = _DATE_PATTERN.sub(" ", text)
        text = self._tag_pattern.sub(" ", text)
        text = _DEPENDENCY_PATTERN.sub(" ", text)
        return normalize_description(text) or UNTITLED_DESCRIPTION

    def format(self, task: Task) -> str:
        """Render a task as a single checklist line.

        Token order is fixed so that parsing the result reproduces the task.
        """
        parts = [f"{task.indent}- [{markers.STATUS_CHARS[task.status]}]"]

        priority_marker = markers.PRIORITY_MARKERS.get(task.priority)
        if priority_marker:
            parts.append(priority_marker)

        parts.append(task.description)

        for kind, marker in _LEADING_DATES:
            value = getattr(task.dates, kind)
            if value:
                parts.append(f"{marker}{value}")

        if task.recurrence and task.recurrence.rule:
            parts.append(f"{markers.RECURRENCE} {task.recurrence.rule}")
            if task.recurrence.base_on_done_date:
                parts.append("when done")

        if task.status == TaskStatus.done:
            completed = task.dates.done or self.clock().isoformat()
            parts.append(f"{markers.DONE} {completed}")

        for tag in task.tags:
            parts.append(self.format_tag(tag))

        for dep in task.dependencies:
            parts.append(f"{markers.DEPENDENCY}{dep}")

        return " ".join(parts)

    def format_tag(self, tag: str) -> str:
        if self.tag_style == TagStyle.bare:
            return f"#{tag}"
        return f"#{tag}#"


_DEFAULT_CODEC = TaskCodec()


def parse_task(line: str, external_id: str, meta: TaskMeta | None = None) -> Task | None:
    """Parse a line with the default (wrapped-tag) codec."""
    return _DEFAULT_CODEC.parse(line, external_id, meta)


def format_task(task: Task) -> str:
    """Render a task with the default (wrapped-tag) codec."""
    return _DEFAULT_CODEC.format(task)
