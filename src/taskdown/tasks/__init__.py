"""Task model and the checklist line codec."""

from taskdown.tasks.codec import TaskCodec, format_task, is_task_line, parse_task
from taskdown.tasks.lifecycle import (
    cycle_status,
    generate_task_id,
    new_task,
    set_status,
    update_task,
)
from taskdown.tasks.models import (
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

__all__ = [
    "UNTITLED_DESCRIPTION",
    "LineRecord",
    "Recurrence",
    "TagStyle",
    "Task",
    "TaskCodec",
    "TaskDates",
    "TaskMeta",
    "TaskPriority",
    "TaskStatus",
    "cycle_status",
    "format_task",
    "generate_task_id",
    "is_task_line",
    "new_task",
    "normalize_description",
    "parse_task",
    "set_status",
    "update_task",
]
