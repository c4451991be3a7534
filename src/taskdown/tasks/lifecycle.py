"""Task creation and mutation helpers that keep the model invariants.

Every helper returns a new ``Task`` and re-renders ``source_text`` with the
given codec; the input task is left untouched.
"""

import uuid
from dataclasses import replace
from datetime import date
from typing import Any

from .codec import TaskCodec
from .models import Task, TaskDates, TaskPriority, TaskStatus

NEW_TASK_DESCRIPTION = "New Task"

# Legacy one-click toggle order
_NEXT_STATUS: dict[TaskStatus, TaskStatus] = {
    TaskStatus.todo: TaskStatus.in_progress,
    TaskStatus.in_progress: TaskStatus.done,
    TaskStatus.done: TaskStatus.todo,
    TaskStatus.cancelled: TaskStatus.todo,
}

_DEFAULT_CODEC = TaskCodec()


def generate_task_id() -> str:
    """Return a placeholder id for a task that storage has not seen yet."""
    return f"temp_{uuid.uuid4().hex[:12]}"


def _copy(task: Task, **changes: Any) -> Task:
    """Shallow-copy a task without sharing its mutable containers."""
    dates = changes.pop("dates", task.dates)
    tags = changes.pop("tags", task.tags)
    dependencies = changes.pop("dependencies", task.dependencies)
    return replace(
        task,
        dates=replace(dates),
        tags=list(tags),
        dependencies=list(dependencies),
        **changes,
    )


def _apply_done_invariant(
    before: TaskStatus, after: Task, today: date | None, codec: TaskCodec
) -> None:
    if after.status == TaskStatus.done and before != TaskStatus.done:
        after.dates.done = (today or codec.clock()).isoformat()
    elif after.status != TaskStatus.done and before == TaskStatus.done:
        after.dates.done = None


def new_task(
    description: str = NEW_TASK_DESCRIPTION,
    *,
    status: TaskStatus = TaskStatus.todo,
    priority: TaskPriority = TaskPriority.low,
    dates: TaskDates | None = None,
    tags: list[str] | None = None,
    dependencies: list[str] | None = None,
    today: date | None = None,
    codec: TaskCodec | None = None,
    **fields: Any,
) -> Task:
    """Construct a task that does not exist in any note yet."""
    codec = codec or _DEFAULT_CODEC
    task = Task(
        id=generate_task_id(),
        description=description or NEW_TASK_DESCRIPTION,
        status=status,
        priority=priority,
        dates=replace(dates) if dates else TaskDates(),
        tags=list(tags or []),
        dependencies=list(dependencies or []),
        **fields,
    )
    if task.status == TaskStatus.done and not task.dates.done:
        task.dates.done = (today or codec.clock()).isoformat()
    task.source_text = codec.format(task)
    return task


def update_task(
    task: Task,
    *,
    today: date | None = None,
    codec: TaskCodec | None = None,
    **changes: Any,
) -> Task:
    """Apply field edits, keep the done-date invariant, re-render the line."""
    codec = codec or _DEFAULT_CODEC
    updated = _copy(task, **changes)
    _apply_done_invariant(task.status, updated, today, codec)
    updated.source_text = codec.format(updated)
    return updated


def set_status(
    task: Task,
    status: TaskStatus,
    *,
    today: date | None = None,
    codec: TaskCodec | None = None,
) -> Task:
    """Move a task to ``status``.

    Entering ``done`` stamps the completion date, leaving it clears the
    date. Due, start, scheduled and cancelled dates are not touched.
    """
    return update_task(task, today=today, codec=codec, status=status)


def cycle_status(
    task: Task, *, today: date | None = None, codec: TaskCodec | None = None
) -> Task:
    """Advance todo -> in_progress -> done -> todo (cancelled -> todo)."""
    return set_status(task, _NEXT_STATUS[task.status], today=today, codec=codec)
