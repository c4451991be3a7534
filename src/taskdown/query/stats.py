"""Summary numbers over a task collection."""

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

from taskdown.tasks.models import Task, TaskStatus

NO_PROJECT = "No Project"


@dataclass
class TaskStats:
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    todo: int = 0
    cancelled: int = 0
    overdue: int = 0
    completion_rate: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ProjectStats:
    """Counts for the tasks whose first tag is ``name``."""

    name: str
    tag: str
    task_count: int = 0
    completed_count: int = 0


def _is_overdue(task: Task, today: date) -> bool:
    if not task.dates.due or task.status == TaskStatus.done:
        return False
    try:
        return date.fromisoformat(task.dates.due) < today
    except ValueError:
        return False


def task_stats(tasks: Sequence[Task], today: date | None = None) -> TaskStats:
    """Count tasks per status and how many are overdue.

    A task is overdue when its due date is before ``today`` and it is not
    done. The completion rate is a rounded percentage.
    """
    today = today or date.today()
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == TaskStatus.done)
    return TaskStats(
        total=total,
        completed=completed,
        in_progress=sum(1 for t in tasks if t.status == TaskStatus.in_progress),
        todo=sum(1 for t in tasks if t.status == TaskStatus.todo),
        cancelled=sum(1 for t in tasks if t.status == TaskStatus.cancelled),
        overdue=sum(1 for t in tasks if _is_overdue(t, today)),
        completion_rate=round(completed / total * 100) if total else 0,
    )


def all_tags(tasks: Sequence[Task]) -> list[str]:
    """Return every tag used by ``tasks``, sorted and de-duplicated."""
    return sorted({tag for task in tasks for tag in task.tags})


def project_stats(tasks: Sequence[Task]) -> list[ProjectStats]:
    """Group tasks by their first tag, in first-seen order."""
    projects: dict[str, ProjectStats] = {}
    for task in tasks:
        name = task.tags[0] if task.tags else NO_PROJECT
        if name not in projects:
            tag = "" if name == NO_PROJECT else name
            projects[name] = ProjectStats(name=name, tag=tag)
        projects[name].task_count += 1
        if task.status == TaskStatus.done:
            projects[name].completed_count += 1
    return list(projects.values())
