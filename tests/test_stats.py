"""Tests for task summary numbers."""

from datetime import date

from taskdown.query.stats import (
    NO_PROJECT,
    ProjectStats,
    TaskStats,
    all_tags,
    project_stats,
    task_stats,
)
from taskdown.tasks.models import Task, TaskDates, TaskStatus

TODAY = date(2024, 6, 15)


class TestTaskStats:
    def test_counts(self) -> None:
        tasks = [
            Task(id="a", status=TaskStatus.done, dates=TaskDates(due="2024-06-01")),
            Task(id="b", status=TaskStatus.todo, dates=TaskDates(due="2024-06-01")),
            Task(id="c", status=TaskStatus.in_progress, dates=TaskDates(due="2024-06-15")),
            Task(id="d", status=TaskStatus.cancelled),
        ]
        assert task_stats(tasks, today=TODAY) == TaskStats(
            total=4,
            completed=1,
            in_progress=1,
            todo=1,
            cancelled=1,
            overdue=1,
            completion_rate=25,
        )

    def test_empty(self) -> None:
        assert task_stats([], today=TODAY) == TaskStats()

    def test_rate_rounded(self) -> None:
        tasks = [
            Task(id="a", status=TaskStatus.done),
            Task(id="b", status=TaskStatus.done),
            Task(id="c"),
        ]
        assert task_stats(tasks, today=TODAY).completion_rate == 67

    def test_invalid_due_not_overdue(self) -> None:
        tasks = [Task(id="a", dates=TaskDates(due="2024-02-30"))]
        assert task_stats(tasks, today=TODAY).overdue == 0

    def test_to_dict(self) -> None:
        assert TaskStats(total=2).to_dict()["total"] == 2


class TestTags:
    def test_all_tags_sorted_unique(self) -> None:
        tasks = [Task(id="a", tags=["work", "home"]), Task(id="b", tags=["home"])]
        assert all_tags(tasks) == ["home", "work"]


class TestProjectStats:
    def test_grouped_by_first_tag(self) -> None:
        tasks = [
            Task(id="a", tags=["alpha", "x"], status=TaskStatus.done),
            Task(id="b"),
            Task(id="c", tags=["alpha"]),
            Task(id="d", tags=["x", "alpha"]),
        ]
        assert project_stats(tasks) == [
            ProjectStats(name="alpha", tag="alpha", task_count=2, completed_count=1),
            ProjectStats(name=NO_PROJECT, tag="", task_count=1),
            ProjectStats(name="x", tag="x", task_count=1),
        ]
