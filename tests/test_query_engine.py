"""Tests for query execution over task collections."""

from datetime import date
from itertools import product

import pytest

from taskdown.query.engine import apply_query, filter_tasks, glob_to_regex, sort_tasks
from taskdown.query.models import DateWindow, QuerySpec, SortDirection, SortField, SortSpec
from taskdown.query.parser import parse_query
from taskdown.tasks.models import Task, TaskDates, TaskPriority, TaskStatus

TODAY = date(2024, 6, 15)


def _ids(tasks: list[Task]) -> list[str]:
    return [t.id for t in tasks]


@pytest.fixture
def grid() -> list[Task]:
    """One task for every status x priority combination."""
    return [
        Task(id=f"{status}-{priority}", status=status, priority=priority)
        for status, priority in product(TaskStatus, TaskPriority)
    ]


class TestFilterConjunction:
    def test_status_and_priority(self, grid: list[Task]) -> None:
        spec = QuerySpec(status_in=["done"], priority_in=["high"])
        assert _ids(apply_query(grid, spec)) == ["done-high"]

    def test_matches_hand_filter(self, grid: list[Task]) -> None:
        spec = QuerySpec(status_in=["todo", "done"], priority_in=["high", "low"])
        expected = [
            t
            for t in grid
            if t.status in ("todo", "done") and t.priority in ("high", "low")
        ]
        assert apply_query(grid, spec) == expected
        assert len(expected) == 4

    def test_empty_spec_keeps_everything(self, grid: list[Task]) -> None:
        assert apply_query(grid, QuerySpec()) == grid

    def test_input_not_modified(self, grid: list[Task]) -> None:
        before = list(grid)
        apply_query(grid, QuerySpec(status_in=["done"], sort=SortSpec(SortField.content)))
        assert grid == before


class TestTagFilters:
    @pytest.fixture
    def tasks(self) -> list[Task]:
        return [
            Task(id="a", tags=["Work/Urgent"]),
            Task(id="b", tags=["home"]),
            Task(id="c", tags=["homework", "someday"]),
            Task(id="d"),
        ]

    def test_include_is_case_insensitive_substring(self, tasks: list[Task]) -> None:
        assert _ids(filter_tasks(tasks, QuerySpec(tags_include=["work"]))) == ["a", "c"]

    def test_include_any_term(self, tasks: list[Task]) -> None:
        spec = QuerySpec(tags_include=["urgent", "home"])
        assert _ids(filter_tasks(tasks, spec)) == ["a", "b", "c"]

    def test_exclude(self, tasks: list[Task]) -> None:
        assert _ids(filter_tasks(tasks, QuerySpec(tags_exclude=["some"]))) == [
            "a",
            "b",
            "d",
        ]


class TestFreeTextAndPath:
    def test_free_text_matches_description_or_tag(self) -> None:
        tasks = [
            Task(id="a", description="Buy MILK"),
            Task(id="b", description="Call bank", tags=["milkman"]),
            Task(id="c", description="Other"),
        ]
        assert _ids(filter_tasks(tasks, QuerySpec(free_text=" milk "))) == ["a", "b"]

    def test_path_glob(self) -> None:
        tasks = [
            Task(id="a", path="projects/alpha.md"),
            Task(id="b", path="projects/beta.txt"),
            Task(id="c", path="journal/alpha.md"),
            Task(id="d"),
        ]
        spec = QuerySpec(path_glob="projects/*.md")
        assert _ids(filter_tasks(tasks, spec)) == ["a"]

    def test_glob_escapes_metacharacters(self) -> None:
        regex = glob_to_regex("a.b*")
        assert regex.match("a.bcd")
        assert not regex.match("axbcd")


class TestDateWindows:
    @pytest.fixture
    def tasks(self) -> list[Task]:
        return [
            Task(id="may", dates=TaskDates(due="2024-05-31", start="2024-05-01")),
            Task(id="june1", dates=TaskDates(due="2024-06-01")),
            Task(id="june2", dates=TaskDates(due="2024-06-02")),
            Task(id="none"),
            Task(id="junk", dates=TaskDates(due="2024-99-99")),
        ]

    def test_exact_day_includes_boundary(self, tasks: list[Task]) -> None:
        spec = parse_query("due: 2024-06-01", today=TODAY)
        assert _ids(filter_tasks(tasks, spec)) == ["june1"]

    def test_after_excludes_boundary(self, tasks: list[Task]) -> None:
        spec = parse_query("due: >2024-06-01", today=TODAY)
        assert _ids(filter_tasks(tasks, spec)) == ["june2"]

    def test_before(self, tasks: list[Task]) -> None:
        spec = parse_query("due: <2024-06-01", today=TODAY)
        assert _ids(filter_tasks(tasks, spec)) == ["may"]

    def test_starts_window(self, tasks: list[Task]) -> None:
        spec = QuerySpec(starts_window=DateWindow(before=date(2024, 6, 1)))
        assert _ids(filter_tasks(tasks, spec)) == ["may"]


class TestSort:
    def test_due_asc_missing_last(self) -> None:
        tasks = [
            Task(id="none"),
            Task(id="late", dates=TaskDates(due="2024-07-01")),
            Task(id="early", dates=TaskDates(due="2024-06-01")),
        ]
        assert _ids(sort_tasks(tasks, SortSpec())) == ["early", "late", "none"]

    def test_stable_for_equal_keys(self) -> None:
        tasks = [
            Task(id="first", dates=TaskDates(due="2024-06-01")),
            Task(id="other", dates=TaskDates(due="2024-05-01")),
            Task(id="second", dates=TaskDates(due="2024-06-01")),
        ]
        assert _ids(sort_tasks(tasks, SortSpec())) == ["other", "first", "second"]
        assert _ids(sort_tasks(tasks, SortSpec(direction=SortDirection.desc))) == [
            "first",
            "second",
            "other",
        ]

    def test_start(self) -> None:
        tasks = [
            Task(id="none"),
            Task(id="b", dates=TaskDates(start="2024-06-02")),
            Task(id="a", dates=TaskDates(start="2024-06-01")),
        ]
        assert _ids(sort_tasks(tasks, SortSpec(SortField.start))) == ["a", "b", "none"]

    def test_content(self) -> None:
        tasks = [Task(id="b", description="beta"), Task(id="a", description="alpha")]
        assert _ids(sort_tasks(tasks, SortSpec(SortField.content))) == ["a", "b"]

    def test_created_compact_and_iso(self) -> None:
        tasks = [
            Task(id="iso", created="2024-06-02T10:00:00+00:00"),
            Task(id="compact", created="20240601100000"),
            Task(id="missing"),
            Task(id="junk", created="yesterday"),
        ]
        spec = SortSpec(SortField.created, SortDirection.asc)
        assert _ids(sort_tasks(tasks, spec)) == ["missing", "junk", "compact", "iso"]

    def test_updated_desc(self) -> None:
        tasks = [
            Task(id="old", updated="2024-01-01T00:00:00+00:00"),
            Task(id="new", updated="2024-06-01T00:00:00+00:00"),
        ]
        spec = SortSpec(SortField.updated, SortDirection.desc)
        assert _ids(sort_tasks(tasks, spec)) == ["new", "old"]


class TestLimit:
    def test_limit_after_priority_sort(self) -> None:
        tasks = [
            Task(id="low1", priority=TaskPriority.low),
            Task(id="med", priority=TaskPriority.medium),
            Task(id="low2", priority=TaskPriority.low),
            Task(id="high", priority=TaskPriority.high),
            Task(id="low3", priority=TaskPriority.low),
        ]
        spec = parse_query("sort: priority desc\nlimit: 2", today=TODAY)
        assert _ids(apply_query(tasks, spec)) == ["high", "med"]

    def test_limit_without_sort_keeps_input_order(self, grid: list[Task]) -> None:
        assert apply_query(grid, QuerySpec(limit=2)) == grid[:2]
