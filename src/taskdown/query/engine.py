"""Query execution: filter, sort and limit a task collection."""

import logging
import re
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

from taskdown.tasks.models import PRIORITY_ORDER, Task

from .models import QuerySpec, SortDirection, SortField, SortSpec

logger = logging.getLogger(__name__)

# Missing dates sort after every real date in ascending order
MISSING_DATE = "9999-12-31"

# Compact timestamp format used by note stores (YYYYMMDDHHMMSS)
_COMPACT_TIMESTAMP = "%Y%m%d%H%M%S"

Predicate = Callable[[Task], bool]


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a ``*`` glob into an anchored regex; everything else is literal."""
    return re.compile(
        "^" + ".*".join(re.escape(chunk) for chunk in pattern.split("*")) + "$"
    )


def _timestamp(value: str | None) -> float:
    if not value:
        return 0.0
    try:
        if value.isdigit() and len(value) == 14:
            return datetime.strptime(value, _COMPACT_TIMESTAMP).timestamp()
        return datetime.fromisoformat(value).timestamp()
    except ValueError:
        return 0.0


def _any_tag_contains(task: Task, terms: list[str]) -> bool:
    lowered = [term.lower() for term in terms]
    return any(term in tag.lower() for tag in task.tags for term in lowered)


def _build_predicates(spec: QuerySpec) -> list[tuple[str, Predicate]]:
    predicates: list[tuple[str, Predicate]] = []

    if spec.status_in:
        statuses = set(spec.status_in)
        predicates.append(("status", lambda t: t.status in statuses))

    if spec.priority_in:
        priorities = set(spec.priority_in)
        predicates.append(("priority", lambda t: t.priority in priorities))

    if spec.tags_include:
        include = spec.tags_include
        predicates.append(("tag", lambda t: _any_tag_contains(t, include)))

    if spec.tags_exclude:
        exclude = spec.tags_exclude
        predicates.append(("-tag", lambda t: not _any_tag_contains(t, exclude)))

    if spec.free_text and spec.free_text.strip():
        text = spec.free_text.strip().lower()
        predicates.append(
            (
                "text",
                lambda t: text in t.description.lower()
                or any(text in tag.lower() for tag in t.tags),
            )
        )

    if spec.path_glob:
        regex = glob_to_regex(spec.path_glob)
        predicates.append(
            ("path", lambda t: t.path is not None and regex.match(t.path) is not None)
        )

    if spec.due_window:
        due_window = spec.due_window
        predicates.append(("due", lambda t: due_window.contains(t.dates.due)))

    if spec.starts_window:
        starts_window = spec.starts_window
        predicates.append(("starts", lambda t: starts_window.contains(t.dates.start)))

    return predicates


def filter_tasks(tasks: Sequence[Task], spec: QuerySpec) -> list[Task]:
    """Keep the tasks that satisfy every predicate set in ``spec``."""
    result = list(tasks)
    for name, predicate in _build_predicates(spec):
        result = [task for task in result if predicate(task)]
        logger.debug("%d tasks left after %s filter", len(result), name)
    return result


def _sort_key(field: SortField) -> Callable[[Task], Any]:
    if field == SortField.due:
        return lambda t: t.dates.due or MISSING_DATE
    if field == SortField.start:
        return lambda t: t.dates.start or MISSING_DATE
    if field == SortField.priority:
        return lambda t: PRIORITY_ORDER.get(t.priority, 0)
    if field == SortField.created:
        return lambda t: _timestamp(t.created)
    if field == SortField.updated:
        return lambda t: _timestamp(t.updated)
    return lambda t: t.description


def sort_tasks(tasks: Sequence[Task], sort: SortSpec) -> list[Task]:
    """Stable single-key sort; ties keep their input order in both directions."""
    return sorted(
        tasks,
        key=_sort_key(sort.field),
        reverse=sort.direction == SortDirection.desc,
    )


def apply_query(tasks: Sequence[Task], spec: QuerySpec) -> list[Task]:
    """Filter, then sort, then truncate ``tasks`` according to ``spec``.

    The input sequence is not modified.
    """
    result = filter_tasks(tasks, spec)
    if spec.sort:
        result = sort_tasks(result, spec.sort)
    if spec.limit and spec.limit > 0:
        result = result[: spec.limit]
    return result
