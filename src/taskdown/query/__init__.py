"""Query language: parser, editor helpers, execution engine and stats."""

from taskdown.query.editor import (
    get_directive,
    get_list,
    set_directive,
    set_list,
    toggle_list_item,
)
from taskdown.query.engine import apply_query, filter_tasks, sort_tasks
from taskdown.query.models import (
    DateWindow,
    QuerySpec,
    SortDirection,
    SortField,
    SortSpec,
)
from taskdown.query.parser import parse_query
from taskdown.query.stats import TaskStats, all_tags, project_stats, task_stats

__all__ = [
    "DateWindow",
    "QuerySpec",
    "SortDirection",
    "SortField",
    "SortSpec",
    "TaskStats",
    "all_tags",
    "apply_query",
    "filter_tasks",
    "get_directive",
    "get_list",
    "parse_query",
    "project_stats",
    "set_directive",
    "set_list",
    "sort_tasks",
    "task_stats",
    "toggle_list_item",
]
