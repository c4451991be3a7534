"""Compiled query: QuerySpec and its date window / sort parts."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum


class SortField(StrEnum):
    due = "due"
    start = "start"
    priority = "priority"
    created = "created"
    updated = "updated"
    content = "content"


class SortDirection(StrEnum):
    asc = "asc"
    desc = "desc"


@dataclass
class SortSpec:
    field: SortField = SortField.due
    direction: SortDirection = SortDirection.asc


@dataclass
class DateWindow:
    """Half-open date range ``[after, before)``; an unset side is open."""

    after: date | None = None
    before: date | None = None

    def contains(self, value: str | None) -> bool:
        """Return True if the ISO date ``value`` falls inside the window.

        Missing or unparseable dates are never inside a window.
        """
        if not value:
            return False
        try:
            day = date.fromisoformat(value)
        except ValueError:
            return False
        if self.after is not None and day < self.after:
            return False
        if self.before is not None and day >= self.before:
            return False
        return True


@dataclass
class QuerySpec:
    """Filters, ordering and bound compiled from a query string.

    Every field is optional; an unset field does not constrain the result.
    """

    status_in: list[str] | None = None
    priority_in: list[str] | None = None
    tags_include: list[str] | None = None
    tags_exclude: list[str] | None = None
    due_window: DateWindow | None = None
    starts_window: DateWindow | None = None
    path_glob: str | None = None
    free_text: str | None = None
    sort: SortSpec | None = None
    limit: int | None = None
