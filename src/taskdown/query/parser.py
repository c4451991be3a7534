"""Query language parser.

A query is a list of directives, one per line::

    status: todo, in_progress
    due: <2024-07-01
    tag: work
    -tag: someday
    sort: priority desc
    limit: 10
    groceries

Lines that are not directives are free text. A single-line query is read
in the legacy dialect, where directives and words are separated by
whitespace (``status:todo tag:work sort:due desc groceries``).

Malformed directive values are ignored; parsing never fails.
"""

import logging
import re
from collections.abc import Callable
from datetime import date, timedelta
from typing import Any

from .models import DateWindow, QuerySpec, SortDirection, SortField, SortSpec

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)

_IGNORED_CHARS = re.compile("[\u200b\u200c\u200d\u2060\ufeff]")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Header line of a fenced ``tasks`` query block
_QUERY_HEADER = "tasks"

_SORT_FIELDS: dict[str, SortField] = {
    "priority": SortField.priority,
    "due": SortField.due,
    "duedate": SortField.due,
    "start": SortField.start,
    "startdate": SortField.start,
    "content": SortField.content,
    "description": SortField.content,
    "created": SortField.created,
    "updated": SortField.updated,
}

# Returns the QuerySpec fields a directive sets; empty when the value is unusable
DirectiveHandler = Callable[[str, date], dict[str, Any]]


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_date(value: str) -> date | None:
    value = value.strip()
    if not _ISO_DATE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_date_window(value: str, today: date) -> DateWindow | None:
    """Turn a ``due:``/``starts:`` value into a window, or None if unrecognized.

    ``today`` and ``tomorrow`` cover one day, ``<DATE`` is everything
    before DATE, ``>DATE`` everything after it, a bare DATE that day only.
    """
    token = value.strip().lower()
    if token == "today":
        return DateWindow(after=today, before=today + _ONE_DAY)
    if token == "tomorrow":
        tomorrow = today + _ONE_DAY
        return DateWindow(after=tomorrow, before=tomorrow + _ONE_DAY)

    try:
        if token.startswith("<"):
            day = _parse_date(token[1:])
            return DateWindow(before=day) if day else None
        if token.startswith(">"):
            day = _parse_date(token[1:])
            return DateWindow(after=day + _ONE_DAY) if day else None
        day = _parse_date(token)
        return DateWindow(after=day, before=day + _ONE_DAY) if day else None
    except OverflowError:
        return None


def _status(value: str, today: date) -> dict[str, Any]:
    items = [item.lower() for item in _split_list(value)]
    return {"status_in": items} if items else {}


def _priority(value: str, today: date) -> dict[str, Any]:
    items = [item.lower() for item in _split_list(value)]
    return {"priority_in": items} if items else {}


def _tags_include(value: str, today: date) -> dict[str, Any]:
    items = _split_list(value)
    return {"tags_include": items} if items else {}


def _tags_exclude(value: str, today: date) -> dict[str, Any]:
    items = _split_list(value)
    return {"tags_exclude": items} if items else {}


def _due(value: str, today: date) -> dict[str, Any]:
    window = parse_date_window(value, today)
    return {"due_window": window} if window else {}


def _starts(value: str, today: date) -> dict[str, Any]:
    window = parse_date_window(value, today)
    return {"starts_window": window} if window else {}


def _path(value: str, today: date) -> dict[str, Any]:
    value = value.strip()
    return {"path_glob": value} if value else {}


def _limit(value: str, today: date) -> dict[str, Any]:
    try:
        limit = int(value.strip())
    except ValueError:
        return {}
    return {"limit": limit} if limit > 0 else {}


def _sort(value: str, today: date) -> dict[str, Any]:
    words = value.split()
    direction = SortDirection.asc
    if len(words) > 1 and words[-1].lower() in (SortDirection.asc, SortDirection.desc):
        direction = SortDirection(words.pop().lower())

    field = _SORT_FIELDS.get(" ".join(words).lower())
    if field is None:
        return {"sort": SortSpec(SortField.due, SortDirection.asc)}
    return {"sort": SortSpec(field, direction)}


# Keyword -> handler, checked in this order; the first matching prefix wins.
DIRECTIVES: dict[str, DirectiveHandler] = {
    "status": _status,
    "priority": _priority,
    "due": _due,
    "starts": _starts,
    "tag": _tags_include,
    "-tag": _tags_exclude,
    "path": _path,
    "limit": _limit,
    "sort": _sort,
}

_LIST_DIRECTIVES = {"status", "priority", "tag", "-tag"}


def normalize_query(text: str) -> str:
    """Strip zero-width characters and byte-order marks."""
    return _IGNORED_CHARS.sub("", text).strip()


def match_directive(part: str) -> tuple[str, str] | None:
    """Return ``(keyword, value)`` if ``part`` starts with a directive prefix."""
    lowered = part.lower()
    for keyword in DIRECTIVES:
        prefix = f"{keyword}:"
        if lowered.startswith(prefix):
            return keyword, part[len(prefix) :].strip()
    return None


def _join_legacy_tokens(tokens: list[str]) -> list[str]:
    """Regroup whitespace-split tokens of a single-line query into parts."""
    parts: list[str] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        directive = match_directive(token)
        if directive is None:
            parts.append(token)
            continue

        keyword, value = directive
        if not value and i < len(tokens) and match_directive(tokens[i]) is None:
            value = tokens[i]
            i += 1
        if keyword in _LIST_DIRECTIVES:
            while value.endswith(",") and i < len(tokens):
                value += tokens[i]
                i += 1
        elif (
            keyword == "sort"
            and i < len(tokens)
            and tokens[i].lower() in (SortDirection.asc, SortDirection.desc)
        ):
            value = f"{value} {tokens[i]}"
            i += 1
        parts.append(f"{keyword}: {value}")
    return parts


def split_query(text: str) -> list[str]:
    """Split a query into directive/free-text parts.

    Multi-line input yields one part per non-blank line; single-line input
    is tokenized on whitespace.
    """
    raw = normalize_query(text)
    if "\n" in raw:
        parts = [line.strip() for line in raw.splitlines() if line.strip()]
    else:
        parts = _join_legacy_tokens(raw.split())
    if parts and parts[0].lower() == _QUERY_HEADER:
        parts = parts[1:]
    return parts


def parse_query(text: str, today: date | None = None) -> QuerySpec:
    """Compile a query string into a QuerySpec.

    Args:
        text: Multi-line or legacy single-line query.
        today: Reference date for ``today``/``tomorrow``; defaults to the
            current date.
    """
    today = today or date.today()
    fields: dict[str, Any] = {}
    free_text: list[str] = []

    for part in split_query(text):
        directive = match_directive(part)
        if directive is None:
            free_text.append(part)
            continue
        keyword, value = directive
        patch = DIRECTIVES[keyword](value, today)
        if not patch:
            logger.debug("Ignoring %s directive with value %r", keyword, value)
        fields.update(patch)

    if free_text:
        fields["free_text"] = " ".join(free_text)
    return QuerySpec(**fields)
