"""Edit multi-line query strings one directive at a time.

A directive key appears at most once: setting a key replaces its line in
place, setting it to an empty value removes the line, and a key that is
not present yet is appended.
"""

from .parser import normalize_query


def _lines(query: str) -> list[str]:
    return normalize_query(query).split("\n") if query else []


def _join(lines: list[str]) -> str:
    return "\n".join(line for line in lines if line.strip())


def _find(lines: list[str], key: str) -> int:
    prefix = f"{key.lower()}:"
    for idx, line in enumerate(lines):
        if line.strip().lower().startswith(prefix):
            return idx
    return -1


def get_directive(query: str, key: str) -> str | None:
    """Return the value of directive ``key``, or None if it is absent."""
    lines = _lines(query)
    idx = _find(lines, key)
    if idx < 0:
        return None
    return lines[idx].split(":", 1)[1].strip()


def set_directive(query: str, key: str, value: str | None) -> str:
    """Return ``query`` with directive ``key`` set to ``value``."""
    lines = _lines(query)
    idx = _find(lines, key)
    if value is None or not value.strip():
        if idx >= 0:
            del lines[idx]
        return _join(lines)

    new_line = f"{key}: {value.strip()}"
    if idx >= 0:
        lines[idx] = new_line
    else:
        lines.append(new_line)
    return _join(lines)


def get_list(query: str, key: str) -> list[str]:
    value = get_directive(query, key)
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def set_list(query: str, key: str, items: list[str]) -> str:
    return set_directive(query, key, ",".join(items))


def toggle_list_item(query: str, key: str, item: str) -> str:
    """Add ``item`` to a list directive, or remove it if already there.

    Membership is case-insensitive.
    """
    items = get_list(query, key)
    present = any(existing.lower() == item.lower() for existing in items)
    if present:
        items = [existing for existing in items if existing.lower() != item.lower()]
    else:
        items.append(item)
    return set_list(query, key, items)
