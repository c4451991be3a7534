"""Emoji markers used by the checklist line format."""

from .models import TaskPriority, TaskStatus

HIGH_PRIORITY = "\u23eb"  # ⏫
MEDIUM_PRIORITY = "\U0001f53c"  # 🔼

DUE = "\U0001f4c5"  # 📅
START = "\U0001f6eb"  # 🛫
SCHEDULED = "\u23f3"  # ⏳
DONE = "\u2705"  # ✅
CANCELLED = "\u274c"  # ❌

DEPENDENCY = "\u26d4"  # ⛔
RECURRENCE = "\U0001f501"  # 🔁

PRIORITY_MARKERS: dict[TaskPriority, str] = {
    TaskPriority.high: HIGH_PRIORITY,
    TaskPriority.medium: MEDIUM_PRIORITY,
}

# Marker -> TaskDates attribute
DATE_MARKERS: dict[str, str] = {
    DUE: "due",
    START: "start",
    SCHEDULED: "scheduled",
    DONE: "done",
    CANCELLED: "cancelled",
}

# Characters that end a recurrence rule
RULE_TERMINATORS = (
    "#"
    + DEPENDENCY
    + "".join(DATE_MARKERS)
    + HIGH_PRIORITY
    + MEDIUM_PRIORITY
    + RECURRENCE
)

STATUS_MARKS: dict[str, TaskStatus] = {
    " ": TaskStatus.todo,
    "/": TaskStatus.in_progress,
    "x": TaskStatus.done,
    "X": TaskStatus.done,
    "-": TaskStatus.cancelled,
}

# Mark written by the formatter for each status
STATUS_CHARS: dict[TaskStatus, str] = {
    TaskStatus.todo: " ",
    TaskStatus.in_progress: "/",
    TaskStatus.done: "x",
    TaskStatus.cancelled: "-",
}
