"""taskdown CLI for checklist tasks kept in markdown notes.

Subcommands:
    parse       — Show how a single line is parsed
    query       — Filter/sort/limit the tasks found in notes
    stats       — Summarize the tasks found in notes
    tags        — List every tag used in notes
    set-status  — Change a task's status and rewrite its line
    add         — Append a new task to a note
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import NoReturn

import typer

from taskdown.config import Settings, SettingsError, SettingsStore
from taskdown.logging_setup import setup_logging
from taskdown.query.engine import apply_query
from taskdown.query.parser import parse_query
from taskdown.query.stats import all_tags, task_stats
from taskdown.sources.detect import detect_source
from taskdown.sources.markdown import MarkdownNoteSource
from taskdown.sources.protocol import NoteSource
from taskdown.sources.text import TextNoteSource
from taskdown.tasks.codec import TaskCodec
from taskdown.tasks.lifecycle import new_task, set_status
from taskdown.tasks.models import TagStyle, Task, TaskDates, TaskPriority, TaskStatus

app = typer.Typer(name="taskdown", no_args_is_help=True)


class Verbosity(StrEnum):
    quiet = "quiet"
    normal = "normal"
    verbose = "verbose"


_LOG_LEVELS: dict[Verbosity, int] = {
    Verbosity.quiet: logging.ERROR,
    Verbosity.normal: logging.WARNING,
    Verbosity.verbose: logging.DEBUG,
}


@dataclass
class CliState:
    settings: Settings
    codec: TaskCodec


def resolve_verbosity(verbose: bool, quiet: bool) -> Verbosity:
    """Map the --verbose/--quiet flags to a Verbosity."""
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet are mutually exclusive")
    if verbose:
        return Verbosity.verbose
    if quiet:
        return Verbosity.quiet
    return Verbosity.normal


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1) from exc


def _open_source(location: str | None, settings: Settings) -> NoteSource:
    location = location or settings.notes_path
    if not location:
        raise typer.BadParameter("no notes location given and none configured")
    try:
        return detect_source(location)
    except (OSError, ValueError) as exc:
        _fail(exc)


def _load_tasks(source: NoteSource, codec: TaskCodec) -> list[Task]:
    try:
        return source.get_tasks(codec)
    except (OSError, ValueError) as exc:
        _fail(exc)


def _echo_tasks(tasks: list[Task], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([t.to_dict() for t in tasks], indent=2, ensure_ascii=False))
        return
    if not tasks:
        typer.echo("No tasks found.")
        return
    for task in tasks:
        location = f"{task.path}: " if task.path else ""
        typer.echo(f"{location}{task.source_text.strip()}  [{task.id}]")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors."),
    tag_style: TagStyle | None = typer.Option(
        None, help="Tag delimiters used by the notes (overrides settings)."
    ),
    config: Path | None = typer.Option(None, help="Path to a settings JSON file."),
) -> None:
    """Parse, query and update checklist tasks kept in markdown notes."""
    setup_logging(_LOG_LEVELS[resolve_verbosity(verbose, quiet)])
    try:
        settings = SettingsStore(config).load()
    except (SettingsError, OSError) as exc:
        _fail(exc)
    if tag_style is not None:
        settings.tag_style = tag_style
    ctx.obj = CliState(settings=settings, codec=settings.codec())


@app.command()
def parse(
    ctx: typer.Context,
    line: str = typer.Argument(..., help="A checklist line, e.g. '- [ ] Buy milk'."),
    task_id: str = typer.Option("cli", "--id", help="Id to give the parsed task."),
) -> None:
    """Print the task parsed from LINE as JSON."""
    task = _state(ctx).codec.parse(line, task_id)
    if task is None:
        typer.echo("Error: not a checklist item", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(task.to_dict(), indent=2, ensure_ascii=False))


@app.command()
def query(
    ctx: typer.Context,
    location: str | None = typer.Argument(
        None, help="Note file, notes directory, or '-' for stdin."
    ),
    query_text: str | None = typer.Option(
        None,
        "--query",
        "-Q",
        help=(
            "Query string. Newlines separate directives; a single-line query "
            "is split on whitespace, so values containing spaces need the "
            "multi-line form."
        ),
    ),
    as_json: bool = typer.Option(False, "--json", help="Print tasks as JSON."),
) -> None:
    """List the tasks in LOCATION that match a query."""
    state = _state(ctx)
    tasks = _load_tasks(_open_source(location, state.settings), state.codec)
    text = query_text if query_text is not None else state.settings.default_query
    _echo_tasks(apply_query(tasks, parse_query(text)), as_json)


@app.command()
def stats(
    ctx: typer.Context,
    location: str | None = typer.Argument(
        None, help="Note file, notes directory, or '-' for stdin."
    ),
    query_text: str | None = typer.Option(
        None, "--query", "-Q", help="Only count tasks matching this query."
    ),
) -> None:
    """Summarize task counts in LOCATION."""
    state = _state(ctx)
    tasks = _load_tasks(_open_source(location, state.settings), state.codec)
    if query_text:
        tasks = apply_query(tasks, parse_query(query_text))
    summary = task_stats(tasks)
    typer.echo(f"Total: {summary.total}")
    typer.echo(f"  todo: {summary.todo}")
    typer.echo(f"  in progress: {summary.in_progress}")
    typer.echo(f"  done: {summary.completed}")
    typer.echo(f"  cancelled: {summary.cancelled}")
    typer.echo(f"Overdue: {summary.overdue}")
    typer.echo(f"Completion: {summary.completion_rate}%")


@app.command()
def tags(
    ctx: typer.Context,
    location: str | None = typer.Argument(
        None, help="Note file, notes directory, or '-' for stdin."
    ),
) -> None:
    """List every tag used by tasks in LOCATION."""
    state = _state(ctx)
    found = all_tags(_load_tasks(_open_source(location, state.settings), state.codec))
    if not found:
        typer.echo("No tags found.")
        return
    for tag in found:
        typer.echo(tag)


@app.command(name="set-status")
def set_status_cmd(
    ctx: typer.Context,
    location: str = typer.Argument(..., help="Note file, notes directory, or '-'."),
    task_id: str = typer.Argument(..., help="Id shown by 'taskdown query'."),
    status: TaskStatus = typer.Argument(..., help="New status."),
) -> None:
    """Change a task's status and write the re-rendered line back."""
    state = _state(ctx)
    source = _open_source(location, state.settings)
    task = next(
        (t for t in _load_tasks(source, state.codec) if t.id == task_id), None
    )
    if task is None:
        typer.echo(f"Error: task '{task_id}' not found", err=True)
        raise typer.Exit(code=1)

    updated = set_status(task, status, codec=state.codec)
    try:
        source.save_task(updated, state.codec)
    except (OSError, ValueError) as exc:
        _fail(exc)
    if isinstance(source, TextNoteSource):
        typer.echo(source.text, nl=False)
    else:
        typer.echo(updated.source_text)


@app.command()
def add(
    ctx: typer.Context,
    note: Path = typer.Argument(..., help="Note file to append to."),
    description: str = typer.Argument(..., help="Task description."),
    priority: TaskPriority = typer.Option(TaskPriority.low, help="Task priority."),
    due: datetime | None = typer.Option(
        None, formats=["%Y-%m-%d"], help="Due date (YYYY-MM-DD)."
    ),
    tag: list[str] | None = typer.Option(None, help="Tag (repeatable)."),
) -> None:
    """Append a new task to NOTE."""
    state = _state(ctx)
    task = new_task(
        description,
        priority=priority,
        dates=TaskDates(due=due.date().isoformat() if due else None),
        tags=tag or [],
        codec=state.codec,
    )
    try:
        if not note.exists():
            note.parent.mkdir(parents=True, exist_ok=True)
            note.touch()
        record = MarkdownNoteSource(note).append_line(task.source_text)
    except (OSError, ValueError) as exc:
        _fail(exc)
    typer.echo(f"Added [{record.id}]: {record.markdown}")


if __name__ == "__main__":
    app()
