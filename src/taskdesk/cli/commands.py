# src/taskdesk/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import timedelta
from typing import cast

from ..core.errors import NotFoundError, ParseError, TaskdeskError
from ..core.parsing import (
    parse_date,
    parse_hours,
    parse_int,
    parse_priority,
    parse_status,
    parse_tags,
)
from ..core.ports import Console
from ..core.state import AppState
from ..notes.note_models import preview
from ..pomodoro.engine import Phase
from ..stats.statistics import compute_statistics
from ..storage.exporters import ExportKind, export
from ..tasks.task_models import Priority, Task, TaskStatus
from ..timers.loops import (
    CountdownOutcome,
    CountdownResult,
    run_countdown,
    run_pomodoro,
    run_stopwatch,
    track_task_time,
)
from . import views
from .bootstrap import load_state, save_state

CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], Console | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

NOTE_END_MARKER = "END"
# Open-ended timers stop only on a key press, which needs a real terminal.
NEEDS_TERMINAL = "{what} needs an interactive terminal to read the stop key."


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /task, ...)."""

    def __init__(self) -> None:
        self._routes: dict[str, CommandHandler] = {}
        # canonical name -> (help text, aliases)
        self._docs: dict[str, tuple[str, tuple[str, ...]]] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        names = [name.lower(), *(a.lower() for a in aliases or ())]
        for n in names:
            self._routes[n] = handler
        self._docs[names[0]] = (help_text, tuple(names[1:]))

    def handle(self, state: AppState, line: str, console: Console | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._routes.get(name)
        if handler is None:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, console)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskdeskError as e:
            logger.info("Command /%s failed kind=%s: %s", name, e.kind, e)
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, (help_text, aliases) in self._docs.items():
            also = f" (also: {', '.join('/' + a for a in aliases)})" if aliases else ""
            lines.append(f"  /{name} - {help_text}{also}")
        lines.append("  /exit - Save and quit.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def _split_fields(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate free words from key=value tokens."""
    words: list[str] = []
    fields: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key and key.isidentifier():
            fields[key.lower()] = value
        else:
            words.append(a)
    return words, fields


def _arg_id(args: list[str], index: int = 0) -> int | None:
    return parse_int(args[index]) if len(args) > index else None


def _require_task(state: AppState, task_id: int | None) -> Task:
    task = state.tasks.get(task_id) if task_id is not None else None
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


def _ask(console: Console | None, prompt: str) -> str:
    if console is None:
        return ""
    return console.read_line(prompt) or ""


def _confirm(console: Console | None, question: str) -> bool:
    return _ask(console, f"{question} (y/n): ").strip().lower() == "y"


def _read_block(console: Console | None) -> str:
    """Read lines until a line equal to END (or EOF)."""
    if console is None:
        return ""
    lines: list[str] = []
    while True:
        line = console.read_line("")
        if line is None or line == NOTE_END_MARKER:
            break
        lines.append(line)
    return "\n".join(lines)


def _now(state: AppState):
    return state.clock.now()


def _tick_seconds(state: AppState) -> float:
    return float(getattr(state.settings, "tick_seconds", 1.0))


# ---- /task ----

TASK_USAGE = (
    "Task commands:\n"
    "  /task add <title> [desc=..] [priority=1-4|low..critical] [due=YYYY-MM-DD] [est=hours] [tags=a,b]\n"
    "  /task list | view <id> | progress <id> <0-100> | done <id> | cancel <id> | delete <id>\n"
    "  /task search <term> | filter status <s> | filter priority <p> | filter due [days]\n"
    "  /task track <id>   (press q to stop)"
)


def _task_add(state: AppState, args: list[str], console: Console | None) -> str:
    words, fields = _split_fields(args)
    title = " ".join(words)

    interactive = not title and not fields and console is not None
    if interactive:
        title = _ask(console, "Task Title: ")
        fields["desc"] = _ask(console, "Description (optional): ")
        fields["priority"] = _ask(console, "Priority (1=Low, 2=Medium, 3=High, 4=Critical): ")
        fields["due"] = _ask(console, "Due Date (yyyy-mm-dd, or press Enter to skip): ")
        fields["est"] = _ask(console, "Estimated time in hours (or press Enter to skip): ")
        fields["tags"] = _ask(console, "Tags (comma-separated, optional): ")

    # Malformed values are ignored; the field keeps its default.
    task = state.tasks.add(
        title,
        fields.get("desc", fields.get("description", "")),
        parse_priority(fields.get("priority")) or Priority.MEDIUM,
        due_at=parse_date(fields.get("due")),
        estimated=parse_hours(fields.get("est", fields.get("estimate"))),
        tags=parse_tags(fields.get("tags")),
    )
    state.dirty = True
    return f"Task '{task.title}' added with id {task.id}."


def _task_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /task filter status <s> | priority <p> | due [days]"
    kind = args[0].lower()
    value = args[1] if len(args) > 1 else None
    now = _now(state)

    if kind == "status":
        status = parse_status(value)
        if status is None:
            return "Status: 1=Pending, 2=InProgress, 3=Completed, 4=Cancelled"
        found = state.tasks.filter_by_status(status)
    elif kind == "priority":
        priority = parse_priority(value)
        if priority is None:
            return "Priority: 1=Low, 2=Medium, 3=High, 4=Critical"
        found = state.tasks.filter_by_priority(priority)
    elif kind == "due":
        days = parse_int(value)
        if days is None or days < 0:
            days = int(getattr(state.settings, "due_soon_days", 7))
        found = state.tasks.filter_due_within(days)
    else:
        return "Usage: /task filter status <s> | priority <p> | due [days]"

    return "FILTERED TASKS\n\n" + views.render_tasks(found, now, empty="No matching tasks found.")


def _task_track(state: AppState, task_id: int | None, console: Console | None) -> str:
    task = _require_task(state, task_id)
    if console is None or not console.interactive:
        return NEEDS_TERMINAL.format(what="Task timer")

    console.emit(f"TIMER: {task.title}\nPress 'q' to quit timer")
    try:
        with console.key_session() as keys:
            session = track_task_time(
                state.tasks,
                task.id,
                state.clock,
                keys,
                on_tick=lambda e: console.redraw(f"Time: {views.clock_span(e)}"),
                tick_seconds=_tick_seconds(state),
            )
    finally:
        state.dirty = True
    return (
        f"Timer stopped. Total time for this session: {views.clock_span(session or timedelta())}\n"
        f"Total time on task: {views.clock_span(task.actual)}"
    )


def cmd_task(state: AppState, args: list[str], console: Console | None = None) -> str:
    if not args:
        return TASK_USAGE

    sub = args[0].lower()
    rest = args[1:]
    now = _now(state)

    if sub in ("add", "new"):
        return _task_add(state, rest, console)

    if sub in ("list", "ls"):
        return views.render_tasks(
            state.tasks.list_tasks(), now, empty="No tasks found. Add some tasks to get started!"
        )

    if sub in ("view", "show"):
        return views.render_task(_require_task(state, _arg_id(rest)), now)

    if sub == "progress":
        task = _require_task(state, _arg_id(rest))
        progress = _arg_id(rest, 1)
        if progress is None:
            progress = parse_int(_ask(console, f"New progress (0-100, current: {task.progress}): "))
        if progress is None:
            raise ParseError("Progress must be a number between 0 and 100.")
        state.tasks.update_progress(task.id, progress)
        state.dirty = True
        return f"Task updated: {task.title} {views.progress_bar(task.progress)} ({task.status.label})"

    if sub in ("done", "complete"):
        task = _require_task(state, _arg_id(rest))
        state.tasks.mark_complete(task.id)
        state.dirty = True
        return f"Task '{task.title}' marked as completed!"

    if sub == "cancel":
        task = _require_task(state, _arg_id(rest))
        state.tasks.set_status(task.id, TaskStatus.CANCELLED)
        state.dirty = True
        return f"Task '{task.title}' cancelled."

    if sub in ("delete", "rm"):
        task = _require_task(state, _arg_id(rest))
        if not _confirm(console, f"Are you sure you want to delete '{task.title}'?"):
            return "Delete cancelled."
        state.tasks.delete(task.id)
        state.dirty = True
        return "Task deleted successfully!"

    if sub in ("search", "find"):
        term = " ".join(rest)
        if not term.strip():
            return "Usage: /task search <term>"
        found = state.tasks.search(term)
        return f"SEARCH RESULTS for '{term}'\n\n" + views.render_tasks(
            found, now, empty="No matching tasks found."
        )

    if sub == "filter":
        return _task_filter(state, rest)

    if sub in ("track", "timer"):
        return _task_track(state, _arg_id(rest), console)

    return TASK_USAGE


# ---- /note ----

NOTE_USAGE = (
    "Note commands:\n"
    "  /note add <title> [tags=a,b]   (content follows, finish with a line 'END')\n"
    "  /note list | view <id> | edit <id> | search <term> | delete <id>"
)


def cmd_note(state: AppState, args: list[str], console: Console | None = None) -> str:
    if not args:
        return NOTE_USAGE

    sub = args[0].lower()
    rest = args[1:]
    preview_chars = int(getattr(state.settings, "note_preview_chars", 100))

    def require(note_id: int | None):
        note = state.notes.get(note_id) if note_id is not None else None
        if note is None:
            raise NotFoundError("Note", note_id)
        return note

    if sub in ("add", "new"):
        words, fields = _split_fields(rest)
        title = " ".join(words) or _ask(console, "Note Title: ")
        if console is not None:
            console.emit(f"Note Content (type '{NOTE_END_MARKER}' on a new line to finish):")
        content = _read_block(console)
        tags_raw = fields.get("tags")
        if tags_raw is None and not words:
            tags_raw = _ask(console, "Tags (comma-separated, optional): ")
        note = state.notes.add(title, content, parse_tags(tags_raw))
        state.dirty = True
        return f"Note '{note.title}' added with id {note.id}."

    if sub in ("list", "ls"):
        notes = state.notes.list_notes()
        if not notes:
            return "No notes found. Add some notes to get started!"
        sep = "\n" + "-" * 50 + "\n"
        return sep.join(views.render_note(n, preview_chars=preview_chars) for n in notes)

    if sub in ("view", "show"):
        return views.render_note(require(_arg_id(rest)), preview_chars=None)

    if sub == "edit":
        note = require(_arg_id(rest))
        if console is not None:
            console.emit(f"Editing note: {note.title}\nCurrent content:\n{note.content}")
            console.emit(f"\nNew content (type '{NOTE_END_MARKER}' on a new line to finish):")
        state.notes.edit(note.id, _read_block(console))
        state.dirty = True
        return "Note updated successfully!"

    if sub in ("search", "find"):
        term = " ".join(rest)
        if not term.strip():
            return "Usage: /note search <term>"
        found = state.notes.search(term)
        if not found:
            return "No matching notes found."
        return f"SEARCH RESULTS for '{term}'\n\n" + "\n\n".join(
            f"[{n.id}] {n.title}\nPreview: {preview(n, preview_chars)}" for n in found
        )

    if sub in ("delete", "rm"):
        note = require(_arg_id(rest))
        if not _confirm(console, f"Are you sure you want to delete '{note.title}'?"):
            return "Delete cancelled."
        state.notes.delete(note.id)
        state.dirty = True
        return "Note deleted successfully!"

    return NOTE_USAGE


# ---- /timer ----


def cmd_timer(state: AppState, args: list[str], console: Console | None = None) -> str:
    """
    /timer countdown <minutes>  -> any key stops
    /timer stopwatch            -> any key stops
    """
    if console is None:
        return "Timers need an interactive console."
    sub = args[0].lower() if args else ""

    if sub == "countdown":
        minutes = _arg_id(args, 1)
        if minutes is None or minutes <= 0:
            return "Usage: /timer countdown <minutes>"
        console.emit(f"COUNTDOWN: {minutes} MINUTES\nPress any key to stop")
        with console.key_session() as keys:
            result = run_countdown(
                minutes * 60,
                state.clock,
                keys,
                on_tick=lambda r: console.redraw(f"Time remaining: {views.mm_ss(r)}"),
                tick_seconds=_tick_seconds(state),
            )
        if result.outcome is CountdownOutcome.COMPLETED:
            return "TIME'S UP!"
        return f"Countdown stopped with {views.mm_ss(result.remaining)} remaining."

    if sub == "stopwatch":
        if not console.interactive:
            return NEEDS_TERMINAL.format(what="Stopwatch")
        console.emit("STOPWATCH\nPress any key to stop")
        with console.key_session() as keys:
            elapsed = run_stopwatch(
                state.clock,
                keys,
                on_tick=lambda e: console.redraw(f"Elapsed: {views.clock_span(e)}"),
                tick_seconds=_tick_seconds(state),
            )
        return f"Final time: {views.clock_span(elapsed)}"

    return "Usage: /timer countdown <minutes> | /timer stopwatch"


# ---- /pomodoro ----


def _pomodoro_start(state: AppState, console: Console) -> str:
    engine = state.pomodoro

    def on_phase_start(phase: Phase) -> None:
        console.emit(f"POMODORO: {phase.kind.label} ({phase.minutes} min)\nPress 'q' to quit, 's' to skip session")

    def on_tick(phase: Phase, remaining: timedelta) -> None:
        total = phase.minutes * 60
        done = 100 - int(remaining.total_seconds() * 100 // total) if total else 100
        console.redraw(f"Time remaining: {views.mm_ss(remaining)} {views.progress_bar(done)}")

    def on_phase_end(phase: Phase, result: CountdownResult) -> None:
        word = "SKIPPED" if result.outcome is CountdownOutcome.SKIPPED else "COMPLETE"
        console.emit(f"{phase.kind.label} SESSION {word}!")

    def should_continue(_: Phase) -> bool:
        answer = console.read_line("Press Enter to continue or 'q' to quit... ")
        return answer is not None and answer.strip().lower() != "q"

    with console.key_session() as keys:
        sessions = run_pomodoro(
            engine,
            state.clock,
            keys,
            on_phase_start=on_phase_start,
            on_tick=on_tick,
            on_phase_end=on_phase_end,
            should_continue=should_continue,
            tick_seconds=_tick_seconds(state),
        )
    state.dirty = True
    return (
        f"Pomodoro stopped. Work sessions this run: {sessions}. "
        f"Lifetime: {engine.config.completed_work_sessions}."
    )


def cmd_pomodoro(state: AppState, args: list[str], console: Console | None = None) -> str:
    """
    /pomodoro status
    /pomodoro start
    /pomodoro config [work=25] [short=5] [long=15] [every=4]
    """
    sub = args[0].lower() if args else "status"
    engine = state.pomodoro

    if sub == "status":
        return "POMODORO TECHNIQUE\n" + views.render_pomodoro_config(engine.config)

    if sub == "start":
        if console is None:
            return "Pomodoro needs an interactive console."
        return _pomodoro_start(state, console)

    if sub in ("config", "configure"):
        _, fields = _split_fields(args[1:])
        if not fields and console is not None:
            console.emit("Current settings:\n" + views.render_pomodoro_config(engine.config))
            fields["work"] = _ask(console, "New work session minutes (Enter to keep): ")
            fields["short"] = _ask(console, "New short break minutes (Enter to keep): ")
            fields["long"] = _ask(console, "New long break minutes (Enter to keep): ")
            fields["every"] = _ask(console, "Sessions until long break (Enter to keep): ")
        engine.configure(
            work_minutes=parse_int(fields.get("work")),
            short_break_minutes=parse_int(fields.get("short")),
            long_break_minutes=parse_int(fields.get("long")),
            sessions_until_long_break=parse_int(fields.get("every")),
        )
        state.dirty = True
        return "Pomodoro settings updated!\n" + views.render_pomodoro_config(engine.config)

    return "Usage: /pomodoro status | start | config [work=..] [short=..] [long=..] [every=..]"


# ---- /stats, persistence, export ----


def cmd_stats(state: AppState, args: list[str]) -> str:
    now = _now(state)
    stats = compute_statistics(
        state.tasks,
        state.notes,
        state.pomodoro,
        now=now,
        upcoming_limit=int(getattr(state.settings, "upcoming_limit", 5)),
    )
    return "STATISTICS & REPORTS\n\n" + views.render_statistics(stats, now)


def cmd_save(state: AppState, args: list[str]) -> str:
    if save_state(state):
        return f"Data saved to {state.repo.path}."
    return "Error saving data (see log for details)."


def cmd_load(state: AppState, args: list[str], console: Console | None = None) -> str:
    if state.dirty and not _confirm(console, "Discard unsaved changes and reload from disk?"):
        return "Load cancelled."
    if load_state(state):
        return f"Loaded {len(state.tasks)} tasks and {len(state.notes)} notes."
    return "No saved data found. Starting with fresh data."


def cmd_export(state: AppState, args: list[str]) -> str:
    kind_raw = args[0].lower() if args else ""
    try:
        kind = ExportKind(kind_raw)
    except ValueError:
        return "Usage: /export csv | notes | json"
    export_dir = getattr(state.settings, "export_dir", ".")
    path = export(kind, state, export_dir, _now(state))
    return f"Exported to {path}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("task", cmd_task, help_text="Tasks: add/list/view/progress/done/cancel/delete/search/filter/track.", aliases=["tasks", "t"])
registry.register("note", cmd_note, help_text="Notes: add/list/view/edit/search/delete.", aliases=["notes", "n"])
registry.register("timer", cmd_timer, help_text="Countdown timer or stopwatch: /timer countdown <min> | /timer stopwatch.")
registry.register("pomodoro", cmd_pomodoro, help_text="Pomodoro cycles: /pomodoro start | config | status.", aliases=["pomo"])
registry.register("stats", cmd_stats, help_text="Statistics & reports.")
registry.register("save", cmd_save, help_text="Save all data now.")
registry.register("load", cmd_load, help_text="Reload data from disk.")
registry.register("export", cmd_export, help_text="Export: /export csv | notes | json.")
