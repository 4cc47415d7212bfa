# src/taskdesk/cli/views.py

"""Plain-text renderers used by the command handlers."""

from __future__ import annotations

from datetime import datetime, timedelta

from ..notes.note_models import Note, preview
from ..pomodoro.engine import PomodoroConfig
from ..stats.statistics import StatisticsSnapshot
from ..tasks.task_models import Priority, Task, TaskStatus, days_until_due

BAR_LENGTH = 20


def progress_bar(progress: int) -> str:
    progress = max(0, min(100, progress))
    filled = BAR_LENGTH * progress // 100
    return f"[{'█' * filled}{'░' * (BAR_LENGTH - filled)}] {progress}%"


def clock_span(span: timedelta) -> str:
    """hh:mm:ss (hours may exceed 24)."""
    total = max(0, int(span.total_seconds()))
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def mm_ss(span: timedelta) -> str:
    total = max(0, int(round(span.total_seconds())))
    return f"{total // 60:02d}:{total % 60:02d}"


def render_task(task: Task, now: datetime) -> str:
    lines = [f"[{task.id}] {task.title} ({task.status.label})"]
    if task.description:
        lines.append(f"    Description: {task.description}")
    lines.append(f"    Priority: {task.priority.label} | Progress: {progress_bar(task.progress)}")

    days = days_until_due(task, now)
    if task.due_at is not None and days is not None:
        due = f"    Due: {task.due_at:%Y-%m-%d}"
        if days < 0:
            due += f" (OVERDUE by {abs(days)} days)"
        else:
            due += f" (Due in {days} days)"
        lines.append(due)

    if task.estimated is not None:
        lines.append(f"    Estimated: {task.estimated / timedelta(hours=1):.1f} h")
    if task.tags:
        lines.append(f"    Tags: {', '.join(task.tags)}")
    if task.actual >= timedelta(minutes=1):
        lines.append(f"    Time spent: {clock_span(task.actual)}")
    return "\n".join(lines)


def render_tasks(tasks: list[Task], now: datetime, *, empty: str) -> str:
    if not tasks:
        return empty
    return "\n\n".join(render_task(t, now) for t in tasks)


def render_note(note: Note, *, preview_chars: int | None = 100) -> str:
    lines = [f"[{note.id}] {note.title}", f"Created: {note.created_at:%Y-%m-%d %H:%M}"]
    if note.modified_at is not None:
        lines.append(f"Modified: {note.modified_at:%Y-%m-%d %H:%M}")
    if note.tags:
        lines.append(f"Tags: {', '.join(note.tags)}")
    if preview_chars is None:
        lines.extend(["", note.content])
    else:
        lines.append(f"Preview: {preview(note, preview_chars)}")
    return "\n".join(lines)


def render_pomodoro_config(cfg: PomodoroConfig) -> str:
    return (
        f"Work: {cfg.work_minutes} min | Short Break: {cfg.short_break_minutes} min | "
        f"Long Break: {cfg.long_break_minutes} min | Long break every {cfg.sessions_until_long_break} sessions\n"
        f"Sessions completed: {cfg.completed_work_sessions}"
    )


def render_statistics(stats: StatisticsSnapshot, now: datetime) -> str:
    lines = [
        "TASK OVERVIEW",
        f"Total Tasks: {stats.total_tasks}",
        f"Completed: {stats.completed} ({stats.completion_percent}%)",
        f"In Progress: {stats.by_status[TaskStatus.IN_PROGRESS]}",
        f"Pending: {stats.by_status[TaskStatus.PENDING]}",
        f"Cancelled: {stats.by_status[TaskStatus.CANCELLED]}",
        f"Overdue: {stats.overdue}",
    ]
    if stats.total_tasks:
        lines.append(f"Completion Rate: {progress_bar(stats.completion_percent)}")

    lines.extend(["", "PRIORITY DISTRIBUTION"])
    lines.extend(f"{p.label}: {stats.by_priority[p]} tasks" for p in Priority)

    hours = stats.total_time / timedelta(hours=1)
    avg = stats.average_time / timedelta(hours=1)
    lines.extend(
        [
            "",
            "TIME TRACKING",
            f"Total time logged: {hours:.1f} hours",
            f"Average time per task: {avg:.1f} hours",
            f"Pomodoro sessions completed: {stats.pomodoro_sessions}",
        ]
    )

    if stats.upcoming:
        lines.extend(["", f"UPCOMING TASKS (Next {len(stats.upcoming)})"])
        for t in stats.upcoming:
            lines.append(f"- {t.title} - Due in {days_until_due(t, now)} day(s)")

    lines.extend(
        [
            "",
            "NOTES",
            f"Total Notes: {stats.note_count}",
            f"Total Characters: {stats.note_chars:,}",
        ]
    )
    return "\n".join(lines)
