# src/taskdesk/stats/statistics.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..notes.note_store import NoteStore
from ..pomodoro.engine import PomodoroEngine
from ..tasks.task_models import Priority, Task, TaskStatus
from ..tasks.task_store import TaskStore


@dataclass(slots=True, frozen=True)
class StatisticsSnapshot:
    total_tasks: int
    by_status: dict[TaskStatus, int]
    by_priority: dict[Priority, int]
    overdue: int
    completion_rate: float
    total_time: timedelta
    average_time: timedelta
    upcoming: list[Task]
    pomodoro_sessions: int
    note_count: int
    note_chars: int

    @property
    def completed(self) -> int:
        return self.by_status[TaskStatus.COMPLETED]

    @property
    def completion_percent(self) -> int:
        if not self.total_tasks:
            return 0
        return self.completed * 100 // self.total_tasks


def compute_statistics(
    tasks: TaskStore,
    notes: NoteStore,
    pomodoro: PomodoroEngine,
    *,
    now: datetime | None = None,
    upcoming_limit: int = 5,
) -> StatisticsSnapshot:
    """Summary metrics over the current stores. Read-only, nothing cached."""
    if now is None:
        now = datetime.now()
    items = tasks.all()
    total = len(items)

    by_status = {s: 0 for s in TaskStatus}
    by_priority = {p: 0 for p in Priority}
    for t in items:
        by_status[t.status] += 1
        by_priority[t.priority] += 1

    overdue = sum(
        1
        for t in items
        if t.due_at is not None and t.due_at < now and t.status != TaskStatus.COMPLETED
    )

    total_time = sum((t.actual for t in items), timedelta())
    average_time = total_time / total if total else timedelta()

    upcoming = sorted(
        (
            t
            for t in items
            if t.due_at is not None and t.due_at > now and t.status != TaskStatus.COMPLETED
        ),
        key=lambda t: t.due_at,  # type: ignore[arg-type, return-value]
    )[:upcoming_limit]

    note_items = notes.all()
    return StatisticsSnapshot(
        total_tasks=total,
        by_status=by_status,
        by_priority=by_priority,
        overdue=overdue,
        completion_rate=by_status[TaskStatus.COMPLETED] / total if total else 0.0,
        total_time=total_time,
        average_time=average_time,
        upcoming=upcoming,
        pomodoro_sessions=pomodoro.config.completed_work_sessions,
        note_count=len(note_items),
        note_chars=sum(len(n.content) for n in note_items),
    )
