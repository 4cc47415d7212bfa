# src/taskdesk/tasks/task_models.py

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import IntEnum, StrEnum


class Priority(IntEnum):
    """Task priority; the integer value is the persisted ordinal and the sort key."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_db(cls, raw: object) -> Priority:
        if isinstance(raw, str):
            try:
                return cls[raw.strip().upper()]
            except KeyError:
                return cls.MEDIUM
        try:
            return cls(int(raw))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return cls.MEDIUM


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Declaration order is the persisted ordinal (Pending=0 ... Cancelled=3).
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return {
            TaskStatus.PENDING: "Pending",
            TaskStatus.IN_PROGRESS: "InProgress",
            TaskStatus.COMPLETED: "Completed",
            TaskStatus.CANCELLED: "Cancelled",
        }[self]

    @property
    def ordinal(self) -> int:
        return list(TaskStatus).index(self)

    @classmethod
    def from_ordinal(cls, n: int) -> TaskStatus | None:
        members = list(cls)
        if 0 <= n < len(members):
            return members[n]
        return None

    @classmethod
    def from_db(cls, raw: object) -> TaskStatus:
        if isinstance(raw, int) and not isinstance(raw, bool):
            return cls.from_ordinal(raw) or cls.PENDING
        if isinstance(raw, str):
            value = raw.strip().lower()
            if value == "inprogress":
                return cls.IN_PROGRESS
            try:
                return cls(value)
            except ValueError:
                return cls.PENDING
        return cls.PENDING


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)
    due_at: datetime | None = None
    estimated: timedelta | None = None
    actual: timedelta = field(default_factory=timedelta)
    progress: int = 0
    tags: list[str] = field(default_factory=list)


def status_for_progress(progress: int, current: TaskStatus) -> TaskStatus:
    """
    Status implied by a progress update.

    100 -> Completed, 1..99 -> InProgress, 0 leaves the status untouched.
    """
    if progress == 100:
        return TaskStatus.COMPLETED
    if progress > 0:
        return TaskStatus.IN_PROGRESS
    return current


def list_sort_key(task: Task) -> tuple[int, bool, datetime]:
    """
    Listing order: priority ordinal ascending (Low first), then due date
    ascending with undated tasks last. Python's stable sort keeps
    insertion order for ties.
    """
    return (int(task.priority), task.due_at is None, task.due_at or datetime.min)


def days_until_due(task: Task, now: datetime) -> int | None:
    """Whole days until due, truncated toward zero; negative when overdue."""
    if task.due_at is None:
        return None
    return math.trunc((task.due_at - now) / timedelta(days=1))


def matches_term(term: str, *fields: str, tags: list[str]) -> bool:
    """Case-insensitive substring match over fields and tags; `term` must be lowercase."""
    if any(term in f.lower() for f in fields):
        return True
    return any(term in t.lower() for t in tags)
