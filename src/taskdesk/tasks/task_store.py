# src/taskdesk/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

from ..core.errors import InvalidRangeError
from .task_models import (
    Priority,
    Task,
    TaskStatus,
    list_sort_key,
    matches_term,
    status_for_progress,
)

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory task store.

    Owns the task collection and the id counter. Ids are assigned
    monotonically and never reused, even after a delete.

    Lookup misses return None (delete returns False); range violations raise
    InvalidRangeError before anything is mutated.
    """

    def __init__(self, *, now: Callable[[], datetime] = datetime.now) -> None:
        self._tasks: list[Task] = []
        self._next_id = 1
        self._now = now

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def next_id(self) -> int:
        return self._next_id

    def restore(self, tasks: Iterable[Task], next_id: int = 1) -> None:
        """Replace the collection (used after loading a snapshot)."""
        self._tasks = list(tasks)
        max_id = max((t.id for t in self._tasks), default=0)
        self._next_id = max(int(next_id), max_id + 1, 1)
        logger.info("TaskStore restored total=%s next_id=%s", len(self._tasks), self._next_id)

    # ---- mutations ----

    def add(
        self,
        title: str,
        description: str = "",
        priority: Priority = Priority.MEDIUM,
        *,
        due_at: datetime | None = None,
        estimated: timedelta | None = None,
        tags: Iterable[str] | None = None,
    ) -> Task:
        task = Task(
            id=self._next_id,
            title=title,
            description=description,
            priority=priority,
            created_at=self._now(),
            due_at=due_at,
            estimated=estimated,
            tags=list(tags or []),
        )
        self._next_id += 1
        self._tasks.append(task)
        logger.debug("Task added id=%s priority=%s due_at=%s", task.id, priority.label, due_at)
        return task

    def update_progress(self, task_id: int, progress: int) -> Task | None:
        if not 0 <= progress <= 100:
            raise InvalidRangeError(f"Progress must be between 0 and 100, got {progress}.")
        task = self.get(task_id)
        if task is None:
            return None
        task.progress = progress
        task.status = status_for_progress(progress, task.status)
        logger.debug("Task progress id=%s progress=%s status=%s", task_id, progress, task.status)
        return task

    def mark_complete(self, task_id: int) -> Task | None:
        # Not routed through status_for_progress: always Completed at 100%.
        task = self.get(task_id)
        if task is None:
            return None
        task.status = TaskStatus.COMPLETED
        task.progress = 100
        logger.debug("Task completed id=%s", task_id)
        return task

    def set_status(self, task_id: int, status: TaskStatus) -> Task | None:
        """Set status without touching progress (e.g. Cancelled)."""
        task = self.get(task_id)
        if task is None:
            return None
        task.status = status
        logger.debug("Task status id=%s status=%s", task_id, status)
        return task

    def delete(self, task_id: int) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        self._tasks.remove(task)
        logger.debug("Task deleted id=%s", task_id)
        return True

    def start_session(self, task_id: int) -> Task | None:
        """Mark the task InProgress as a tracked session begins."""
        return self.set_status(task_id, TaskStatus.IN_PROGRESS)

    def record_elapsed(self, task_id: int, elapsed: timedelta) -> Task | None:
        if elapsed < timedelta(0):
            raise InvalidRangeError(f"Elapsed time cannot be negative, got {elapsed}.")
        task = self.get(task_id)
        if task is None:
            return None
        task.status = TaskStatus.IN_PROGRESS
        task.actual += elapsed
        logger.debug("Task time id=%s +%s total=%s", task_id, elapsed, task.actual)
        return task

    # ---- queries ----

    def get(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def all(self) -> list[Task]:
        """Tasks in insertion order."""
        return list(self._tasks)

    def list_tasks(self) -> list[Task]:
        return sorted(self._tasks, key=list_sort_key)

    def search(self, term: str) -> list[Task]:
        if not term or not term.strip():
            return []
        needle = term.lower()
        return [
            t
            for t in self._tasks
            if matches_term(needle, t.title, t.description, tags=t.tags)
        ]

    def filter_by_status(self, status: TaskStatus) -> list[Task]:
        return [t for t in self._tasks if t.status == status]

    def filter_by_priority(self, priority: Priority) -> list[Task]:
        return [t for t in self._tasks if t.priority == priority]

    def filter_due_within(self, days: int = 7) -> list[Task]:
        """
        Tasks due between today and today + `days`, compared by calendar date
        (time of day is ignored for both bounds).
        """
        today = self._now().date()
        horizon = today + timedelta(days=days)
        return [
            t
            for t in self._tasks
            if t.due_at is not None and today <= t.due_at.date() <= horizon
        ]
