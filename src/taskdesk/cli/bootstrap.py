# src/taskdesk/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the stores and the Pomodoro engine into AppState,
- moves state in and out of the JSON snapshot.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..config import get_settings
from ..core.ports import Clock, SystemClock
from ..core.state import AppState
from ..notes.note_store import NoteStore
from ..pomodoro.engine import PomodoroEngine
from ..storage.snapshot import Snapshot, SnapshotRepo
from ..tasks.task_models import TaskStatus
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.data_file.parent.mkdir(parents=True, exist_ok=True)


def apply_snapshot(state: AppState, snapshot: Snapshot | None) -> None:
    """Replace in-memory state with `snapshot` (None means empty state)."""
    if snapshot is None:
        snapshot = Snapshot()
    state.tasks.restore(snapshot.tasks, snapshot.next_task_id)
    state.notes.restore(snapshot.notes, snapshot.next_note_id)
    state.pomodoro.config = snapshot.pomodoro
    state.pomodoro.reset_cycle()
    state.dirty = False


def take_snapshot(state: AppState) -> Snapshot:
    return Snapshot(
        tasks=state.tasks.all(),
        notes=state.notes.all(),
        pomodoro=state.pomodoro.config,
        next_task_id=state.tasks.next_id,
        next_note_id=state.notes.next_id,
        last_saved=state.clock.now(),
    )


def create_initial_state(*, settings=None, clock: Clock | None = None) -> AppState:
    """
    Create AppState from the provided settings and load the saved snapshot.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    if clock is None:
        clock = SystemClock()

    _ensure_local_dirs(settings)

    state = AppState(
        settings=settings,
        tasks=TaskStore(now=clock.now),
        notes=NoteStore(now=clock.now),
        pomodoro=PomodoroEngine(count_skipped_work=bool(getattr(settings, "count_skipped_work", True))),
        repo=SnapshotRepo(settings.data_file),
        clock=clock,
    )
    load_state(state)
    logger.info("State ready tasks=%s notes=%s data=%s", len(state.tasks), len(state.notes), settings.data_file)
    return state


def load_state(state: AppState) -> bool:
    """Reload from disk. Returns False (and leaves an empty state) when nothing was loaded."""
    if state.repo is None:
        return False
    snapshot = state.repo.load()
    apply_snapshot(state, snapshot)
    return snapshot is not None


def save_state(state: AppState) -> bool:
    if state.repo is None:
        return False
    ok = state.repo.save(take_snapshot(state))
    if ok:
        state.dirty = False
    return ok


def pending_count(state: AppState) -> int:
    return sum(1 for t in state.tasks.all() if t.status != TaskStatus.COMPLETED)


def welcome_text(state: AppState, now: datetime | None = None) -> str:
    now = now or state.clock.now()
    return (
        f"Welcome! Today is {now:%A, %B %d, %Y}\n"
        f"You have {pending_count(state)} pending tasks."
    )
