# src/taskdesk/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..notes.note_store import NoteStore
from ..pomodoro.engine import PomodoroEngine
from ..tasks.task_store import TaskStore
from .ports import Clock, SystemClock


@dataclass
class AppState:
    """
    Everything a command handler may touch.

    Built once by cli.bootstrap.create_initial_state() and passed explicitly;
    there are no module-level stores.
    """

    # Settings object (taskdesk.config.Settings or a test stand-in).
    settings: Any

    tasks: TaskStore
    notes: NoteStore
    pomodoro: PomodoroEngine

    # SnapshotRepo; None means the session is not persisted.
    repo: Any = None
    clock: Clock = field(default_factory=SystemClock)
    dirty: bool = False
