# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdesk.core.state import AppState
from taskdesk.notes.note_store import NoteStore
from taskdesk.pomodoro.engine import PomodoroEngine
from taskdesk.storage.snapshot import SnapshotRepo
from taskdesk.tasks.task_store import TaskStore

from .fakes import VirtualClock

NOW = datetime(2024, 1, 10, 9, 0, 0)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the command layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the process environment.
    """
    return SimpleNamespace(
        app_name="taskdesk-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        data_file=tmp_path / "taskmanager_data.json",
        export_dir=tmp_path / "exports",
        tick_seconds=1.0,
        count_skipped_work=True,
        note_preview_chars=100,
        due_soon_days=7,
        upcoming_limit=5,
    )


@pytest.fixture()
def clock() -> VirtualClock:
    return VirtualClock(NOW)


@pytest.fixture()
def task_store(clock: VirtualClock) -> TaskStore:
    return TaskStore(now=clock.now)


@pytest.fixture()
def note_store(clock: VirtualClock) -> NoteStore:
    return NoteStore(now=clock.now)


@pytest.fixture()
def state(settings: SimpleNamespace, clock: VirtualClock) -> AppState:
    """AppState wired with a virtual clock and a real JSON repo in tmp_path."""
    return AppState(
        settings=settings,
        tasks=TaskStore(now=clock.now),
        notes=NoteStore(now=clock.now),
        pomodoro=PomodoroEngine(),
        repo=SnapshotRepo(settings.data_file),
        clock=clock,
    )
