# src/taskdesk/storage/snapshot.py

"""
JSON snapshot persistence (the only on-disk state).

Layout (PascalCase keys, compatible with older data files):
    {
      "Tasks": [...], "Notes": [...], "Pomodoro": {...},
      "NextTaskId": 7, "NextNoteId": 3, "LastSaved": "2024-01-01T10:00:00"
    }

Loading is tolerant: missing keys take defaults, malformed records are
skipped, and an unreadable file degrades to "no snapshot".
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from ..core.parsing import to_local_naive
from ..notes.note_models import Note
from ..pomodoro.engine import PomodoroConfig
from ..tasks.task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

_SPAN_RE = re.compile(r"^(-)?(?:(\d+)\.)?(\d+):(\d{1,2}):(\d{1,2})(?:\.(\d+))?$")


@dataclass(slots=True)
class Snapshot:
    tasks: list[Task] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    pomodoro: PomodoroConfig = field(default_factory=PomodoroConfig)
    next_task_id: int = 1
    next_note_id: int = 1
    last_saved: datetime | None = None


# ---- field encoding ----


def format_span(span: timedelta) -> str:
    """[-][d.]hh:mm:ss[.ffffff]"""
    micros = span // timedelta(microseconds=1)
    sign = "-" if micros < 0 else ""
    total, frac = divmod(abs(micros), 1_000_000)
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    prefix = f"{days}." if days else ""
    suffix = f".{frac:06d}" if frac else ""
    return f"{sign}{prefix}{hours:02d}:{minutes:02d}:{seconds:02d}{suffix}"


def parse_span(raw: Any) -> timedelta | None:
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return timedelta(seconds=float(raw))
    if not isinstance(raw, str):
        return None
    m = _SPAN_RE.match(raw.strip())
    if not m:
        return None
    neg, days, hours, minutes, seconds, frac = m.groups()
    span = timedelta(
        days=int(days or 0),
        hours=int(hours),
        minutes=int(minutes),
        seconds=int(seconds),
        microseconds=int((frac or "0")[:6].ljust(6, "0")),
    )
    return -span if neg else span


def _format_dt(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def _parse_dt(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    value = raw.strip()
    # Trim sub-microsecond precision (7-digit fractions) that fromisoformat rejects.
    value = re.sub(r"(\.\d{6})\d+", r"\1", value)
    try:
        return to_local_naive(datetime.fromisoformat(value))
    except ValueError:
        logger.debug("Unparseable timestamp %r", raw)
        return None


def _int(raw: Any, default: int) -> int:
    if isinstance(raw, bool):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _tags(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [str(t) for t in raw if t is not None]


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "Id": task.id,
        "Title": task.title,
        "Description": task.description,
        "Priority": int(task.priority),
        "Status": task.status.ordinal,
        "CreatedDate": _format_dt(task.created_at),
        "DueDate": _format_dt(task.due_at),
        "EstimatedTime": format_span(task.estimated) if task.estimated is not None else None,
        "ActualTime": format_span(task.actual),
        "Progress": task.progress,
        "Tags": list(task.tags),
    }


def task_from_dict(raw: dict[str, Any]) -> Task | None:
    task_id = _int(raw.get("Id"), 0)
    if task_id <= 0:
        return None
    progress = _int(raw.get("Progress"), 0)
    return Task(
        id=task_id,
        title=str(raw.get("Title") or ""),
        description=str(raw.get("Description") or ""),
        priority=Priority.from_db(raw.get("Priority", Priority.MEDIUM)),
        status=TaskStatus.from_db(raw.get("Status")),
        created_at=_parse_dt(raw.get("CreatedDate")) or datetime.now(),
        due_at=_parse_dt(raw.get("DueDate")),
        estimated=parse_span(raw.get("EstimatedTime")),
        actual=parse_span(raw.get("ActualTime")) or timedelta(),
        progress=min(100, max(0, progress)),
        tags=_tags(raw.get("Tags")),
    )


def note_to_dict(note: Note) -> dict[str, Any]:
    return {
        "Id": note.id,
        "Title": note.title,
        "Content": note.content,
        "CreatedDate": _format_dt(note.created_at),
        "ModifiedDate": _format_dt(note.modified_at),
        "Tags": list(note.tags),
    }


def note_from_dict(raw: dict[str, Any]) -> Note | None:
    note_id = _int(raw.get("Id"), 0)
    if note_id <= 0:
        return None
    return Note(
        id=note_id,
        title=str(raw.get("Title") or ""),
        content=str(raw.get("Content") or ""),
        created_at=_parse_dt(raw.get("CreatedDate")) or datetime.now(),
        modified_at=_parse_dt(raw.get("ModifiedDate")),
        tags=_tags(raw.get("Tags")),
    )


def pomodoro_to_dict(cfg: PomodoroConfig) -> dict[str, Any]:
    return {
        "WorkMinutes": cfg.work_minutes,
        "ShortBreakMinutes": cfg.short_break_minutes,
        "LongBreakMinutes": cfg.long_break_minutes,
        "SessionsUntilLongBreak": cfg.sessions_until_long_break,
        "CompletedSessions": cfg.completed_work_sessions,
    }


def pomodoro_from_dict(raw: Any) -> PomodoroConfig:
    cfg = PomodoroConfig()
    if not isinstance(raw, dict):
        return cfg

    def positive(key: str, default: int) -> int:
        value = _int(raw.get(key), default)
        return value if value > 0 else default

    cfg.work_minutes = positive("WorkMinutes", cfg.work_minutes)
    cfg.short_break_minutes = positive("ShortBreakMinutes", cfg.short_break_minutes)
    cfg.long_break_minutes = positive("LongBreakMinutes", cfg.long_break_minutes)
    cfg.sessions_until_long_break = positive("SessionsUntilLongBreak", cfg.sessions_until_long_break)
    cfg.completed_work_sessions = max(0, _int(raw.get("CompletedSessions"), 0))
    return cfg


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    return {
        "Tasks": [task_to_dict(t) for t in snapshot.tasks],
        "Notes": [note_to_dict(n) for n in snapshot.notes],
        "Pomodoro": pomodoro_to_dict(snapshot.pomodoro),
        "NextTaskId": snapshot.next_task_id,
        "NextNoteId": snapshot.next_note_id,
        "LastSaved": _format_dt(snapshot.last_saved or datetime.now()),
    }


def _records(raw: Any, decode) -> list:
    if not isinstance(raw, list):
        return []
    out = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        decoded = decode(item)
        if decoded is None:
            logger.warning("Skipping record without a valid Id: %r", item.get("Id"))
            continue
        out.append(decoded)
    return out


def snapshot_from_dict(data: dict[str, Any]) -> Snapshot:
    return Snapshot(
        tasks=_records(data.get("Tasks"), task_from_dict),
        notes=_records(data.get("Notes"), note_from_dict),
        pomodoro=pomodoro_from_dict(data.get("Pomodoro")),
        next_task_id=max(1, _int(data.get("NextTaskId"), 1)),
        next_note_id=max(1, _int(data.get("NextNoteId"), 1)),
        last_saved=_parse_dt(data.get("LastSaved")),
    )


class SnapshotRepo:
    """
    JSON file gateway.

    - load(): Snapshot, or None when there is nothing usable on disk
    - save(): atomic write (tmp file + os.replace); returns False on failure
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> Snapshot | None:
        if not self.exists():
            logger.info("No data file at %s, starting fresh.", self._path)
            return None
        try:
            data = json.loads(self._path.read_text("utf-8-sig"))
        except (OSError, ValueError):
            logger.exception("Failed to load data from %s, starting with fresh data.", self._path)
            return None
        if not isinstance(data, dict):
            logger.error("Data file %s is not a JSON object, starting with fresh data.", self._path)
            return None
        snapshot = snapshot_from_dict(data)
        logger.info(
            "Loaded %d tasks, %d notes from %s",
            len(snapshot.tasks),
            len(snapshot.notes),
            self._path,
        )
        return snapshot

    def save(self, snapshot: Snapshot) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            payload = json.dumps(snapshot_to_dict(snapshot), ensure_ascii=False, indent=2)
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self._path)
            with contextlib.suppress(OSError):
                os.chmod(self._path, 0o600)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save data to %s", self._path)
            return False
        logger.info(
            "Saved %d tasks, %d notes to %s",
            len(snapshot.tasks),
            len(snapshot.notes),
            self._path,
        )
        return True
