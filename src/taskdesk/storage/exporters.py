# src/taskdesk/storage/exporters.py

"""
Export formats for sharing data outside the app.

Formatters are pure (return text); export() picks a timestamped file name
and writes it.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from enum import StrEnum
from pathlib import Path

from ..core.errors import PersistenceError
from ..core.state import AppState
from ..notes.note_models import Note
from ..tasks.task_models import Task
from .snapshot import note_to_dict, pomodoro_to_dict, task_to_dict

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "ID",
    "Title",
    "Description",
    "Priority",
    "Status",
    "Progress",
    "DueDate",
    "EstimatedHours",
    "ActualHours",
    "Tags",
]


class ExportKind(StrEnum):
    CSV = "csv"
    NOTES = "notes"
    JSON = "json"


def _hours(span: timedelta | None) -> str:
    if span is None:
        return "0.00"
    return f"{span / timedelta(hours=1):.2f}"


def tasks_to_csv(tasks: Iterable[Task]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for t in tasks:
        writer.writerow(
            [
                t.id,
                t.title,
                t.description,
                t.priority.label,
                t.status.label,
                t.progress,
                t.due_at.strftime("%Y-%m-%d") if t.due_at else "",
                _hours(t.estimated),
                _hours(t.actual),
                ";".join(t.tags),
            ]
        )
    return buf.getvalue()


def notes_to_text(notes: Iterable[Note], exported_at: datetime) -> str:
    lines = [
        "PERSONAL TASK MANAGER - NOTES EXPORT",
        f"Exported on: {exported_at:%Y-%m-%d %H:%M:%S}",
        "=" * 50,
        "",
    ]
    for note in sorted(notes, key=lambda n: (n.created_at, n.id), reverse=True):
        lines.append(f"[{note.id}] {note.title}")
        lines.append(f"Created: {note.created_at:%Y-%m-%d %H:%M}")
        if note.modified_at is not None:
            lines.append(f"Modified: {note.modified_at:%Y-%m-%d %H:%M}")
        if note.tags:
            lines.append(f"Tags: {', '.join(note.tags)}")
        lines.extend(["", note.content, "", "-" * 30, ""])
    return "\n".join(lines) + "\n"


def snapshot_to_json(state: AppState, exported_at: datetime) -> str:
    data = {
        "ExportDate": exported_at.isoformat(),
        "Tasks": [task_to_dict(t) for t in state.tasks.all()],
        "Notes": [note_to_dict(n) for n in state.notes.all()],
        "PomodoroStats": pomodoro_to_dict(state.pomodoro.config),
    }
    return json.dumps(data, ensure_ascii=False, indent=2)


_FILE_PATTERNS = {
    ExportKind.CSV: "tasks_export_{ts}.csv",
    ExportKind.NOTES: "notes_export_{ts}.txt",
    ExportKind.JSON: "taskmanager_backup_{ts}.json",
}


def export(kind: ExportKind, state: AppState, export_dir: str | Path, now: datetime) -> Path:
    """Write one export file and return its path. Raises PersistenceError on I/O failure."""
    if kind is ExportKind.CSV:
        body = tasks_to_csv(state.tasks.all())
    elif kind is ExportKind.NOTES:
        body = notes_to_text(state.notes.all(), now)
    else:
        body = snapshot_to_json(state, now)

    path = Path(export_dir) / _FILE_PATTERNS[kind].format(ts=now.strftime("%Y%m%d_%H%M%S"))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, "utf-8")
    except OSError as e:
        logger.exception("Export %s failed path=%s", kind, path)
        raise PersistenceError(f"Could not write {path}: {e}") from e
    logger.info("Exported %s to %s", kind, path)
    return path
