# src/taskdesk/notes/note_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

ELLIPSIS = "..."


@dataclass(slots=True)
class Note:
    id: int
    title: str
    content: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    modified_at: datetime | None = None
    tags: list[str] = field(default_factory=list)


def preview(note: Note, max_len: int = 100) -> str:
    """First `max_len` characters of the content, with '...' when truncated."""
    if len(note.content) <= max_len:
        return note.content
    return note.content[:max_len] + ELLIPSIS
