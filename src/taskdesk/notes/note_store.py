# src/taskdesk/notes/note_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from ..tasks.task_models import matches_term
from .note_models import Note

logger = logging.getLogger(__name__)


class NoteStore:
    """
    In-memory note store.

    Same id policy as TaskStore: monotonic, never reused.
    Edits replace the content and stamp modified_at; title and tags are
    fixed at creation.
    """

    def __init__(self, *, now: Callable[[], datetime] = datetime.now) -> None:
        self._notes: list[Note] = []
        self._next_id = 1
        self._now = now

    def __len__(self) -> int:
        return len(self._notes)

    @property
    def next_id(self) -> int:
        return self._next_id

    def restore(self, notes: Iterable[Note], next_id: int = 1) -> None:
        self._notes = list(notes)
        max_id = max((n.id for n in self._notes), default=0)
        self._next_id = max(int(next_id), max_id + 1, 1)
        logger.info("NoteStore restored total=%s next_id=%s", len(self._notes), self._next_id)

    def add(self, title: str, content: str = "", tags: Iterable[str] | None = None) -> Note:
        note = Note(
            id=self._next_id,
            title=title,
            content=content,
            created_at=self._now(),
            tags=list(tags or []),
        )
        self._next_id += 1
        self._notes.append(note)
        logger.debug("Note added id=%s chars=%s", note.id, len(content))
        return note

    def edit(self, note_id: int, content: str) -> Note | None:
        note = self.get(note_id)
        if note is None:
            return None
        note.content = content
        note.modified_at = self._now()
        logger.debug("Note edited id=%s chars=%s", note_id, len(content))
        return note

    def delete(self, note_id: int) -> bool:
        note = self.get(note_id)
        if note is None:
            return False
        self._notes.remove(note)
        logger.debug("Note deleted id=%s", note_id)
        return True

    def get(self, note_id: int) -> Note | None:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def all(self) -> list[Note]:
        return list(self._notes)

    def list_notes(self) -> list[Note]:
        """Newest first; notes created at the same instant fall back to id order."""
        return sorted(self._notes, key=lambda n: (n.created_at, n.id), reverse=True)

    def search(self, term: str) -> list[Note]:
        if not term or not term.strip():
            return []
        needle = term.lower()
        return [n for n in self._notes if matches_term(needle, n.title, n.content, tags=n.tags)]
