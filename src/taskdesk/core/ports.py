# src/taskdesk/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
Timer loops only see a Clock and a KeyPoller, so tests can drive them
with a virtual clock and scripted key presses instead of wall-clock waits.
"""

import time
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Time source for timer loops."""

    def now(self) -> datetime: ...
    def monotonic(self) -> float: ...
    def sleep(self, seconds: float) -> None: ...


class KeyPoller(Protocol):
    """Non-blocking key source: returns one pending key or None."""

    def poll(self) -> str | None: ...


class Console(Protocol):
    """
    What command handlers may do with the terminal.

    The console connector implements it over stdin/stdout; tests use a
    scripted fake.
    """

    @property
    def interactive(self) -> bool:
        """True when key_session() can deliver key presses."""
        ...

    def emit(self, text: str) -> None: ...
    def redraw(self, text: str) -> None: ...
    def read_line(self, prompt: str) -> str | None: ...
    def key_session(self) -> AbstractContextManager[KeyPoller]: ...


class SystemClock:
    """Wall-clock implementation used by the console app."""

    def now(self) -> datetime:
        return datetime.now()

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
