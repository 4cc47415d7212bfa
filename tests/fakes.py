# tests/fakes.py

from __future__ import annotations

import contextlib
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta


class VirtualClock:
    """
    Deterministic Clock for timer tests.

    sleep() advances both wall time and the monotonic counter, so timer
    loops finish instantly.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 10, 9, 0, 0)
        self._mono = 0.0
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self.current

    def monotonic(self) -> float:
        return self._mono

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)

    def advance(self, seconds: float) -> None:
        self._mono += seconds
        self.current += timedelta(seconds=seconds)


class TimedKeys:
    """
    KeyPoller that "presses" each key once the clock reaches its time.

    TimedKeys(clock, [(90, "s"), (200, "q")]) -> 's' at t>=90s, 'q' at t>=200s.
    """

    def __init__(self, clock: VirtualClock, presses: Iterable[tuple[float, str]] = ()) -> None:
        self._clock = clock
        self._presses = sorted(presses)
        self.polls = 0

    def poll(self) -> str | None:
        self.polls += 1
        if self._presses and self._clock.monotonic() >= self._presses[0][0]:
            return self._presses.pop(0)[1]
        return None


class InterruptingKeys:
    """KeyPoller standing in for Ctrl+C: raises KeyboardInterrupt once the clock reaches `at`."""

    def __init__(self, clock: VirtualClock, at: float) -> None:
        self._clock = clock
        self._at = at

    def poll(self) -> str | None:
        if self._clock.monotonic() >= self._at:
            raise KeyboardInterrupt
        return None


@dataclass
class FakeConsole:
    """
    Scripted Console port: read_line() pops from `lines` (None once empty),
    everything shown is captured in `output` / `redraws`.
    """

    lines: list[str] = field(default_factory=list)
    keys: object | None = None
    output: list[str] = field(default_factory=list)
    redraws: list[str] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)
    interactive: bool = True

    def emit(self, text: str) -> None:
        self.output.append(text)

    def redraw(self, text: str) -> None:
        self.redraws.append(text)

    def read_line(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if not self.lines:
            return None
        return self.lines.pop(0)

    @contextlib.contextmanager
    def key_session(self) -> Iterator[object]:
        yield self.keys
