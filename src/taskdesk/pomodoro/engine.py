# src/taskdesk/pomodoro/engine.py

from __future__ import annotations

"""
Pomodoro state machine.

Two stored phases, Work and Break. Whether a break is short or long is
derived from how many work sessions this run has completed:
- Work phase        -> config.work_minutes
- Break after the Nth session where N % sessions_until_long_break == 0 -> long break
- any other break   -> short break

The engine owns no clock. A timer loop (see taskdesk.timers) runs the
countdown and reports back via complete_phase() or abort().
"""

import logging
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class PhaseKind(StrEnum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").upper()


@dataclass(slots=True)
class PomodoroConfig:
    """User-configurable durations plus the lifetime session counter (persisted)."""

    work_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    sessions_until_long_break: int = 4
    completed_work_sessions: int = 0


@dataclass(slots=True, frozen=True)
class Phase:
    kind: PhaseKind
    minutes: int

    @property
    def is_work(self) -> bool:
        return self.kind is PhaseKind.WORK


class PomodoroEngine:
    """
    Cycles Work / Break phases for one run and counts completed sessions.

    `session_count` is per-run (it drives long-break cadence) and resets on
    reset_cycle(); `config.completed_work_sessions` is the lifetime counter.

    `count_skipped_work` keeps the historical behavior where a skipped work
    phase counts like a completed one.
    TODO: revisit once we know whether users expect skips to be excluded from stats.
    """

    def __init__(
        self,
        config: PomodoroConfig | None = None,
        *,
        count_skipped_work: bool = True,
    ) -> None:
        self.config = config or PomodoroConfig()
        self.count_skipped_work = count_skipped_work
        self.is_work_phase = True
        self.session_count = 0

    def reset_cycle(self) -> None:
        self.is_work_phase = True
        self.session_count = 0

    def _is_long_break_due(self) -> bool:
        n = self.session_count
        return n > 0 and n % self.config.sessions_until_long_break == 0

    def next_phase(self) -> Phase:
        cfg = self.config
        if self.is_work_phase:
            return Phase(PhaseKind.WORK, cfg.work_minutes)
        if self._is_long_break_due():
            return Phase(PhaseKind.LONG_BREAK, cfg.long_break_minutes)
        return Phase(PhaseKind.SHORT_BREAK, cfg.short_break_minutes)

    current_phase = next_phase

    def complete_phase(self, completed_naturally: bool = True) -> Phase:
        """
        Finish the current phase (naturally or by skip) and flip to the other one.
        Returns the phase that just ended.
        """
        ended = self.next_phase()
        if ended.is_work and (completed_naturally or self.count_skipped_work):
            self.session_count += 1
            self.config.completed_work_sessions += 1
        self.is_work_phase = not self.is_work_phase
        logger.debug(
            "Pomodoro phase ended kind=%s natural=%s run_sessions=%s lifetime=%s",
            ended.kind,
            completed_naturally,
            self.session_count,
            self.config.completed_work_sessions,
        )
        return ended

    def abort(self) -> None:
        """User quit mid-phase: nothing advances, nothing is counted."""
        logger.debug("Pomodoro aborted during %s", self.next_phase().kind)

    def configure(
        self,
        *,
        work_minutes: int | None = None,
        short_break_minutes: int | None = None,
        long_break_minutes: int | None = None,
        sessions_until_long_break: int | None = None,
    ) -> PomodoroConfig:
        """Overwrite each provided positive value; None and non-positive values are ignored."""
        cfg = self.config
        if work_minutes is not None and work_minutes > 0:
            cfg.work_minutes = work_minutes
        if short_break_minutes is not None and short_break_minutes > 0:
            cfg.short_break_minutes = short_break_minutes
        if long_break_minutes is not None and long_break_minutes > 0:
            cfg.long_break_minutes = long_break_minutes
        if sessions_until_long_break is not None and sessions_until_long_break > 0:
            cfg.sessions_until_long_break = sessions_until_long_break
        logger.info(
            "Pomodoro configured work=%s short=%s long=%s every=%s",
            cfg.work_minutes,
            cfg.short_break_minutes,
            cfg.long_break_minutes,
            cfg.sessions_until_long_break,
        )
        return cfg
