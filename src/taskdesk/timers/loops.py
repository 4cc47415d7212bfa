# src/taskdesk/timers/loops.py

from __future__ import annotations

"""
Cooperative timer loops.

Every loop has the same shape: poll a key, update elapsed/remaining,
call on_tick, sleep one tick. Cancellation therefore takes effect at the
next poll, never mid-sleep. Time comes from an injected Clock so tests
can run these instantly with a virtual clock.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum

from ..core.ports import Clock, KeyPoller
from ..pomodoro.engine import Phase, PomodoroEngine
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "Q"})
SKIP_KEYS = frozenset({"s", "S"})

TickHandler = Callable[[timedelta], None]


class CountdownOutcome(StrEnum):
    COMPLETED = "completed"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


@dataclass(slots=True, frozen=True)
class CountdownResult:
    outcome: CountdownOutcome
    elapsed: timedelta
    remaining: timedelta

    @property
    def finished(self) -> bool:
        """Completed or skipped: the phase counts as over."""
        return self.outcome is not CountdownOutcome.CANCELLED


def _noop(_: timedelta) -> None:
    return None


def run_countdown(
    seconds: float,
    clock: Clock,
    keys: KeyPoller,
    *,
    on_tick: TickHandler = _noop,
    tick_seconds: float = 1.0,
    skip_keys: frozenset[str] = frozenset(),
    cancel_keys: frozenset[str] | None = None,
) -> CountdownResult:
    """
    Count down `seconds`; on_tick receives the remaining time.

    cancel_keys=None means any key that is not a skip key cancels.
    """
    total = timedelta(seconds=max(0.0, seconds))
    start = clock.monotonic()

    def elapsed() -> timedelta:
        return min(total, timedelta(seconds=clock.monotonic() - start))

    while elapsed() < total:
        key = keys.poll()
        if key is not None:
            if key in skip_keys:
                e = elapsed()
                return CountdownResult(CountdownOutcome.SKIPPED, e, total - e)
            if cancel_keys is None or key in cancel_keys:
                e = elapsed()
                return CountdownResult(CountdownOutcome.CANCELLED, e, total - e)

        on_tick(total - elapsed())
        clock.sleep(tick_seconds)

    return CountdownResult(CountdownOutcome.COMPLETED, total, timedelta())


def run_stopwatch(
    clock: Clock,
    keys: KeyPoller,
    *,
    on_tick: TickHandler = _noop,
    tick_seconds: float = 1.0,
    stop_keys: frozenset[str] | None = None,
) -> timedelta:
    """Run until a stop key (any key by default); returns the elapsed time."""
    start = clock.monotonic()
    while True:
        key = keys.poll()
        if key is not None and (stop_keys is None or key in stop_keys):
            break
        on_tick(timedelta(seconds=clock.monotonic() - start))
        clock.sleep(tick_seconds)
    return timedelta(seconds=clock.monotonic() - start)


def track_task_time(
    store: TaskStore,
    task_id: int,
    clock: Clock,
    keys: KeyPoller,
    *,
    on_tick: TickHandler = _noop,
    tick_seconds: float = 1.0,
) -> timedelta | None:
    """
    Stopwatch bound to a task: InProgress at start, elapsed time added on 'q'.
    Returns the session length, or None if the task does not exist.

    The time is recorded even when the loop is interrupted (Ctrl+C, SIGTERM);
    the interrupt then propagates.
    """
    if store.start_session(task_id) is None:
        return None
    logger.info("Task timer started task_id=%s", task_id)
    start = clock.monotonic()
    try:
        run_stopwatch(clock, keys, on_tick=on_tick, tick_seconds=tick_seconds, stop_keys=QUIT_KEYS)
    finally:
        session = timedelta(seconds=max(0.0, clock.monotonic() - start))
        store.record_elapsed(task_id, session)
        logger.info("Task timer stopped task_id=%s session=%s", task_id, session)
    return session


def run_pomodoro(
    engine: PomodoroEngine,
    clock: Clock,
    keys: KeyPoller,
    *,
    on_phase_start: Callable[[Phase], None] = lambda _: None,
    on_tick: Callable[[Phase, timedelta], None] = lambda _p, _r: None,
    on_phase_end: Callable[[Phase, CountdownResult], None] = lambda _p, _r: None,
    should_continue: Callable[[Phase], bool] = lambda _: True,
    tick_seconds: float = 1.0,
) -> int:
    """
    Cycle work/break phases until the user quits.

    's' skips the current phase (it still advances), 'q' aborts the whole
    run without advancing. Returns how many work sessions this run counted.
    """
    engine.reset_cycle()
    logger.info("Pomodoro run started")

    while True:
        phase = engine.next_phase()
        on_phase_start(phase)
        result = run_countdown(
            phase.minutes * 60,
            clock,
            keys,
            on_tick=lambda remaining, p=phase: on_tick(p, remaining),
            tick_seconds=tick_seconds,
            skip_keys=SKIP_KEYS,
            cancel_keys=QUIT_KEYS,
        )
        if not result.finished:
            engine.abort()
            break

        engine.complete_phase(result.outcome is CountdownOutcome.COMPLETED)
        on_phase_end(phase, result)
        if not should_continue(phase):
            break

    logger.info("Pomodoro run finished sessions=%s", engine.session_count)
    return engine.session_count
