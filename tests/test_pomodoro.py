# tests/test_pomodoro.py

from __future__ import annotations

import pytest

from taskdesk.pomodoro.engine import PhaseKind, PomodoroConfig, PomodoroEngine


def _finish_work_and_break(engine: PomodoroEngine) -> PhaseKind:
    """Complete one work phase; return the kind of the break that follows."""
    assert engine.next_phase().kind is PhaseKind.WORK
    engine.complete_phase(True)
    brk = engine.next_phase()
    engine.complete_phase(True)
    return brk.kind


def test_initial_phase_is_work_with_configured_minutes() -> None:
    engine = PomodoroEngine()
    phase = engine.next_phase()
    assert phase.kind is PhaseKind.WORK
    assert phase.minutes == 25
    assert engine.current_phase() == phase


def test_long_break_after_every_fourth_session() -> None:
    engine = PomodoroEngine(PomodoroConfig(sessions_until_long_break=4))
    kinds = [_finish_work_and_break(engine) for _ in range(8)]

    assert kinds == [
        PhaseKind.SHORT_BREAK,
        PhaseKind.SHORT_BREAK,
        PhaseKind.SHORT_BREAK,
        PhaseKind.LONG_BREAK,
        PhaseKind.SHORT_BREAK,
        PhaseKind.SHORT_BREAK,
        PhaseKind.SHORT_BREAK,
        PhaseKind.LONG_BREAK,
    ]
    assert engine.session_count == 8
    assert engine.config.completed_work_sessions == 8


def test_break_durations_follow_config() -> None:
    engine = PomodoroEngine(
        PomodoroConfig(short_break_minutes=3, long_break_minutes=20, sessions_until_long_break=1)
    )
    engine.complete_phase(True)
    phase = engine.next_phase()
    assert (phase.kind, phase.minutes) == (PhaseKind.LONG_BREAK, 20)


def test_break_completion_does_not_count_sessions() -> None:
    engine = PomodoroEngine()
    engine.complete_phase(True)
    assert engine.config.completed_work_sessions == 1
    engine.complete_phase(True)
    assert engine.config.completed_work_sessions == 1
    assert engine.is_work_phase is True


def test_skipped_work_counts_by_default() -> None:
    engine = PomodoroEngine()
    ended = engine.complete_phase(completed_naturally=False)
    assert ended.kind is PhaseKind.WORK
    assert engine.session_count == 1
    assert engine.config.completed_work_sessions == 1
    assert engine.is_work_phase is False


def test_skipped_work_can_be_excluded() -> None:
    engine = PomodoroEngine(count_skipped_work=False)
    engine.complete_phase(completed_naturally=False)
    assert engine.session_count == 0
    assert engine.config.completed_work_sessions == 0
    # The phase still advances.
    assert engine.next_phase().kind is PhaseKind.SHORT_BREAK


def test_abort_changes_nothing() -> None:
    engine = PomodoroEngine()
    engine.complete_phase(True)
    engine.abort()
    assert engine.is_work_phase is False
    assert engine.session_count == 1
    assert engine.config.completed_work_sessions == 1


def test_reset_cycle_keeps_lifetime_counter() -> None:
    engine = PomodoroEngine(PomodoroConfig(completed_work_sessions=10))
    engine.complete_phase(True)
    engine.reset_cycle()
    assert engine.is_work_phase is True
    assert engine.session_count == 0
    assert engine.config.completed_work_sessions == 11


@pytest.mark.parametrize("bad", [0, -5])
def test_configure_ignores_non_positive_values(bad: int) -> None:
    engine = PomodoroEngine()
    engine.configure(work_minutes=bad, short_break_minutes=bad)
    assert engine.config.work_minutes == 25
    assert engine.config.short_break_minutes == 5


def test_configure_is_partial() -> None:
    engine = PomodoroEngine()
    engine.configure(long_break_minutes=30, sessions_until_long_break=2)
    cfg = engine.config
    assert (cfg.work_minutes, cfg.short_break_minutes) == (25, 5)
    assert (cfg.long_break_minutes, cfg.sessions_until_long_break) == (30, 2)
