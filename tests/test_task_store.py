# tests/test_task_store.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from taskdesk.core.errors import InvalidRangeError
from taskdesk.tasks.task_models import Priority, TaskStatus, days_until_due
from taskdesk.tasks.task_store import TaskStore

from .fakes import VirtualClock


def test_add_assigns_ids_and_defaults(task_store: TaskStore, clock: VirtualClock) -> None:
    t1 = task_store.add("Write report", "quarterly", Priority.HIGH, tags=["work", "q1"])
    t2 = task_store.add("")

    assert (t1.id, t2.id) == (1, 2)
    assert t1.status == TaskStatus.PENDING
    assert t1.progress == 0
    assert t1.actual == timedelta()
    assert t1.created_at == clock.now()
    assert t1.tags == ["work", "q1"]
    # Empty titles are allowed.
    assert t2.title == ""
    assert t2.priority == Priority.MEDIUM


def test_ids_are_never_reused_after_delete(task_store: TaskStore) -> None:
    a = task_store.add("a")
    b = task_store.add("b")
    assert task_store.delete(b.id) is True
    assert task_store.delete(b.id) is False
    c = task_store.add("c")
    assert c.id == 3
    assert task_store.get(a.id) is a
    assert task_store.get(b.id) is None


@pytest.mark.parametrize(
    "progress, expected",
    [
        (1, TaskStatus.IN_PROGRESS),
        (50, TaskStatus.IN_PROGRESS),
        (99, TaskStatus.IN_PROGRESS),
        (100, TaskStatus.COMPLETED),
    ],
)
def test_update_progress_derives_status(task_store: TaskStore, progress: int, expected) -> None:
    task = task_store.add("t")
    updated = task_store.update_progress(task.id, progress)
    assert updated is task
    assert task.progress == progress
    assert task.status == expected


def test_update_progress_zero_keeps_status(task_store: TaskStore) -> None:
    task = task_store.add("t")
    task_store.update_progress(task.id, 0)
    assert task.status == TaskStatus.PENDING

    task_store.set_status(task.id, TaskStatus.CANCELLED)
    task_store.update_progress(task.id, 0)
    assert task.status == TaskStatus.CANCELLED


@pytest.mark.parametrize("bad", [-1, 101, 1000])
def test_update_progress_out_of_range_leaves_task_unchanged(task_store: TaskStore, bad: int) -> None:
    task = task_store.add("t")
    task_store.update_progress(task.id, 40)

    with pytest.raises(InvalidRangeError):
        task_store.update_progress(task.id, bad)

    assert task.progress == 40
    assert task.status == TaskStatus.IN_PROGRESS


def test_update_progress_missing_task(task_store: TaskStore) -> None:
    assert task_store.update_progress(42, 10) is None


def test_mark_complete_forces_completed(task_store: TaskStore) -> None:
    task = task_store.add("t")
    task_store.update_progress(task.id, 30)
    task_store.mark_complete(task.id)
    assert task.progress == 100
    assert task.status == TaskStatus.COMPLETED
    assert task_store.mark_complete(999) is None


def test_record_elapsed_accumulates_and_sets_in_progress(task_store: TaskStore) -> None:
    task = task_store.add("t")
    task_store.record_elapsed(task.id, timedelta(minutes=25))
    task_store.record_elapsed(task.id, timedelta(minutes=10, seconds=5))

    assert task.actual == timedelta(minutes=35, seconds=5)
    assert task.status == TaskStatus.IN_PROGRESS

    with pytest.raises(InvalidRangeError):
        task_store.record_elapsed(task.id, timedelta(seconds=-1))
    assert task.actual == timedelta(minutes=35, seconds=5)
    assert task_store.record_elapsed(999, timedelta(seconds=1)) is None


def test_start_session_marks_in_progress(task_store: TaskStore) -> None:
    task = task_store.add("t")
    task_store.start_session(task.id)
    assert task.status == TaskStatus.IN_PROGRESS
    assert task.actual == timedelta()


def test_list_orders_by_priority_ordinal_then_due_date(task_store: TaskStore) -> None:
    high = task_store.add("high", priority=Priority.HIGH, due_at=datetime(2024, 1, 1))
    low_feb = task_store.add("low-feb", priority=Priority.LOW, due_at=datetime(2024, 2, 1))
    low_jan = task_store.add("low-jan", priority=Priority.LOW, due_at=datetime(2024, 1, 15))

    assert [t.id for t in task_store.list_tasks()] == [low_jan.id, low_feb.id, high.id]


def test_list_puts_undated_last_and_keeps_insertion_order_for_ties(task_store: TaskStore) -> None:
    undated = task_store.add("undated", priority=Priority.LOW)
    dated = task_store.add("dated", priority=Priority.LOW, due_at=datetime(2024, 3, 1))
    twin_a = task_store.add("twin-a", priority=Priority.CRITICAL)
    twin_b = task_store.add("twin-b", priority=Priority.CRITICAL)

    assert [t.title for t in task_store.list_tasks()] == [
        dated.title,
        undated.title,
        twin_a.title,
        twin_b.title,
    ]


def test_search_matches_title_description_and_tags_case_insensitively(task_store: TaskStore) -> None:
    a = task_store.add("Write REPORT")
    b = task_store.add("Groceries", "buy milk and bread")
    c = task_store.add("Gym", tags=["Health", "Report-card"])
    task_store.add("unrelated")

    assert task_store.search("report") == [a, c]
    assert task_store.search("MILK") == [b]
    assert task_store.search("health") == [c]


@pytest.mark.parametrize("term", ["", "   ", "\t"])
def test_blank_search_returns_nothing(task_store: TaskStore, term: str) -> None:
    task_store.add("anything")
    assert task_store.search(term) == []


def test_filters_by_status_and_priority(task_store: TaskStore) -> None:
    a = task_store.add("a", priority=Priority.LOW)
    b = task_store.add("b", priority=Priority.CRITICAL)
    task_store.mark_complete(b.id)

    assert task_store.filter_by_status(TaskStatus.COMPLETED) == [b]
    assert task_store.filter_by_status(TaskStatus.PENDING) == [a]
    assert task_store.filter_by_priority(Priority.LOW) == [a]
    assert task_store.filter_by_priority(Priority.HIGH) == []


def test_filter_due_within_uses_calendar_dates(task_store: TaskStore, clock: VirtualClock) -> None:
    # clock.now() is 2024-01-10 09:00
    earlier_today = task_store.add("earlier today", due_at=datetime(2024, 1, 10, 8, 0))
    edge = task_store.add("edge", due_at=datetime(2024, 1, 17, 23, 59))
    task_store.add("too late", due_at=datetime(2024, 1, 18, 0, 0))
    task_store.add("yesterday", due_at=datetime(2024, 1, 9, 12, 0))
    task_store.add("no due")

    assert task_store.filter_due_within(7) == [earlier_today, edge]
    assert task_store.filter_due_within(0) == [earlier_today]


def test_restore_keeps_counter_ahead_of_existing_ids(task_store: TaskStore) -> None:
    other = TaskStore()
    a = other.add("a")
    other.add("b")
    c = other.add("c")
    other.delete(2)

    task_store.restore([a, c], next_id=2)
    assert task_store.next_id == 4
    assert task_store.add("d").id == 4

    task_store.restore([], next_id=10)
    assert task_store.next_id == 10


def test_days_until_due_truncates_toward_zero(task_store: TaskStore, clock: VirtualClock) -> None:
    now = clock.now()
    soon = task_store.add("soon", due_at=now + timedelta(days=2, hours=5))
    late = task_store.add("late", due_at=now - timedelta(days=3, hours=1))
    half = task_store.add("half", due_at=now - timedelta(hours=12))
    none = task_store.add("none")

    assert days_until_due(soon, now) == 2
    assert days_until_due(late, now) == -3
    assert days_until_due(half, now) == 0
    assert days_until_due(none, now) is None


def test_write_report_scenario(task_store: TaskStore, clock: VirtualClock) -> None:
    task = task_store.add(
        "Write report", priority=Priority.HIGH, due_at=clock.now() + timedelta(days=2)
    )

    task_store.update_progress(task.id, 50)
    assert (task.status, task.progress) == (TaskStatus.IN_PROGRESS, 50)

    task_store.mark_complete(task.id)
    assert (task.status, task.progress) == (TaskStatus.COMPLETED, 100)
