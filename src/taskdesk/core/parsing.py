# src/taskdesk/core/parsing.py

"""
Lenient parsers for user-typed field values.

Each helper returns None on malformed input so callers can keep the
field's previous or default value and carry on with the other fields.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta

from ..tasks.task_models import Priority, TaskStatus

logger = logging.getLogger(__name__)

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y/%m/%d",
    "%d.%m.%Y",
)


def parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        logger.debug("parse_int: rejected %r", raw)
        return None


def parse_priority(raw: str | None) -> Priority | None:
    """Accepts 1-4 or a name (low, medium, high, critical)."""
    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    n = parse_int(value)
    if n is not None:
        try:
            return Priority(n)
        except ValueError:
            return None
    try:
        return Priority[value.upper()]
    except KeyError:
        return None


def parse_status(raw: str | None) -> TaskStatus | None:
    """Accepts 1-4 (menu numbering) or a status name like 'in_progress'."""
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower().replace("-", "_")
    n = parse_int(value)
    if n is not None:
        return TaskStatus.from_ordinal(n - 1)
    if value == "inprogress":
        value = TaskStatus.IN_PROGRESS.value
    try:
        return TaskStatus(value)
    except ValueError:
        return None


def to_local_naive(dt: datetime) -> datetime:
    """Offset-aware timestamps become naive local time, like everything the stores create."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def parse_date(raw: str | None) -> datetime | None:
    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        return to_local_naive(datetime.fromisoformat(value))
    except ValueError:
        logger.debug("parse_date: rejected %r", raw)
        return None


def parse_hours(raw: str | None) -> timedelta | None:
    """Fractional hours ("1.5") to a duration; negative values are rejected."""
    if raw is None or not raw.strip():
        return None
    try:
        hours = float(raw.strip().replace(",", "."))
    except ValueError:
        return None
    if not math.isfinite(hours) or hours < 0:
        return None
    return timedelta(hours=hours)


def parse_tags(raw: str | None) -> list[str]:
    """Comma-separated tags, trimmed, empties dropped, order kept."""
    if raw is None or not raw.strip():
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]
