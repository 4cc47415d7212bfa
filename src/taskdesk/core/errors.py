# src/taskdesk/core/errors.py

"""
Error taxonomy shared by stores, persistence and the command layer.

Stores signal a lookup miss by returning None (or False for deletes);
the exception classes below are for failures that must not mutate state.
Every class is catchable by the command layer via TaskdeskError.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    INVALID_RANGE = "invalid_range"
    PERSISTENCE_FAILURE = "persistence_failure"
    PARSE_FAILURE = "parse_failure"


class TaskdeskError(Exception):
    kind: ErrorKind = ErrorKind.INVALID_RANGE


class NotFoundError(TaskdeskError, LookupError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, item_id: int | None) -> None:
        if item_id is None:
            super().__init__(f"{entity} not found.")
        else:
            super().__init__(f"{entity} {item_id} not found.")
        self.entity = entity
        self.item_id = item_id


class InvalidRangeError(TaskdeskError, ValueError):
    kind = ErrorKind.INVALID_RANGE


class PersistenceError(TaskdeskError, OSError):
    kind = ErrorKind.PERSISTENCE_FAILURE


class ParseError(TaskdeskError, ValueError):
    kind = ErrorKind.PARSE_FAILURE
