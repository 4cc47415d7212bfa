# src/taskdesk/config.py

"""
Settings for taskdesk, read from TASKDESK_* environment variables and an
optional local .env file.

Nothing is required: every field has a local default, and a malformed
value silently falls back to that default so startup never fails on config.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from dotenv import load_dotenv

ENV_PREFIX = "TASKDESK"
_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})

N = TypeVar("N", int, float)

load_dotenv(override=False)


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _raw(name: str) -> str | None:
    """Stripped value, or None when unset or blank."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_str(name: str, default: str) -> str:
    return _raw(name) or default


def _env_bool(name: str, default: bool) -> bool:
    value = _raw(name)
    return default if value is None else value.lower() in _TRUTHY


def _env_number(name: str, default: N, cast: Callable[[str], N], *, minimum: N) -> N:
    value = _raw(name)
    if value is None:
        return default
    try:
        parsed = cast(value)
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _env_path(name: str, default: Path) -> Path:
    value = _raw(name)
    return default if value is None else Path(value).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str
    log_level: str

    # Local data (gitignored)
    data_dir: Path
    data_file: Path
    export_dir: Path

    # Timers
    tick_seconds: float
    count_skipped_work: bool

    # Display / reports
    note_preview_chars: int
    due_soon_days: int
    upcoming_limit: int

    @classmethod
    def from_env(cls) -> Settings:
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdesk"))
        data_file = _env_path(_k("DATA_FILE"), data_dir / "taskmanager_data.json")
        export_dir = _env_path(_k("EXPORT_DIR"), data_dir / "exports")

        return cls(
            app_name=_env_str(_k("APP_NAME"), "taskdesk"),
            log_level=_env_str(_k("LOG_LEVEL"), "INFO").upper(),
            data_dir=data_dir,
            data_file=data_file,
            export_dir=export_dir,
            tick_seconds=_env_number(_k("TICK_SECONDS"), 1.0, float, minimum=0.05),
            count_skipped_work=_env_bool(_k("COUNT_SKIPPED_WORK"), True),
            note_preview_chars=_env_number(_k("NOTE_PREVIEW_CHARS"), 100, int, minimum=1),
            due_soon_days=_env_number(_k("DUE_SOON_DAYS"), 7, int, minimum=0),
            upcoming_limit=_env_number(_k("UPCOMING_LIMIT"), 5, int, minimum=1),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
