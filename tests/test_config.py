# tests/test_config.py

from __future__ import annotations

import logging
import os
import runpy
from pathlib import Path

import pytest

from taskdesk.config import ENV_PREFIX, Settings
from taskdesk.logging_setup import _ConsoleNoiseFilter

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX + "_"):
            monkeypatch.delenv(name)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()
    assert s.app_name == "taskdesk"
    assert s.data_dir == Path(".local/taskdesk")
    assert s.data_file == Path(".local/taskdesk/taskmanager_data.json")
    assert s.export_dir == Path(".local/taskdesk/exports")
    assert s.tick_seconds == 1.0
    assert s.count_skipped_work is True
    assert (s.note_preview_chars, s.due_soon_days, s.upcoming_limit) == (100, 7, 5)


def test_overrides_and_malformed_values(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("TASKDESK_DATA_DIR", str(tmp_path))
    clean_env.setenv("TASKDESK_COUNT_SKIPPED_WORK", "no")
    clean_env.setenv("TASKDESK_UPCOMING_LIMIT", "3")
    clean_env.setenv("TASKDESK_NOTE_PREVIEW_CHARS", "lots")
    clean_env.setenv("TASKDESK_TICK_SECONDS", "-1")

    s = Settings.from_env()

    assert s.data_file == tmp_path / "taskmanager_data.json"
    assert s.count_skipped_work is False
    assert s.upcoming_limit == 3
    assert s.note_preview_chars == 100
    assert s.tick_seconds == 1.0


def test_every_setting_is_documented() -> None:
    documented = runpy.run_path(str(ROOT / "config.example.py"))["ENV_VARS"]
    source = (ROOT / "src" / "taskdesk" / "config.py").read_text("utf-8")
    for name in documented:
        assert f'_k("{name.removeprefix(ENV_PREFIX + "_")}")' in source


@pytest.mark.parametrize(
    "name, level, shown",
    [
        ("taskdesk.cli.commands", logging.INFO, True),
        ("taskdesk.timers.loops", logging.INFO, False),
        ("taskdesk.timers.loops", logging.WARNING, True),
        ("py.warnings", logging.WARNING, False),
        ("urllib3", logging.WARNING, False),
        ("urllib3", logging.ERROR, True),
    ],
)
def test_console_noise_filter(name: str, level: int, shown: bool) -> None:
    record = logging.LogRecord(name, level, __file__, 1, "msg", None, None)
    assert _ConsoleNoiseFilter().filter(record) is shown
