# src/taskdesk/connectors/terminal_keys.py

from __future__ import annotations

import contextlib
import logging
import os
import sys
from collections.abc import Iterator

logger = logging.getLogger(__name__)


class TerminalKeyPoller:
    """
    Non-blocking single-key reads from the real terminal.

    POSIX: stdin is switched to cbreak mode only inside `raw_mode()`, so the
    line-based REPL keeps working between timer runs.
    Windows: msvcrt.kbhit/getwch.
    Not a TTY (pipes, CI): poll() always returns None.
    """

    def __init__(self) -> None:
        self._is_windows = os.name == "nt"

    @property
    def interactive(self) -> bool:
        return self._is_windows or sys.stdin.isatty()

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[TerminalKeyPoller]:
        if self._is_windows or not sys.stdin.isatty():
            yield self
            return

        import termios
        import tty

        fd = sys.stdin.fileno()
        old = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd)
            yield self
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old)

    def poll(self) -> str | None:
        if self._is_windows:
            import msvcrt

            if msvcrt.kbhit():  # type: ignore[attr-defined]
                return msvcrt.getwch()  # type: ignore[attr-defined]
            return None

        if not sys.stdin.isatty():
            return None

        import select

        try:
            ready, _, _ = select.select([sys.stdin], [], [], 0)
        except (OSError, ValueError):
            logger.debug("select() on stdin failed.", exc_info=True)
            return None
        if not ready:
            return None
        ch = sys.stdin.read(1)
        return ch or None
