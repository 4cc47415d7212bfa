# src/taskdesk/connectors/console_connector.py

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Iterator
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.ports import Console
from ..core.state import AppState
from .terminal_keys import TerminalKeyPoller

logger = logging.getLogger(__name__)

PROMPT = ">>> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class TerminalConsole:
    """Console port over stdin/stdout."""

    def __init__(self) -> None:
        self._keys = TerminalKeyPoller()
        self._redrawing = False

    @property
    def interactive(self) -> bool:
        return self._keys.interactive

    def _end_redraw(self) -> None:
        if self._redrawing:
            sys.stdout.write("\n")
            self._redrawing = False

    def emit(self, text: str) -> None:
        self._end_redraw()
        print(text, flush=True)

    def redraw(self, text: str) -> None:
        """
        Replace the current terminal line with `text`.
        Best-effort: if not a TTY, just print a new line.
        """
        try:
            if sys.stdout.isatty():
                sys.stdout.write("\r\033[2K" + text)
                sys.stdout.flush()
                self._redrawing = True
            else:
                print(text)
        except OSError:
            print(text)

    def read_line(self, prompt: str) -> str | None:
        self._end_redraw()
        try:
            return input(prompt)
        except EOFError:
            return None

    @contextlib.contextmanager
    def key_session(self) -> Iterator[TerminalKeyPoller]:
        try:
            with self._keys.raw_mode() as keys:
                yield keys
        finally:
            self._end_redraw()


def run_console_loop(state: AppState, console: Console | None = None) -> None:
    console = console or TerminalConsole()
    logger.info("Console connector started.")
    console.emit(f"[{_ts_local()}] Type a command. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            raw = console.read_line(PROMPT)
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            console.emit("")
            break
        if raw is None:
            logger.info("Console EOF received, exiting.")
            break

        user_input = raw.strip()

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit", "exit", "quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            user_input = "/" + user_input

        try:
            reply = command_registry.handle(state, user_input, console)
        except KeyboardInterrupt:
            logger.info("Command interrupted by user.")
            reply = "Interrupted."
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            console.emit(reply + "\n")

    logger.info("Console connector finished.")
