# src/taskdesk/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading the saved snapshot),
runs the console REPL and saves on the way out.
"""

from __future__ import annotations

import logging
import signal

from ..cli.bootstrap import create_initial_state, save_state, welcome_text
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        if save_state(state):
            print("Data saved.")
        else:
            print("Error saving data (see log for details).")
    except Exception:
        logger.exception("Failed to save data on shutdown.")


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    file_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=logging.WARNING, file_level=file_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    print(welcome_text(state))

    def _handle_sigterm(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_sigterm)
    except (ValueError, OSError, AttributeError):
        # Some platforms may not support SIGTERM.
        pass

    try:
        run_console_loop(state)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting.")
    finally:
        _shutdown(state)
        print(f"Thanks for using {settings.app_name}! Goodbye!")
        logger.info("Bye.")


if __name__ == "__main__":
    main()
