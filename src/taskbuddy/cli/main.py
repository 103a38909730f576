# src/taskbuddy/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (hydrating tasks from the saved snapshot),
then runs the console connector in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    if not settings.console_enabled:
        stats = state.store.stats()
        logger.info(
            "Console disabled. %d tasks loaded (%d%% complete); nothing else to run.",
            stats.total,
            stats.completion_percent,
        )
        return

    try:
        run_console_loop(state)
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
