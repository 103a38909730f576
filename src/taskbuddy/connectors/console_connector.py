# src/taskbuddy/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str, emit: Callable[[str], None] | None = None) -> str | None:
    """
    Route one line of user input.

    Slash lines go to the command registry; any other non-empty line is a new
    task in the active category. Returns the reply text (None for blank input).
    """
    line = line.strip()
    if not line:
        return None
    if not line.startswith("/"):
        line = f"/add {line}"
    try:
        return command_registry.handle(state, line, emit=emit)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


def run_console_loop(state: AppState, input_fn: Callable[[str], str] = input) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.store.tasks))
    app_name = str(getattr(state.settings, "app_name", "TaskBuddy"))
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input_fn(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input, emit=emit)
        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
