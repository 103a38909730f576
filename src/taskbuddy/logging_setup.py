# src/taskbuddy/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from pathlib import Path

APP_LOGGER = "taskbuddy"

# Console floors for chatty project loggers; the file handler still gets everything.
# storage logs every save/erase, the store logs every mutation at DEBUG.
DEFAULT_CONSOLE_FLOORS: Mapping[str, int] = {
    "taskbuddy.storage": logging.WARNING,
    "taskbuddy.tasks.task_store": logging.INFO,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console-side filter.

    A project record passes if it meets the floor of the most specific matching
    entry in `floors` (no entry: no extra floor). Anything outside the project,
    captured warnings included, reaches the console only at ERROR+.
    """

    def __init__(self, floors: Mapping[str, int] | None = None) -> None:
        super().__init__()
        # Longest prefix first so "taskbuddy.storage.kv_store" beats "taskbuddy.storage".
        items = DEFAULT_CONSOLE_FLOORS if floors is None else floors
        self._floors = sorted(items.items(), key=lambda kv: len(kv[0]), reverse=True)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name != APP_LOGGER and not name.startswith(APP_LOGGER + "."):
            return record.levelno >= logging.ERROR

        for prefix, floor in self._floors:
            if name == prefix or name.startswith(prefix + "."):
                return record.levelno >= floor
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskbuddy",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    console_floors: Mapping[str, int] | None = None,
) -> Path:
    """
    Console handler (filtered) + file handler (full). Call once, before the first log line.

    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskbuddy.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter(console_floors))
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    logging.getLogger(APP_LOGGER).debug("Logging to %s", log_file)
    return log_file
