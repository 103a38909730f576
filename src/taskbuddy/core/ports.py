# src/taskbuddy/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage/clock/id generation swappable and makes testing easier.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from ..tasks.task_models import Task


class Clock(Protocol):
    """Returns the current timezone-aware time."""
    def __call__(self) -> datetime: ...


class IdGenerator(Protocol):
    """Returns a fresh task id on every call (never repeats within a session)."""
    def __call__(self) -> int: ...


class KeyValueStore(Protocol):
    """
    Durable string key -> string value store.

    Implementations may raise on I/O errors; callers decide how to degrade.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class TaskPersistence(Protocol):
    """
    What the task store needs from persistence.

    Both calls are best-effort: they return False on failure instead of raising.
    """

    def save(self, tasks: Sequence[Task]) -> bool: ...
    def erase(self) -> bool: ...
