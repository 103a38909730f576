# src/taskbuddy/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any, Final

FILTER_ALL: Final = "All"


def is_storable_text(text: Any) -> bool:
    """Non-blank text that survives UTF-8 encoding (no lone surrogates)."""
    if not isinstance(text, str) or not text.strip():
        return False
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class Category(StrEnum):
    """
    Closed set of task categories.

    Stored and exported by value ("Work", "Shopping", ...).
    """

    PERSONAL = "Personal"
    WORK = "Work"
    HEALTH = "Health"
    SHOPPING = "Shopping"
    LEARNING = "Learning"

    @classmethod
    def parse(cls, raw: Any) -> Category | None:
        """Case-insensitive lookup; None for anything outside the set."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        needle = raw.strip().lower()
        for member in cls:
            if member.value.lower() == needle:
                return member
        return None


class StatusFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: Any) -> StatusFilter | None:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    text: str
    category: Category
    completed: bool
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "category": self.category.value,
            "completed": self.completed,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any], *, category: Category) -> Task:
        """
        Build a Task from its stored form.

        The caller resolves the category (unknown values need a fallback policy);
        everything else is validated here and raises ValueError when malformed.
        """
        tid = raw.get("id")
        if isinstance(tid, bool) or not isinstance(tid, int):
            raise ValueError(f"invalid task id: {tid!r}")

        text = raw.get("text")
        if not is_storable_text(text):
            raise ValueError(f"invalid task text for id={tid}")

        completed = raw.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError(f"invalid completed flag for id={tid}")

        created_raw = raw.get("createdAt")
        if not isinstance(created_raw, str):
            raise ValueError(f"missing createdAt for id={tid}")
        created_at = datetime.fromisoformat(created_raw)

        return cls(
            id=tid,
            text=text.strip(),
            category=category,
            completed=completed,
            created_at=created_at,
        )


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    remaining: int
    completion_percent: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "completed": self.completed,
            "remaining": self.remaining,
            "completionPercent": self.completion_percent,
        }
