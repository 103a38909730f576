# src/taskbuddy/tasks/transitions.py

"""
Pure state transitions over a task collection.

Each function takes the current collection (oldest first) and returns the next one.
When nothing changes the input tuple itself is returned, so callers can detect
a no-op with an identity check.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from .task_models import Category, Task

TaskCollection = tuple[Task, ...]


def append_task(
    tasks: TaskCollection,
    *,
    task_id: int,
    text: str,
    category: Category,
    created_at: datetime,
) -> TaskCollection:
    text = text.strip()
    if not text:
        return tasks
    if any(t.id == task_id for t in tasks):
        raise ValueError(f"duplicate task id: {task_id}")
    task = Task(
        id=task_id,
        text=text,
        category=category,
        completed=False,
        created_at=created_at,
    )
    return (*tasks, task)


def toggle_task(tasks: TaskCollection, task_id: int) -> TaskCollection:
    for i, t in enumerate(tasks):
        if t.id == task_id:
            flipped = replace(t, completed=not t.completed)
            return (*tasks[:i], flipped, *tasks[i + 1 :])
    return tasks


def remove_task(tasks: TaskCollection, task_id: int) -> TaskCollection:
    kept = tuple(t for t in tasks if t.id != task_id)
    if len(kept) == len(tasks):
        return tasks
    return kept


def dedupe_by_id(tasks: Sequence[Task]) -> tuple[TaskCollection, list[int]]:
    """Keep the first task for every id. Returns (kept, dropped_ids)."""
    seen: set[int] = set()
    kept: list[Task] = []
    dropped: list[int] = []
    for t in tasks:
        if t.id in seen:
            dropped.append(t.id)
            continue
        seen.add(t.id)
        kept.append(t)
    return tuple(kept), dropped
