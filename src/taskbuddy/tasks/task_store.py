# src/taskbuddy/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from datetime import UTC, datetime
from typing import Any

from ..core.ports import Clock, IdGenerator, TaskPersistence
from . import transitions
from .task_models import FILTER_ALL, Category, StatusFilter, Task, TaskStats, is_storable_text
from .transitions import TaskCollection

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


class MonotonicIdGenerator:
    """
    Millisecond-timestamp ids that never go backwards.

    Seeded past the highest id already in use, so hydrated ids are never reused.
    """

    def __init__(self, *, start_after: int = 0) -> None:
        self._last = int(start_after)

    def __call__(self) -> int:
        candidate = int(time.time() * 1000)
        self._last = max(candidate, self._last + 1)
        return self._last


class FilteredTasks:
    """
    Lazy, restartable view over a task collection.

    Bound to the collection as it was when the view was taken; iterating twice
    yields the same tasks in the same order.
    """

    def __init__(
        self,
        tasks: TaskCollection,
        *,
        category: Category | str = FILTER_ALL,
        status: StatusFilter = StatusFilter.ALL,
        query: str = "",
    ) -> None:
        self._tasks = tasks
        self._category = category
        self._status = status
        self._query = query.strip().lower()

    def _matches(self, task: Task) -> bool:
        if self._category != FILTER_ALL and task.category != self._category:
            return False
        if self._status is StatusFilter.ACTIVE and task.completed:
            return False
        if self._status is StatusFilter.COMPLETED and not task.completed:
            return False
        if self._query and self._query not in task.text.lower():
            return False
        return True

    def __iter__(self) -> Iterator[Task]:
        return (t for t in self._tasks if self._matches(t))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def texts(self) -> list[str]:
        return [t.text for t in self]


class TaskStore:
    """
    In-memory owner of the task collection and the selection state.

    Mutations go through pure transitions (tasks/transitions.py); when the
    collection actually changes the store hands the new collection to the
    injected persistence. Invalid input is a silent no-op, never an exception.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        persistence: TaskPersistence | None = None,
        clock: Clock = utc_now,
        id_generator: IdGenerator | None = None,
        active_category: Category = Category.PERSONAL,
    ) -> None:
        self._tasks, dropped = transitions.dedupe_by_id(list(tasks))
        if dropped:
            logger.warning("TaskStore dropped duplicate task ids: %s", dropped)

        self._persistence = persistence
        self._clock = clock
        if id_generator is None:
            id_generator = MonotonicIdGenerator(
                start_after=max((t.id for t in self._tasks), default=0)
            )
        self._next_id = id_generator

        self.active_category: Category = active_category
        self.filter_category: Category | str = FILTER_ALL
        self.status_filter: StatusFilter = StatusFilter.ALL
        self.search_query: str = ""

        logger.info("TaskStore ready total=%s", len(self._tasks))

    @property
    def tasks(self) -> TaskCollection:
        return self._tasks

    # ---- internal ----

    def _fresh_id(self) -> int:
        used = {t.id for t in self._tasks}
        while True:
            tid = int(self._next_id())
            if tid not in used:
                return tid
            logger.debug("Id generator returned an id already in use (%s); drawing again.", tid)

    def _commit(self, new_tasks: TaskCollection) -> bool:
        """Install new_tasks; persist if the collection changed. Returns True on change."""
        if new_tasks is self._tasks:
            return False
        self._tasks = new_tasks
        if self._persistence is not None:
            # Best-effort: a failed write leaves in-memory state authoritative.
            self._persistence.save(self._tasks)
        return True

    # ---- mutations ----

    def add_task(self, text: Any, category: Any = None) -> Task | None:
        if not is_storable_text(text):
            logger.debug("add_task ignored: empty or unencodable text")
            return None

        if category is None:
            resolved = self.active_category
        else:
            resolved = Category.parse(category)
            if resolved is None:
                logger.debug("add_task ignored: unknown category %r", category)
                return None

        new_tasks = transitions.append_task(
            self._tasks,
            task_id=self._fresh_id(),
            text=text,
            category=resolved,
            created_at=self._clock(),
        )
        self._commit(new_tasks)
        task = new_tasks[-1]
        logger.debug("Task added id=%s category=%s", task.id, task.category.value)
        return task

    def toggle_task(self, task_id: Any) -> Task | None:
        if isinstance(task_id, bool):
            logger.debug("toggle_task ignored: bool id %r", task_id)
            return None
        new_tasks = transitions.toggle_task(self._tasks, task_id)
        if not self._commit(new_tasks):
            logger.debug("toggle_task ignored: unknown id %r", task_id)
            return None
        task = next(t for t in new_tasks if t.id == task_id)
        logger.debug("Task toggled id=%s completed=%s", task.id, task.completed)
        return task

    def delete_task(self, task_id: Any) -> bool:
        if isinstance(task_id, bool):
            logger.debug("delete_task ignored: bool id %r", task_id)
            return False
        changed = self._commit(transitions.remove_task(self._tasks, task_id))
        if changed:
            logger.debug("Task deleted id=%s", task_id)
        else:
            logger.debug("delete_task ignored: unknown id %r", task_id)
        return changed

    def clear_all(self) -> bool:
        """
        Empty the collection and erase the persisted snapshot, or do neither.

        The snapshot is erased first; if that fails the in-memory tasks are kept.
        """
        if self._persistence is not None and not self._persistence.erase():
            logger.warning("clear_all aborted: persisted snapshot could not be erased.")
            return False
        count = len(self._tasks)
        self._tasks = ()
        self.filter_category = FILTER_ALL
        logger.info("All tasks cleared (%d removed).", count)
        return True

    # ---- selection state ----

    def set_filter_category(self, category: Any) -> bool:
        if isinstance(category, str) and category.strip().lower() == FILTER_ALL.lower():
            self.filter_category = FILTER_ALL
            return True
        resolved = Category.parse(category)
        if resolved is None:
            return False
        self.filter_category = resolved
        return True

    def set_active_category(self, category: Any) -> bool:
        resolved = Category.parse(category)
        if resolved is None:
            return False
        self.active_category = resolved
        return True

    def set_status_filter(self, status: Any) -> bool:
        resolved = StatusFilter.parse(status)
        if resolved is None:
            return False
        self.status_filter = resolved
        return True

    def set_search_query(self, query: Any) -> None:
        self.search_query = query.strip() if isinstance(query, str) else ""

    # ---- derived views ----

    def filtered_tasks(self) -> FilteredTasks:
        return FilteredTasks(
            self._tasks,
            category=self.filter_category,
            status=self.status_filter,
            query=self.search_query,
        )

    def stats(self) -> TaskStats:
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        # Half-up rounding in integers (round() would round 0.5 to even).
        percent = (200 * completed + total) // (2 * total) if total else 0
        return TaskStats(
            total=total,
            completed=completed,
            remaining=total - completed,
            completion_percent=percent,
        )

    def category_counts(self) -> dict[Category, int]:
        counts = {c: 0 for c in Category}
        for t in self._tasks:
            counts[t.category] += 1
        return counts

    def nonempty_categories(self) -> list[Category]:
        return [c for c, n in self.category_counts().items() if n > 0]
