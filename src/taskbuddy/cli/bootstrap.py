# src/taskbuddy/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the key/value store, snapshot persistence and task store into AppState,
- hydrates the task store from the saved snapshot exactly once.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Clock, IdGenerator, KeyValueStore
from ..core.state import AppState
from ..storage.kv_store import SqliteKeyValueStore
from ..storage.persistence import SnapshotPersistence
from ..tasks.task_store import TaskStore, utc_now

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.export_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    kv_store: KeyValueStore | None = None,
    clock: Clock = utc_now,
    id_generator: IdGenerator | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and collaborators injectable makes the app easier to test and
    avoids hidden global reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if kv_store is None:
        kv_store = SqliteKeyValueStore(settings.store_db_path)

    persistence = SnapshotPersistence(
        kv_store,
        key=settings.storage_key,
        clock=clock,
        default_category=settings.default_category,
    )
    tasks = persistence.load()

    store = TaskStore(
        tasks,
        persistence=persistence,
        clock=clock,
        id_generator=id_generator,
        active_category=settings.default_category,
    )
    logger.info("Hydrated %d tasks from key=%s", len(store.tasks), persistence.key)
    return AppState(settings=settings, store=store, persistence=persistence)
