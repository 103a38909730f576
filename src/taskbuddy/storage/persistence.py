# src/taskbuddy/storage/persistence.py

"""
Snapshot persistence for the task store.

One record under a well-known key:
  {"tasks": [...], "lastSavedAt": "YYYY-MM-DD HH:MM:SS"}

Reads are forgiving (bad data means "no prior state"); writes are best-effort
(failures are logged, never raised into the caller).
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.ports import Clock, KeyValueStore
from ..tasks.task_models import Category, Task
from ..tasks.task_store import utc_now
from ..tasks.transitions import TaskCollection, dedupe_by_id

logger = logging.getLogger(__name__)

DEFAULT_KEY = "taskbuddy-snapshot"
EXPORT_PREFIX = "taskbuddy-backup"


@dataclass(frozen=True, slots=True)
class ExportArtifact:
    filename: str
    content: bytes


def _ts_local(dt: datetime) -> str:
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


class SnapshotPersistence:
    def __init__(
        self,
        kv_store: KeyValueStore,
        *,
        key: str = DEFAULT_KEY,
        clock: Clock = utc_now,
        default_category: Category = Category.PERSONAL,
    ) -> None:
        self._kv = kv_store
        self._key = key
        self._clock = clock
        self._default_category = default_category
        self._last_saved_at: str | None = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def last_saved_at(self) -> str | None:
        return self._last_saved_at

    # ---- read ----

    def _task_from_raw(self, raw: Any) -> Task | None:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object task entry: %r", raw)
            return None

        category = Category.parse(raw.get("category"))
        if category is None:
            logger.warning(
                "Unknown category %r for task id=%s; using %s.",
                raw.get("category"),
                raw.get("id"),
                self._default_category.value,
            )
            category = self._default_category

        try:
            return Task.from_dict(raw, category=category)
        except ValueError as e:
            logger.warning("Skipping malformed task entry: %s", e)
            return None

    def load(self) -> TaskCollection:
        """
        Read the persisted snapshot.

        Absent, unreadable or corrupt records all mean "no prior state": an empty
        collection is returned and last_saved_at stays unset.
        """
        try:
            raw = self._kv.get(self._key)
        except Exception:
            logger.exception("Failed to read snapshot key=%s", self._key)
            return ()

        if raw is None:
            logger.info("No saved snapshot under key=%s", self._key)
            return ()

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError):
            logger.exception("Corrupt snapshot under key=%s; starting empty.", self._key)
            return ()

        if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
            logger.warning("Snapshot under key=%s has unexpected shape; starting empty.", self._key)
            return ()

        parsed = [t for t in (self._task_from_raw(r) for r in data["tasks"]) if t is not None]
        tasks, dropped = dedupe_by_id(parsed)
        if dropped:
            logger.warning("Dropped duplicate task ids from snapshot: %s", dropped)

        saved_at = data.get("lastSavedAt")
        self._last_saved_at = saved_at if isinstance(saved_at, str) else None

        logger.info("Loaded %d tasks (last saved %s)", len(tasks), self._last_saved_at)
        return tasks

    # ---- write ----

    def save(self, tasks: Sequence[Task]) -> bool:
        saved_at = _ts_local(self._clock())
        payload = {
            "tasks": [t.to_dict() for t in tasks],
            "lastSavedAt": saved_at,
        }
        try:
            self._kv.set(self._key, json.dumps(payload, ensure_ascii=False))
        except Exception:
            logger.exception("Failed to save %d tasks under key=%s", len(tasks), self._key)
            return False
        self._last_saved_at = saved_at
        logger.debug("Saved %d tasks at %s", len(tasks), saved_at)
        return True

    def erase(self) -> bool:
        try:
            self._kv.delete(self._key)
        except Exception:
            logger.exception("Failed to erase snapshot key=%s", self._key)
            return False
        self._last_saved_at = None
        logger.info("Erased snapshot key=%s", self._key)
        return True

    # ---- export ----

    def export_snapshot(self, tasks: Sequence[Task]) -> ExportArtifact:
        """Pretty-printed task array named after today's local date. No side effects."""
        day = self._clock().astimezone().strftime("%Y-%m-%d")
        body = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)
        return ExportArtifact(
            filename=f"{EXPORT_PREFIX}-{day}.json",
            content=body.encode("utf-8"),
        )


def write_export(artifact: ExportArtifact, directory: str | Path) -> Path:
    """Deliver an export artifact into directory (atomic replace)."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / artifact.filename
    tmp = path.with_suffix(".tmp")
    try:
        tmp.write_bytes(artifact.content)
        os.replace(tmp, path)
    except OSError:
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)
        raise
    with contextlib.suppress(Exception):
        # Best-effort: exports contain personal notes.
        os.chmod(path, 0o600)
    logger.info("Exported %d bytes to %s", len(artifact.content), path)
    return path
