# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskbuddy.cli.bootstrap import create_initial_state
from taskbuddy.core.state import AppState
from taskbuddy.storage.kv_store import InMemoryKeyValueStore
from taskbuddy.storage.persistence import SnapshotPersistence
from taskbuddy.tasks.task_models import Category
from taskbuddy.tasks.task_store import TaskStore

from .fakes import FakePersistence, FixedClock, SequenceIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="TaskBuddy",
        log_level="INFO",
        console_enabled=True,
        data_dir=data_dir,
        store_db_path=data_dir / "taskbuddy.sqlite3",
        export_dir=tmp_path / "exports",
        storage_key="taskbuddy-snapshot",
        default_category=Category.PERSONAL,
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def fake_persistence() -> FakePersistence:
    return FakePersistence()


@pytest.fixture()
def store(clock: FixedClock, fake_persistence: FakePersistence) -> TaskStore:
    """TaskStore with a fixed clock, ids 1, 2, 3, ... and a recording persistence."""
    return TaskStore(persistence=fake_persistence, clock=clock, id_generator=SequenceIds())


@pytest.fixture()
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def persistence(kv: InMemoryKeyValueStore, clock: FixedClock) -> SnapshotPersistence:
    return SnapshotPersistence(kv, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, kv: InMemoryKeyValueStore, clock: FixedClock) -> AppState:
    """
    AppState wired through the real composition root, with an in-memory store.
    """
    return create_initial_state(
        settings=settings,
        kv_store=kv,
        clock=clock,
        id_generator=SequenceIds(),
    )
