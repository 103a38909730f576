# tests/test_task_store.py

from __future__ import annotations

from datetime import UTC, datetime

from taskbuddy.tasks.task_models import FILTER_ALL, Category, StatusFilter, Task, TaskStats
from taskbuddy.tasks.task_store import MonotonicIdGenerator, TaskStore

from .fakes import FIXED_NOW, FakePersistence, FixedClock, SequenceIds


def _task(tid: int, text: str, category: Category = Category.WORK, completed: bool = False) -> Task:
    return Task(
        id=tid,
        text=text,
        category=category,
        completed=completed,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


def test_add_task_assigns_fresh_ids_in_insertion_order(store: TaskStore) -> None:
    texts = ["a", "  ", "b", "", "c", "\t\n"]
    for t in texts:
        store.add_task(t, Category.WORK)

    assert [t.text for t in store.tasks] == ["a", "b", "c"]
    ids = [t.id for t in store.tasks]
    assert len(set(ids)) == len(ids)


def test_add_task_trims_and_uses_clock_and_defaults(store: TaskStore) -> None:
    task = store.add_task("  Buy milk  ", "shopping")

    assert task is not None
    assert task.text == "Buy milk"
    assert task.category is Category.SHOPPING
    assert task.completed is False
    assert task.created_at == FIXED_NOW


def test_add_task_defaults_to_active_category(store: TaskStore) -> None:
    assert store.set_active_category("Health")
    task = store.add_task("Stretch")

    assert task is not None
    assert task.category is Category.HEALTH


def test_add_task_invalid_input_is_a_silent_noop(
    store: TaskStore, fake_persistence: FakePersistence
) -> None:
    assert store.add_task("", Category.WORK) is None
    assert store.add_task("   ") is None
    assert store.add_task("Valid text", "Groceries") is None
    assert store.add_task(None) is None  # type: ignore[arg-type]

    assert store.tasks == ()
    assert fake_persistence.saves == []


def test_toggle_twice_restores_original(store: TaskStore) -> None:
    first = store.add_task("one", Category.WORK)
    store.add_task("two", Category.PERSONAL)
    assert first is not None
    before = store.tasks

    toggled = store.toggle_task(first.id)
    assert toggled is not None and toggled.completed is True
    assert [t.id for t in store.tasks] == [t.id for t in before]

    store.toggle_task(first.id)
    assert store.tasks == before


def test_toggle_unknown_id_is_noop(store: TaskStore, fake_persistence: FakePersistence) -> None:
    store.add_task("one", Category.WORK)
    saves_before = len(fake_persistence.saves)

    assert store.toggle_task(999) is None
    assert store.toggle_task("1") is None
    assert len(fake_persistence.saves) == saves_before


def test_delete_is_idempotent_and_preserves_order(store: TaskStore) -> None:
    a = store.add_task("a", Category.WORK)
    b = store.add_task("b", Category.WORK)
    c = store.add_task("c", Category.WORK)
    assert a and b and c

    assert store.delete_task(b.id) is True
    assert store.delete_task(b.id) is False
    assert [t.text for t in store.tasks] == ["a", "c"]


def test_every_change_is_saved_including_transition_to_empty(
    store: TaskStore, fake_persistence: FakePersistence
) -> None:
    task = store.add_task("only one", Category.WORK)
    assert task is not None
    store.toggle_task(task.id)
    store.delete_task(task.id)

    assert len(fake_persistence.saves) == 3
    assert fake_persistence.saves[-1] == ()


def test_failed_save_keeps_in_memory_state(clock: FixedClock) -> None:
    persistence = FakePersistence(fail_save=True)
    store = TaskStore(persistence=persistence, clock=clock, id_generator=SequenceIds())

    task = store.add_task("still here", Category.WORK)

    assert task is not None
    assert [t.text for t in store.tasks] == ["still here"]


def test_clear_all_empties_and_erases(store: TaskStore, fake_persistence: FakePersistence) -> None:
    store.add_task("a", Category.WORK)
    store.add_task("b", Category.HEALTH)
    store.set_filter_category("Health")

    assert store.clear_all() is True
    assert store.tasks == ()
    assert fake_persistence.erases == 1
    assert store.filter_category == FILTER_ALL


def test_clear_all_is_all_or_nothing_when_erase_fails(clock: FixedClock) -> None:
    persistence = FakePersistence(fail_erase=True)
    store = TaskStore(persistence=persistence, clock=clock, id_generator=SequenceIds())
    store.add_task("a", Category.WORK)

    assert store.clear_all() is False
    assert [t.text for t in store.tasks] == ["a"]


def test_filtered_tasks_by_category_keeps_order(store: TaskStore) -> None:
    store.add_task("w1", Category.WORK)
    store.add_task("p1", Category.PERSONAL)
    store.add_task("w2", Category.WORK)

    assert store.filtered_tasks().texts() == ["w1", "p1", "w2"]

    assert store.set_filter_category(Category.WORK)
    assert store.filtered_tasks().texts() == ["w1", "w2"]

    assert store.set_filter_category("all")
    assert list(store.filtered_tasks()) == list(store.tasks)


def test_filtered_tasks_is_restartable_and_does_not_mutate(store: TaskStore) -> None:
    store.add_task("a", Category.WORK)
    store.add_task("b", Category.WORK)
    before = store.tasks

    view = store.filtered_tasks()
    assert [t.text for t in view] == ["a", "b"]
    assert [t.text for t in view] == ["a", "b"]
    assert len(view) == 2
    assert store.tasks is before


def test_filter_to_empty_category_is_allowed(store: TaskStore) -> None:
    store.add_task("a", Category.WORK)

    assert store.set_filter_category("Learning") is True
    assert store.filtered_tasks().texts() == []
    assert store.set_filter_category("Nope") is False
    assert store.filter_category is Category.LEARNING


def test_status_filter_and_search(store: TaskStore) -> None:
    milk = store.add_task("Buy milk", Category.SHOPPING)
    store.add_task("Buy bread", Category.SHOPPING)
    store.add_task("Write report", Category.WORK)
    assert milk is not None
    store.toggle_task(milk.id)

    assert store.set_status_filter("active")
    assert store.filtered_tasks().texts() == ["Buy bread", "Write report"]

    assert store.set_status_filter(StatusFilter.COMPLETED)
    assert store.filtered_tasks().texts() == ["Buy milk"]

    store.set_status_filter("all")
    store.set_search_query("  BUY ")
    assert store.filtered_tasks().texts() == ["Buy milk", "Buy bread"]

    assert store.set_status_filter("done") is False
    store.set_search_query("")
    assert len(store.filtered_tasks()) == 3


def test_stats_on_empty_store(store: TaskStore) -> None:
    assert store.stats() == TaskStats(total=0, completed=0, remaining=0, completion_percent=0)


def test_stats_rounds_half_up(clock: FixedClock) -> None:
    tasks = [_task(i, f"t{i}", completed=(i == 1)) for i in range(1, 9)]
    store = TaskStore(tasks, clock=clock)

    s = store.stats()
    assert s.completed + s.remaining == s.total == 8
    # 1/8 = 12.5%
    assert s.completion_percent == 13


def test_stats_two_thirds(clock: FixedClock) -> None:
    tasks = [_task(1, "a", completed=True), _task(2, "b", completed=True), _task(3, "c")]
    assert TaskStore(tasks, clock=clock).stats().completion_percent == 67


def test_category_counts_cover_full_collection(store: TaskStore) -> None:
    store.add_task("w1", Category.WORK)
    store.add_task("w2", Category.WORK)
    store.add_task("h1", Category.HEALTH)
    store.set_filter_category(Category.HEALTH)

    counts = store.category_counts()
    assert set(counts) == set(Category)
    assert counts[Category.WORK] == 2
    assert counts[Category.HEALTH] == 1
    assert counts[Category.LEARNING] == 0
    assert store.nonempty_categories() == [Category.WORK, Category.HEALTH]


def test_hydrated_duplicates_are_dropped(clock: FixedClock) -> None:
    store = TaskStore([_task(1, "first"), _task(1, "dupe"), _task(2, "second")], clock=clock)

    assert [t.text for t in store.tasks] == ["first", "second"]


def test_id_generator_collisions_are_skipped(clock: FixedClock) -> None:
    store = TaskStore([_task(1, "existing")], clock=clock, id_generator=SequenceIds([1, 1, 2]))

    task = store.add_task("new", Category.WORK)
    assert task is not None
    assert task.id == 2


def test_monotonic_ids_never_go_backwards() -> None:
    gen = MonotonicIdGenerator(start_after=10**15)

    a, b, c = gen(), gen(), gen()
    assert 10**15 < a < b < c


def test_default_store_never_reuses_hydrated_ids(clock: FixedClock) -> None:
    big = 10**15
    store = TaskStore([_task(big, "from disk")], clock=clock)

    task = store.add_task("new", Category.WORK)
    assert task is not None
    assert task.id > big


def test_scenario_stats_filter_and_clear(store: TaskStore, fake_persistence: FakePersistence) -> None:
    milk = store.add_task("Buy milk", Category.SHOPPING)
    store.add_task("Write report", Category.WORK)
    assert milk is not None
    assert store.stats().to_dict() == {
        "total": 2,
        "completed": 0,
        "remaining": 2,
        "completionPercent": 0,
    }

    store.toggle_task(milk.id)
    assert store.stats().to_dict() == {
        "total": 2,
        "completed": 1,
        "remaining": 1,
        "completionPercent": 50,
    }

    store.set_filter_category("Work")
    assert store.filtered_tasks().texts() == ["Write report"]

    assert store.clear_all()
    assert store.tasks == ()
    assert fake_persistence.erases == 1


def test_add_task_rejects_text_with_lone_surrogates(
    store: TaskStore, fake_persistence: FakePersistence
) -> None:
    # What the console hands over when stdin carries invalid UTF-8 (surrogateescape).
    assert store.add_task("caf\udce9", Category.WORK) is None

    assert store.tasks == ()
    assert fake_persistence.saves == []
    assert store.add_task("café", Category.WORK) is not None


def test_bool_ids_are_not_task_ids(store: TaskStore, fake_persistence: FakePersistence) -> None:
    task = store.add_task("first", Category.WORK)
    assert task is not None and task.id == 1
    saves_before = len(fake_persistence.saves)

    assert store.toggle_task(True) is None
    assert store.delete_task(True) is False

    assert store.tasks == (task,)
    assert len(fake_persistence.saves) == saves_before
