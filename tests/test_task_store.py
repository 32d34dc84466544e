# tests/test_task_store.py

from datetime import datetime, timedelta, timezone

import pytest

from taskly.errors import NotFound, ValidationFailed
from taskly.services.query import TaskQuery
from taskly.services.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def store(db) -> TaskStore:
    return TaskStore(db)


def test_create_trims_name_and_normalizes_due_date(store, alice, clock: FakeClock) -> None:
    due = datetime(2025, 1, 1, 0, 0, tzinfo=timezone(timedelta(hours=-5)))
    task = store.create(alice.id, "  Buy milk  ", None, due, clock())

    fetched = store.get_by_id(task.id)
    assert fetched.name == "Buy milk"
    assert fetched.due_date == datetime(2025, 1, 1, 5, 0, tzinfo=timezone.utc)
    assert fetched.due_date.utcoffset() == timedelta(0)
    assert fetched.is_completed is False
    assert fetched.completed_at is None
    assert fetched.created_at == fetched.updated_at == clock()


def test_naive_due_date_is_taken_as_utc(store, alice, clock: FakeClock) -> None:
    task = store.create(alice.id, "Naive", None, datetime(2025, 3, 1, 9, 30), clock())

    assert store.get_by_id(task.id).due_date == datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "name,description,field",
    [
        ("", None, "name"),
        ("   ", None, "name"),
        ("x" * 121, None, "name"),
        ("ok", "d" * 1001, "description"),
    ],
)
def test_create_validates_fields(store, alice, clock, name, description, field) -> None:
    with pytest.raises(ValidationFailed) as info:
        store.create(alice.id, name, description, None, clock())

    assert field in info.value.fields


def test_update_replaces_fields_and_bumps_updated_at(store, alice, clock: FakeClock) -> None:
    task = store.create(alice.id, "Old", "old", datetime(2025, 2, 1, tzinfo=timezone.utc), clock())
    later = clock.advance(hours=1)

    updated = store.update(task.id, "New", None, None, later)

    assert updated.name == "New"
    assert updated.description is None
    assert updated.due_date is None
    assert updated.updated_at == later
    assert updated.created_at == later - timedelta(hours=1)


def test_update_unknown_task_is_not_found(store, clock) -> None:
    with pytest.raises(NotFound):
        store.update("missing", "Name", None, None, clock())


def test_toggle_is_an_involution(store, alice, clock: FakeClock) -> None:
    task = store.create(alice.id, "Toggle me", None, None, clock())

    done = store.toggle_complete(task.id, clock.advance(minutes=1))
    assert done.is_completed is True
    assert done.completed_at == clock()
    assert done.updated_at == clock()

    undone = store.toggle_complete(task.id, clock.advance(minutes=1))
    assert undone.is_completed is False
    assert undone.completed_at is None
    assert undone.updated_at == clock()


def test_delete_twice_reports_not_found(store, alice, clock) -> None:
    task = store.create(alice.id, "Short lived", None, None, clock())

    store.delete(task.id)

    assert store.get_by_id(task.id) is None
    with pytest.raises(NotFound):
        store.delete(task.id)


def test_list_orders_newest_first_and_filters(store, alice, bob, clock: FakeClock) -> None:
    early = store.create(alice.id, "early", None, datetime(2025, 1, 10, tzinfo=timezone.utc), clock())
    clock.advance(minutes=1)
    undated = store.create(alice.id, "undated", None, None, clock())
    clock.advance(minutes=1)
    late = store.create(alice.id, "late", None, datetime(2025, 2, 10, tzinfo=timezone.utc), clock())
    store.create(bob.id, "bob's", None, datetime(2025, 1, 1, tzinfo=timezone.utc), clock())
    store.toggle_complete(late.id, clock())

    everything = TaskQuery(owner_id=alice.id)
    assert [t.name for t in store.list(everything)] == ["late", "undated", "early"]
    assert store.count(everything) == 3

    due_soon = TaskQuery(owner_id=alice.id, due_on_or_before=datetime(2025, 1, 31, tzinfo=timezone.utc))
    assert [t.id for t in store.list(due_soon)] == [early.id]

    open_tasks = TaskQuery(owner_id=alice.id, completed=False)
    assert {t.id for t in store.list(open_tasks)} == {early.id, undated.id}

    assert store.count(TaskQuery(owner_id=alice.id).for_page(1, 2)) == 3
    assert len(store.list(TaskQuery(owner_id=alice.id).for_page(2, 2))) == 1
