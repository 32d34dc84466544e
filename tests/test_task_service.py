# tests/test_task_service.py

from datetime import datetime, timedelta, timezone

import pytest

from taskly.errors import Forbidden, NotFound
from taskly.services.tasks import TaskService

from .fakes import FakeClock


def test_buy_milk_scenario(task_service: TaskService, alice, clock: FakeClock) -> None:
    due = datetime.fromisoformat("2025-01-01T00:00:00-05:00")
    created = task_service.create(alice.id, "Buy milk", due_date=due)

    fetched = task_service.get(alice.id, created.id)
    assert fetched.due_date == datetime(2025, 1, 1, 5, 0, tzinfo=timezone.utc)
    assert fetched.owner_id == alice.id
    assert fetched.owner_username == "alice"

    toggled = task_service.toggle(alice.id, created.id)
    assert toggled.is_completed is True
    assert toggled.completed_at is not None

    toggled_back = task_service.toggle(alice.id, created.id)
    assert toggled_back.is_completed is False
    assert toggled_back.completed_at is None


def test_list_pages_with_totals(task_service: TaskService, alice, bob) -> None:
    for i in range(25):
        task_service.create(alice.id, f"task {i}")
    task_service.create(bob.id, "not alice's")

    first = task_service.list(alice.id, page=1, page_size=20)
    second = task_service.list(alice.id, page=2, page_size=20)

    assert len(second.items) == 5
    assert second.total_count == 25
    assert second.total_pages == 2
    assert second.has_next_page is False
    assert second.has_previous_page is True
    # Identical timestamps still split into disjoint pages.
    ids = {t.id for t in first.items} | {t.id for t in second.items}
    assert len(ids) == 25
    assert all(t.owner_id == alice.id for t in first.items + second.items)


def test_list_filters_by_completion_and_due_date(task_service: TaskService, alice, clock) -> None:
    soon = task_service.create(alice.id, "soon", due_date=clock() + timedelta(days=1))
    task_service.create(alice.id, "later", due_date=clock() + timedelta(days=30))
    task_service.create(alice.id, "whenever")
    task_service.toggle(alice.id, soon.id)

    completed = task_service.list(alice.id, completed=True)
    assert [t.id for t in completed.items] == [soon.id]

    due = task_service.list(alice.id, due_on_or_before=clock() + timedelta(days=7))
    assert [t.name for t in due.items] == ["soon"]

    assert task_service.list(alice.id, completed=False).total_count == 2


def test_list_never_shows_other_users_tasks(task_service: TaskService, alice, bob) -> None:
    task_service.create(bob.id, "bob only")

    result = task_service.list(alice.id)

    assert result.total_count == 0
    assert result.items == []


def test_update_changes_fields(task_service: TaskService, alice, clock: FakeClock) -> None:
    task = task_service.create(alice.id, "Draft", description="first")
    clock.advance(minutes=10)

    updated = task_service.update(alice.id, task.id, "Final", description="second")

    assert updated.name == "Final"
    assert updated.description == "second"
    assert updated.updated_at == clock()


@pytest.mark.parametrize("operation", ["get", "update", "toggle", "delete"])
def test_other_users_task_is_forbidden_and_untouched(
    task_service: TaskService, alice, bob, operation
) -> None:
    task = task_service.create(alice.id, "Alice's", description="private")
    calls = {
        "get": lambda: task_service.get(bob.id, task.id),
        "update": lambda: task_service.update(bob.id, task.id, "Hijacked"),
        "toggle": lambda: task_service.toggle(bob.id, task.id),
        "delete": lambda: task_service.delete(bob.id, task.id),
    }

    with pytest.raises(Forbidden):
        calls[operation]()

    after = task_service.get(alice.id, task.id)
    assert after.name == "Alice's"
    assert after.is_completed is False
    assert after.updated_at == task.updated_at


@pytest.mark.parametrize("operation", ["get", "toggle", "delete"])
def test_unknown_task_is_not_found(task_service: TaskService, alice, operation) -> None:
    with pytest.raises(NotFound):
        getattr(task_service, operation)(alice.id, "no-such-task")


def test_delete_removes_task(task_service: TaskService, alice) -> None:
    task = task_service.create(alice.id, "Temp")

    task_service.delete(alice.id, task.id)

    with pytest.raises(NotFound):
        task_service.delete(alice.id, task.id)
