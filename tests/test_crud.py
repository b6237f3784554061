"""Data-access layer: owner scoping, partial updates, degraded mode."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from planner import crud
from planner.database import StoreStatus
from planner.models import DEFAULT_EVENT_COLOR, TaskPriority, TaskStatus


def test_create_task_applies_entity_defaults(store, user):
    """Fields left out of the insert take the column defaults."""
    result = crud.create_task(store, user.id, {"title": "Write report"})

    assert result.is_ok
    task = result.value
    assert task.id is not None
    assert task.user_id == user.id
    assert task.status == TaskStatus.PENDING
    assert task.priority == TaskPriority.MEDIUM
    assert task.due_date is None
    assert isinstance(task.created_at, datetime)


def test_create_task_ignores_owner_in_fields(store, user, other_user):
    task = crud.create_task(store, user.id, {"title": "Mine", "user_id": other_user.id}).value
    assert task.user_id == user.id


def test_list_tasks_is_scoped_and_ordered(store, user, other_user):
    crud.create_task(store, user.id, {"title": "First"})
    crud.create_task(store, other_user.id, {"title": "Not mine"})
    crud.create_task(store, user.id, {"title": "Second"})

    result = crud.list_tasks(store, user.id)

    assert result.is_ok
    assert [task.title for task in result.value] == ["First", "Second"]


def test_update_task_is_partial(store, user):
    due = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)
    task = crud.create_task(
        store,
        user.id,
        {"title": "Buy milk", "description": "2%", "priority": TaskPriority.HIGH, "due_date": due},
    ).value

    updated = crud.update_task(store, user.id, task.id, {"status": TaskStatus.COMPLETED}).value

    assert updated.status == TaskStatus.COMPLETED
    assert updated.title == "Buy milk"
    assert updated.description == "2%"
    assert updated.priority == TaskPriority.HIGH
    assert updated.due_date == due
    assert updated.created_at == task.created_at
    assert updated.updated_at >= task.updated_at


def test_update_task_rejects_fixed_fields(store, user, other_user):
    task = crud.create_task(store, user.id, {"title": "Keep owner"}).value

    with pytest.raises(ValueError):
        crud.update_task(store, user.id, task.id, {"user_id": other_user.id})
    with pytest.raises(ValueError):
        crud.update_task(store, user.id, task.id, {"created_at": datetime(2000, 1, 1, tzinfo=timezone.utc)})


def test_update_and_delete_of_other_users_task_are_not_found(store, user, other_user):
    task = crud.create_task(store, user.id, {"title": "Private"}).value

    assert crud.update_task(store, other_user.id, task.id, {"title": "Hijacked"}).is_not_found
    assert crud.delete_task(store, other_user.id, task.id).is_not_found

    remaining = crud.list_tasks(store, user.id).value
    assert [t.title for t in remaining] == ["Private"]


def test_delete_task_returns_deleted_row(store, user):
    task = crud.create_task(store, user.id, {"title": "Temporary"}).value

    result = crud.delete_task(store, user.id, task.id)

    assert result.is_ok
    assert result.value.id == task.id
    assert crud.list_tasks(store, user.id).value == []
    assert crud.delete_task(store, user.id, task.id).is_not_found


def test_reminders_have_no_update_and_are_scoped(store, user, other_user):
    later = datetime(2024, 5, 2, 8, 0, tzinfo=timezone.utc)
    sooner = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)
    crud.create_reminder(store, user.id, {"task_id": 7, "reminder_time": later})
    first = crud.create_reminder(store, user.id, {"task_id": 7, "reminder_time": sooner}).value
    crud.create_reminder(store, other_user.id, {"task_id": 9, "reminder_time": sooner})

    reminders = crud.list_reminders(store, user.id).value

    assert [r.reminder_time for r in reminders] == [sooner, later]
    assert first.notified == 0
    assert not hasattr(crud, "update_reminder")
    assert crud.delete_reminder(store, other_user.id, first.id).is_not_found
    assert crud.delete_reminder(store, user.id, first.id).is_ok
    assert len(crud.list_reminders(store, user.id).value) == 1


def test_calendar_event_crud(store, user, other_user):
    start = datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc)
    event = crud.create_calendar_event(store, user.id, {"title": "Standup", "start_date": start}).value
    assert event.color == DEFAULT_EVENT_COLOR

    crud.create_calendar_event(store, user.id, {"title": "Earlier", "start_date": datetime(2024, 3, 1, tzinfo=timezone.utc)})
    titles = [e.title for e in crud.list_calendar_events(store, user.id).value]
    assert titles == ["Earlier", "Standup"]

    updated = crud.update_calendar_event(store, user.id, event.id, {"color": "#ff0000"}).value
    assert updated.color == "#ff0000"
    assert updated.title == "Standup"
    assert updated.start_date == start

    assert crud.update_calendar_event(store, other_user.id, event.id, {"title": "x"}).is_not_found
    with pytest.raises(ValueError):
        crud.update_calendar_event(store, user.id, event.id, {"task_id": 3})

    assert crud.delete_calendar_event(store, user.id, event.id).is_ok
    assert [e.title for e in crud.list_calendar_events(store, user.id).value] == ["Earlier"]


def test_task_datetimes_round_trip_as_utc(store, user):
    due = datetime(2024, 3, 15, 23, 30, tzinfo=timezone(timedelta(hours=-2)))

    created = crud.create_task(store, user.id, {"title": "Call", "due_date": due}).value
    stored = crud.get_task(store, user.id, created.id).value

    assert stored.due_date == due
    assert stored.due_date.utcoffset() == timedelta(0)
    assert stored.due_date.day == 16
    assert stored.created_at.tzinfo is not None

    updated = crud.update_task(store, user.id, created.id, {"due_date": datetime(2024, 4, 1, 8, 0)}).value
    assert updated.due_date == datetime(2024, 4, 1, 8, 0, tzinfo=timezone.utc)


def test_enum_columns_store_values(store, user):
    crud.create_task(store, user.id, {"title": "Draft", "status": TaskStatus.IN_PROGRESS})

    with store.engine.connect() as conn:
        rows = conn.execute(text("SELECT status, priority FROM tasks")).all()

    assert [tuple(row) for row in rows] == [("in-progress", "medium")]


@pytest.mark.parametrize(
    "call",
    [
        lambda s: crud.list_tasks(s, 1),
        lambda s: crud.create_task(s, 1, {"title": "x"}),
        lambda s: crud.update_task(s, 1, 1, {"title": "x"}),
        lambda s: crud.delete_task(s, 1, 1),
        lambda s: crud.list_reminders(s, 1),
        lambda s: crud.create_reminder(s, 1, {"task_id": 1, "reminder_time": datetime(2024, 1, 1)}),
        lambda s: crud.delete_reminder(s, 1, 1),
        lambda s: crud.list_calendar_events(s, 1),
        lambda s: crud.create_calendar_event(s, 1, {"title": "x", "start_date": datetime(2024, 1, 1)}),
        lambda s: crud.update_calendar_event(s, 1, 1, {"title": "x"}),
        lambda s: crud.delete_calendar_event(s, 1, 1),
        lambda s: crud.upsert_user(s, "someone"),
        lambda s: crud.get_user_by_open_id(s, "someone"),
    ],
)
def test_every_call_reports_unavailable_without_a_store(offline_store, call):
    result = call(offline_store)

    assert result.status is StoreStatus.UNAVAILABLE
    assert result.value is None
    assert result.rows_or_empty() == []
