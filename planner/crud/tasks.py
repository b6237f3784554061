from typing import Any, Dict

from sqlmodel import select

from ..database import Store, StoreResult, degrades
from ..models import Task, utc_fields, utcnow

# Fields a partial update may touch. Owner and creation time are fixed.
UPDATABLE_FIELDS = frozenset({"title", "description", "status", "priority", "due_date"})


def _check_updates(updates: Dict[str, Any]) -> None:
    unknown = set(updates) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Task fields cannot be updated: {', '.join(sorted(unknown))}")


def _owned(session, user_id: int, task_id: int):
    return session.exec(select(Task).where(Task.id == task_id, Task.user_id == user_id)).first()


@degrades("list tasks")
def list_tasks(store: Store, user_id: int) -> StoreResult:
    """Tasks of a user, oldest first."""
    with store.session() as session:
        query = select(Task).where(Task.user_id == user_id).order_by(Task.created_at, Task.id)
        return StoreResult.ok(session.exec(query).all())


@degrades("get task")
def get_task(store: Store, user_id: int, task_id: int) -> StoreResult:
    with store.session() as session:
        task = _owned(session, user_id, task_id)
        return StoreResult.ok(task) if task else StoreResult.not_found()


@degrades("create task")
def create_task(store: Store, user_id: int, fields: Dict[str, Any]) -> StoreResult:
    """Insert a task owned by ``user_id`` with exactly the given fields."""
    fields = utc_fields(fields)
    fields.pop("user_id", None)
    with store.session() as session:
        task = Task(**fields, user_id=user_id)
        session.add(task)
        session.commit()
        session.refresh(task)
        return StoreResult.ok(task)


@degrades("update task")
def update_task(store: Store, user_id: int, task_id: int, updates: Dict[str, Any]) -> StoreResult:
    """Apply only the supplied fields to a task of ``user_id``."""
    _check_updates(updates)
    with store.session() as session:
        task = _owned(session, user_id, task_id)
        if not task:
            return StoreResult.not_found()

        for field, value in utc_fields(updates).items():
            setattr(task, field, value)
        task.updated_at = utcnow()

        session.add(task)
        session.commit()
        session.refresh(task)
        return StoreResult.ok(task)


@degrades("delete task")
def delete_task(store: Store, user_id: int, task_id: int) -> StoreResult:
    with store.session() as session:
        task = _owned(session, user_id, task_id)
        if not task:
            return StoreResult.not_found()

        session.delete(task)
        session.commit()
        return StoreResult.ok(task)
