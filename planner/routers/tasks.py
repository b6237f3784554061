from typing import List, Optional

from fastapi import APIRouter, Depends

from .. import crud
from ..aggregation import status_counts
from ..database import Store, get_store
from ..models import TaskPriority, TaskStatus, User
from ..schemas.common import DeleteRequest, DeleteResponse
from ..schemas.task import Task as TaskSchema, TaskCreate, TaskStats, TaskToggle, TaskUpdate
from .auth import get_current_user
from .results import deleted, mutation, rows

router = APIRouter()


def _get_update_data(task_update: TaskUpdate) -> dict:
    # Unset and null fields are left untouched; the id selects the row.
    return task_update.model_dump(exclude_unset=True, exclude_none=True, exclude={"id"})


@router.get("/list", response_model=List[TaskSchema])
def list_tasks(
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Tasks of the current user, oldest first."""
    return rows(crud.list_tasks(store, current_user.id), "tasks")


@router.post("/create", response_model=Optional[TaskSchema])
def create_task(
    task: TaskCreate,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Create a task. New tasks start pending, with medium priority unless given."""
    result = crud.create_task(
        store,
        current_user.id,
        {
            "title": task.title,
            "description": task.description,
            "due_date": task.due_date,
            "priority": task.priority or TaskPriority.MEDIUM,
            "status": TaskStatus.PENDING,
        },
    )
    return mutation(result, "Task")


@router.post("/update", response_model=Optional[TaskSchema])
def update_task(
    task_update: TaskUpdate,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Partially update a task of the current user."""
    result = crud.update_task(store, current_user.id, task_update.id, _get_update_data(task_update))
    return mutation(result, "Task")


@router.post("/delete", response_model=Optional[DeleteResponse])
def delete_task(
    payload: DeleteRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    return deleted(crud.delete_task(store, current_user.id, payload.id), "Task")


@router.post("/toggle", response_model=Optional[TaskSchema])
def toggle_task(
    payload: TaskToggle,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Flip a task between completed and pending."""
    task = mutation(crud.get_task(store, current_user.id, payload.id), "Task")
    if task is None:
        return None

    new_status = TaskStatus.PENDING if task.status == TaskStatus.COMPLETED else TaskStatus.COMPLETED
    result = crud.update_task(store, current_user.id, payload.id, {"status": new_status})
    return mutation(result, "Task")


@router.get("/stats", response_model=TaskStats)
def task_stats(
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Task totals per status for the dashboard."""
    counts = status_counts(rows(crud.list_tasks(store, current_user.id), "tasks"))
    return TaskStats(
        total=counts["total"],
        pending=counts[TaskStatus.PENDING.value],
        in_progress=counts[TaskStatus.IN_PROGRESS.value],
        completed=counts[TaskStatus.COMPLETED.value],
    )
