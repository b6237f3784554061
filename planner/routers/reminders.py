from typing import List, Optional

from fastapi import APIRouter, Depends

from .. import crud
from ..database import Store, get_store
from ..models import User
from ..schemas.common import DeleteRequest, DeleteResponse
from ..schemas.reminder import Reminder as ReminderSchema, ReminderCreate
from .auth import get_current_user
from .results import deleted, mutation, rows

router = APIRouter()


@router.get("/list", response_model=List[ReminderSchema])
def list_reminders(
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    return rows(crud.list_reminders(store, current_user.id), "reminders")


@router.post("/create", response_model=Optional[ReminderSchema])
def create_reminder(
    reminder: ReminderCreate,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Schedule a reminder for a task.

    The task id is stored as given; it is not checked against the tasks table.
    """
    result = crud.create_reminder(
        store,
        current_user.id,
        {"task_id": reminder.task_id, "reminder_time": reminder.reminder_time},
    )
    return mutation(result, "Reminder")


@router.post("/delete", response_model=Optional[DeleteResponse])
def delete_reminder(
    payload: DeleteRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    return deleted(crud.delete_reminder(store, current_user.id, payload.id), "Reminder")
