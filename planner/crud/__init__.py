"""Owner-scoped data access.

Every function takes the ``Store`` first and returns a ``StoreResult``.
Mutations filter by the owner id, so a row belonging to another user is
reported as not found.
"""

from .users import get_user_by_open_id, upsert_user
from .tasks import create_task, delete_task, get_task, list_tasks, update_task
from .reminders import create_reminder, delete_reminder, list_reminders
from .calendar_events import (
    create_calendar_event,
    delete_calendar_event,
    list_calendar_events,
    update_calendar_event,
)

__all__ = [
    "upsert_user",
    "get_user_by_open_id",
    "list_tasks",
    "get_task",
    "create_task",
    "update_task",
    "delete_task",
    "list_reminders",
    "create_reminder",
    "delete_reminder",
    "list_calendar_events",
    "create_calendar_event",
    "update_calendar_event",
    "delete_calendar_event",
]
