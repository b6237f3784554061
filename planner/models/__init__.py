from .user import User, UserRole
from .task import Task, TaskStatus, TaskPriority
from .reminder import Reminder
from .calendar_event import CalendarEvent, DEFAULT_EVENT_COLOR
from .columns import as_utc, utc_fields, utcnow

# Export all models for easy importing
__all__ = [
    "User",
    "UserRole",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "Reminder",
    "CalendarEvent",
    "DEFAULT_EVENT_COLOR",
    "as_utc",
    "utc_fields",
    "utcnow",
]
