from datetime import datetime

from pydantic import field_validator

from ..models import as_utc
from .common import ApiModel


class ReminderCreate(ApiModel):
    task_id: int
    reminder_time: datetime

    @field_validator("reminder_time")
    @classmethod
    def utc_reminder_time(cls, v):
        return as_utc(v)


class Reminder(ApiModel):
    id: int
    user_id: int
    task_id: int
    reminder_time: datetime
    notified: int
    created_at: datetime
