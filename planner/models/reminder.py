from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional

from .columns import utcnow


class Reminder(SQLModel, table=True):
    """Scheduled notification for a task. Reminders are never updated."""
    __tablename__ = "reminders"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    task_id: int
    reminder_time: datetime
    notified: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow)
