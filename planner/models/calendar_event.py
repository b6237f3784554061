from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional

from .columns import utcnow

DEFAULT_EVENT_COLOR = "#3b82f6"


class CalendarEvent(SQLModel, table=True):
    __tablename__ = "calendarEvents"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    task_id: Optional[int] = None
    title: str = Field(min_length=1)
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    color: str = Field(default=DEFAULT_EVENT_COLOR, max_length=7)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})
