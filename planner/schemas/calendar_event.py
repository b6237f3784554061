from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..models import as_utc
from .common import ApiModel
from .task import Task

HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


class CalendarEventCreate(ApiModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    task_id: Optional[int] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR)

    @field_validator("color", mode="before")
    @classmethod
    def blank_color(cls, v):
        # "" means "no colour chosen"
        return None if v == "" else v

    @field_validator("start_date", "end_date")
    @classmethod
    def utc_dates(cls, v):
        return as_utc(v)


class CalendarEventUpdate(ApiModel):
    id: int
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR)

    @field_validator("color", mode="before")
    @classmethod
    def blank_color(cls, v):
        # "" means "no colour chosen"
        return None if v == "" else v

    @field_validator("start_date", "end_date")
    @classmethod
    def utc_dates(cls, v):
        return as_utc(v)


class CalendarEvent(ApiModel):
    id: int
    user_id: int
    task_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    color: str
    created_at: datetime
    updated_at: datetime


class DayCount(ApiModel):
    day: date
    task_count: int
    event_count: int


class MonthOverview(ApiModel):
    year: int
    month: int
    days: List[DayCount]


class DayAgenda(ApiModel):
    day: date
    tasks: List[Task]
    events: List[CalendarEvent]
