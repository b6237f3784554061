from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ..models import TaskPriority, TaskStatus, as_utc
from .common import ApiModel


class TaskCreate(ApiModel):
    """Schema for creating new tasks. Owner comes from the session."""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None

    @field_validator("due_date")
    @classmethod
    def utc_due_date(cls, v):
        return as_utc(v)


class TaskUpdate(ApiModel):
    """Schema for partial updates. Fields left out (or null) are not touched."""
    id: int
    status: Optional[TaskStatus] = None
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None

    @field_validator("due_date")
    @classmethod
    def utc_due_date(cls, v):
        return as_utc(v)


class TaskToggle(ApiModel):
    id: int


class Task(ApiModel):
    """Task as returned by the API."""
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TaskStats(ApiModel):
    total: int
    pending: int
    in_progress: int
    completed: int
