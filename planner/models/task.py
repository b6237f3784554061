from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional
import enum

from .columns import utcnow, value_enum


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(SQLModel, table=True):
    """Task owned by exactly one user.

    ``user_id`` is a plain integer; no foreign key constraint is declared.
    """
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: TaskStatus = Field(
        default=TaskStatus.PENDING, sa_type=value_enum(TaskStatus, "task_status"), nullable=False
    )
    priority: TaskPriority = Field(
        default=TaskPriority.MEDIUM, sa_type=value_enum(TaskPriority, "task_priority"), nullable=False
    )
    due_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})
