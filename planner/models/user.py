from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional
import enum

from .columns import utcnow, value_enum


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(SQLModel, table=True):
    """User identity synced from the external sign-in provider.

    Rows are created and refreshed through ``crud.upsert_user`` keyed by
    ``open_id``; ``id`` is the owner key stored on every other table.
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    open_id: str = Field(max_length=64, unique=True, index=True)
    name: Optional[str] = None
    email: Optional[str] = Field(default=None, max_length=320)
    login_method: Optional[str] = Field(default=None, max_length=64)
    role: UserRole = Field(default=UserRole.USER, sa_type=value_enum(UserRole, "user_role"), nullable=False)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})
    last_signed_in: datetime = Field(default_factory=utcnow)
