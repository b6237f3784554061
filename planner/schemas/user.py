from datetime import datetime
from typing import Optional

from ..models import UserRole
from .common import ApiModel


class User(ApiModel):
    id: int
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None
    role: UserRole
    created_at: datetime
    updated_at: datetime
    last_signed_in: datetime


class LogoutResponse(ApiModel):
    success: bool = True
