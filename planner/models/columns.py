import enum
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type

import sqlalchemy as sa


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC copy of ``value``. Naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def value_enum(enum_cls: Type[enum.Enum], name: str) -> sa.Enum:
    """Enum column type that persists member values (``in-progress``), not names."""
    return sa.Enum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])


def utc_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``fields`` with every datetime value passed through ``as_utc``."""
    return {key: as_utc(value) if isinstance(value, datetime) else value for key, value in fields.items()}
