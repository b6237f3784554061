"""User identity queries.

``upsert_user`` is the only way user rows are written. It is a single
insert-or-update statement keyed by ``open_id`` so concurrent sign-ins of the
same identity cannot create duplicates.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from .. import config
from ..database import Store, StoreResult, degrades
from ..models import User, UserRole, as_utc, utcnow

logger = logging.getLogger(__name__)

_UNSET = object()

_TEXT_FIELDS = ("name", "email", "login_method")


def _upsert_statement(dialect: str, values: dict, update_set: dict):
    if dialect == "mysql":
        return mysql_insert(User).values(**values).on_duplicate_key_update(**update_set)
    if dialect == "postgresql":
        insert = postgresql_insert
    elif dialect == "sqlite":
        insert = sqlite_insert
    else:
        raise NotImplementedError(f"Upsert is not supported for dialect {dialect!r}")
    return insert(User).values(**values).on_conflict_do_update(
        index_elements=["open_id"],
        set_=update_set,
    )


@degrades("upsert user")
def upsert_user(
    store: Store,
    open_id: str,
    *,
    name=_UNSET,
    email=_UNSET,
    login_method=_UNSET,
    role: Optional[UserRole] = None,
    last_signed_in: Optional[datetime] = None,
) -> StoreResult:
    """Insert the user or update the supplied fields of the existing row.

    Text fields left unset are not touched on update; passing ``None``
    clears them. Returns the stored row.
    """
    if not open_id:
        raise ValueError("User open_id is required for upsert")

    with store.session() as session:
        now = utcnow()
        values = {"open_id": open_id}
        update_set = {}

        supplied = {"name": name, "email": email, "login_method": login_method}
        for field in _TEXT_FIELDS:
            value = supplied[field]
            if value is _UNSET:
                continue
            values[field] = value
            update_set[field] = value

        if last_signed_in is not None:
            values["last_signed_in"] = as_utc(last_signed_in)
            update_set["last_signed_in"] = as_utc(last_signed_in)
        if role is not None:
            values["role"] = role
            update_set["role"] = role
        elif config.OWNER_OPEN_ID and open_id == config.OWNER_OPEN_ID:
            values["role"] = UserRole.ADMIN
            update_set["role"] = UserRole.ADMIN

        values.setdefault("role", UserRole.USER)
        values.setdefault("last_signed_in", now)
        if not update_set:
            update_set["last_signed_in"] = now

        # Core inserts bypass model defaults, so timestamps are explicit.
        values["created_at"] = now
        values["updated_at"] = now
        update_set["updated_at"] = now

        try:
            session.exec(_upsert_statement(store.dialect, values, update_set))
            session.commit()
        except OperationalError:
            raise
        except Exception:
            logger.exception("Failed to upsert user %s", open_id)
            raise

        user = session.exec(select(User).where(User.open_id == open_id)).first()
        return StoreResult.ok(user)


@degrades("get user")
def get_user_by_open_id(store: Store, open_id: str) -> StoreResult:
    with store.session() as session:
        user = session.exec(select(User).where(User.open_id == open_id)).first()
        if user is None:
            return StoreResult.not_found()
        return StoreResult.ok(user)
