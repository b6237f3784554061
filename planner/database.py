import enum
import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import NullPool, StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .config import DATABASE_URL

# Import all models to ensure they are registered with SQLModel metadata
from .models import CalendarEvent, Reminder, Task, User  # noqa: F401

logger = logging.getLogger(__name__)


class StoreUnavailable(Exception):
    """Raised inside the data-access layer when there is no usable backend."""


class StoreStatus(str, enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a data-access call.

    ``ok`` carries the row, rows or deleted row in ``value``. ``not_found``
    means no row matched the id for this owner. ``unavailable`` means the
    backend could not be reached and nothing was read or written.
    """

    status: StoreStatus
    value: Any = None

    @classmethod
    def ok(cls, value: Any = None) -> "StoreResult":
        return cls(StoreStatus.OK, value)

    @classmethod
    def not_found(cls) -> "StoreResult":
        return cls(StoreStatus.NOT_FOUND)

    @classmethod
    def unavailable(cls) -> "StoreResult":
        return cls(StoreStatus.UNAVAILABLE)

    @property
    def is_ok(self) -> bool:
        return self.status is StoreStatus.OK

    @property
    def is_not_found(self) -> bool:
        return self.status is StoreStatus.NOT_FOUND

    @property
    def is_unavailable(self) -> bool:
        return self.status is StoreStatus.UNAVAILABLE

    def rows_or_empty(self) -> List[Any]:
        """Rows of a list result, or ``[]`` when the store was unavailable."""
        if self.is_ok and self.value is not None:
            return list(self.value)
        return []


def _create_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live in one connection; share it across threads.
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=False, **kwargs)

    # Postgres/MySQL: no pooling for serverless hosts, and pre-ping stale connections
    return create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )


class Store:
    """Handle on the relational store, built once at startup and passed around.

    A store without an engine is the degraded mode: every data-access call
    reports ``StoreResult.unavailable()``.
    """

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: Optional[str] = None) -> "Store":
        url = DATABASE_URL if database_url is None else database_url
        if not url:
            logger.warning("DATABASE_URL is empty, running without a database")
            return cls(None)
        try:
            return cls(_create_engine(url))
        except Exception:
            logger.warning("Failed to create database engine", exc_info=True)
            return cls(None)

    @property
    def available(self) -> bool:
        return self.engine is not None

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name if self.engine is not None else ""

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Open a session. Raises StoreUnavailable in degraded mode."""
        if self.engine is None:
            raise StoreUnavailable("database not available")
        with Session(self.engine, expire_on_commit=False) as session:
            yield session

    def create_tables(self) -> None:
        """Create all database tables."""
        if self.engine is None:
            logger.warning("Cannot create tables: database not available")
            return
        try:
            SQLModel.metadata.create_all(bind=self.engine)
        except OperationalError:
            logger.warning("Cannot create tables: failed to connect", exc_info=True)

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def degrades(action: str) -> Callable:
    """Turn an unreachable store into ``StoreResult.unavailable()``.

    Only connection-level failures are absorbed; any other database error
    raised by the wrapped call propagates.
    """

    def decorator(func: Callable[..., StoreResult]) -> Callable[..., StoreResult]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> StoreResult:
            try:
                return func(*args, **kwargs)
            except StoreUnavailable:
                logger.warning("Cannot %s: database not available", action)
            except OperationalError as exc:
                logger.warning("Cannot %s: database unreachable (%s)", action, exc.orig)
            return StoreResult.unavailable()

        return wrapper

    return decorator


def get_store(request: Request) -> Store:
    """Dependency returning the store built by ``create_app``."""
    return request.app.state.store
