from typing import Any, Dict

from sqlmodel import select

from ..database import Store, StoreResult, degrades
from ..models import CalendarEvent, utc_fields, utcnow

UPDATABLE_FIELDS = frozenset({"title", "description", "start_date", "end_date", "color"})


def _owned(session, user_id: int, event_id: int):
    return session.exec(
        select(CalendarEvent).where(CalendarEvent.id == event_id, CalendarEvent.user_id == user_id)
    ).first()


@degrades("list calendar events")
def list_calendar_events(store: Store, user_id: int) -> StoreResult:
    """Calendar events of a user ordered by start date."""
    with store.session() as session:
        query = (
            select(CalendarEvent)
            .where(CalendarEvent.user_id == user_id)
            .order_by(CalendarEvent.start_date, CalendarEvent.id)
        )
        return StoreResult.ok(session.exec(query).all())


@degrades("create calendar event")
def create_calendar_event(store: Store, user_id: int, fields: Dict[str, Any]) -> StoreResult:
    fields = utc_fields(fields)
    fields.pop("user_id", None)
    with store.session() as session:
        event = CalendarEvent(**fields, user_id=user_id)
        session.add(event)
        session.commit()
        session.refresh(event)
        return StoreResult.ok(event)


@degrades("update calendar event")
def update_calendar_event(store: Store, user_id: int, event_id: int, updates: Dict[str, Any]) -> StoreResult:
    unknown = set(updates) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Calendar event fields cannot be updated: {', '.join(sorted(unknown))}")

    with store.session() as session:
        event = _owned(session, user_id, event_id)
        if not event:
            return StoreResult.not_found()

        for field, value in utc_fields(updates).items():
            setattr(event, field, value)
        event.updated_at = utcnow()

        session.add(event)
        session.commit()
        session.refresh(event)
        return StoreResult.ok(event)


@degrades("delete calendar event")
def delete_calendar_event(store: Store, user_id: int, event_id: int) -> StoreResult:
    with store.session() as session:
        event = _owned(session, user_id, event_id)
        if not event:
            return StoreResult.not_found()

        session.delete(event)
        session.commit()
        return StoreResult.ok(event)
