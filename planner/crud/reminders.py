from typing import Any, Dict

from sqlmodel import select

from ..database import Store, StoreResult, degrades
from ..models import Reminder, utc_fields


@degrades("list reminders")
def list_reminders(store: Store, user_id: int) -> StoreResult:
    """Reminders of a user, soonest first."""
    with store.session() as session:
        query = select(Reminder).where(Reminder.user_id == user_id).order_by(Reminder.reminder_time, Reminder.id)
        return StoreResult.ok(session.exec(query).all())


@degrades("create reminder")
def create_reminder(store: Store, user_id: int, fields: Dict[str, Any]) -> StoreResult:
    fields = utc_fields(fields)
    fields.pop("user_id", None)
    with store.session() as session:
        reminder = Reminder(**fields, user_id=user_id)
        session.add(reminder)
        session.commit()
        session.refresh(reminder)
        return StoreResult.ok(reminder)


@degrades("delete reminder")
def delete_reminder(store: Store, user_id: int, reminder_id: int) -> StoreResult:
    with store.session() as session:
        reminder = session.exec(
            select(Reminder).where(Reminder.id == reminder_id, Reminder.user_id == user_id)
        ).first()
        if not reminder:
            return StoreResult.not_found()

        session.delete(reminder)
        session.commit()
        return StoreResult.ok(reminder)
