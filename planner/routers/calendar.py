from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from .. import crud
from ..aggregation import events_on_day, month_day_counts, tasks_on_day
from ..database import Store, get_store
from ..models import DEFAULT_EVENT_COLOR, User
from ..schemas.calendar_event import (
    CalendarEvent as CalendarEventSchema,
    CalendarEventCreate,
    CalendarEventUpdate,
    DayAgenda,
    MonthOverview,
)
from ..schemas.common import DeleteRequest, DeleteResponse
from .auth import get_current_user
from .results import deleted, mutation, rows

router = APIRouter()


@router.get("/list", response_model=List[CalendarEventSchema])
def list_events(
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Calendar events of the current user ordered by start date."""
    return rows(crud.list_calendar_events(store, current_user.id), "calendar events")


@router.post("/create", response_model=Optional[CalendarEventSchema])
def create_event(
    event: CalendarEventCreate,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    result = crud.create_calendar_event(
        store,
        current_user.id,
        {
            "title": event.title,
            "description": event.description,
            "start_date": event.start_date,
            "end_date": event.end_date,
            "task_id": event.task_id,
            "color": event.color or DEFAULT_EVENT_COLOR,
        },
    )
    return mutation(result, "Calendar event")


@router.post("/update", response_model=Optional[CalendarEventSchema])
def update_event(
    event_update: CalendarEventUpdate,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    updates = event_update.model_dump(exclude_unset=True, exclude_none=True, exclude={"id"})
    result = crud.update_calendar_event(store, current_user.id, event_update.id, updates)
    return mutation(result, "Calendar event")


@router.post("/delete", response_model=Optional[DeleteResponse])
def delete_event(
    payload: DeleteRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    return deleted(crud.delete_calendar_event(store, current_user.id, payload.id), "Calendar event")


@router.get("/month", response_model=MonthOverview)
def month_overview(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Number of dated tasks and events on each day of a month."""
    tasks = rows(crud.list_tasks(store, current_user.id), "tasks")
    events = rows(crud.list_calendar_events(store, current_user.id), "calendar events")
    return {"year": year, "month": month, "days": month_day_counts(tasks, events, year, month)}


@router.get("/day", response_model=DayAgenda)
def day_agenda(
    day: date = Query(..., alias="date"),
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Tasks due and events starting on one calendar day."""
    tasks = rows(crud.list_tasks(store, current_user.id), "tasks")
    events = rows(crud.list_calendar_events(store, current_user.id), "calendar events")
    return {"day": day, "tasks": tasks_on_day(tasks, day), "events": events_on_day(events, day)}
