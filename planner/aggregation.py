"""Day bucketing of tasks and calendar events.

Tasks are placed on their ``due_date`` and events on their ``start_date``.
Only the UTC calendar day counts: 2024-03-15T00:01Z and 2024-03-15T23:59Z share
a bucket. Items without the relevant date are left out of every bucket.
"""

import calendar
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from .models import CalendarEvent, Task, TaskStatus, as_utc


@dataclass(frozen=True)
class DayCount:
    day: date
    task_count: int
    event_count: int


def same_day(moment: Optional[datetime], day: date) -> bool:
    if moment is None:
        return False
    return as_utc(moment).date() == day


def tasks_on_day(tasks: Iterable[Task], day: date) -> List[Task]:
    return [task for task in tasks if same_day(task.due_date, day)]


def events_on_day(events: Iterable[CalendarEvent], day: date) -> List[CalendarEvent]:
    return [event for event in events if same_day(event.start_date, day)]


def _count_by_day(moments: Iterable[Optional[datetime]]) -> Counter:
    return Counter(as_utc(moment).date() for moment in moments if moment is not None)


def month_day_counts(
    tasks: Iterable[Task],
    events: Iterable[CalendarEvent],
    year: int,
    month: int,
) -> List[DayCount]:
    """One entry per day of the month with the number of tasks and events on it."""
    task_days = _count_by_day(task.due_date for task in tasks)
    event_days = _count_by_day(event.start_date for event in events)
    _, days_in_month = calendar.monthrange(year, month)

    counts = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        counts.append(DayCount(day=day, task_count=task_days[day], event_count=event_days[day]))
    return counts


def status_counts(tasks: Iterable[Task]) -> Dict[str, int]:
    counter = Counter(TaskStatus(task.status) for task in tasks)
    counts = {status.value: counter[status] for status in TaskStatus}
    counts["total"] = sum(counter.values())
    return counts
