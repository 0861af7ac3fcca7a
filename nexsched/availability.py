# nexsched/availability.py
"""Provider availability: weekly schedule, per-date exceptions and overlaps.

Schedules are descriptive data. Nothing here runs at booking time unless
booking enforcement is switched on in the settings.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from .errors import BookingConflictError
from .models import Appointment, AppointmentStatus, DaySchedule
from .store import InMemoryStore

SLOT_MINUTES = 15

# statuses that no longer hold the provider's time
_RELEASED_STATUSES = {AppointmentStatus.cancelled}


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    return start_a < end_b and start_b < end_a


def weekday_index(on_date: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return (on_date.weekday() + 1) % 7


def parse_hhmm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def effective_day(store: InMemoryStore, provider_id: str, on_date: date) -> DaySchedule:
    exception = store.get_day_exception(provider_id, on_date)
    if exception is not None:
        return DaySchedule(is_open=exception.is_open, slots=exception.slots)

    schedule = store.get_weekly_schedule(provider_id)
    if schedule is None:
        return DaySchedule(is_open=False)
    return schedule.schedule.get(weekday_index(on_date), DaySchedule(is_open=False))


def open_windows(store: InMemoryStore, provider_id: str, on_date: date) -> list[tuple[datetime, datetime]]:
    day = effective_day(store, provider_id, on_date)
    if not day.is_open:
        return []
    windows = []
    for slot in day.slots:
        start = datetime.combine(on_date, parse_hhmm(slot.start))
        end = datetime.combine(on_date, parse_hhmm(slot.end))
        if start < end:
            windows.append((start, end))
    return windows


def find_conflicts(
    store: InMemoryStore,
    provider_id: str,
    start: datetime,
    end: datetime,
    ignore_id: Optional[str] = None,
) -> list[Appointment]:
    conflicts = []
    for a in store.appointments_for_provider(provider_id):
        if a.id == ignore_id or a.status in _RELEASED_STATUSES:
            continue
        if overlaps(start, end, a.start, a.end):
            conflicts.append(a)
    return conflicts


def available_starts(
    store: InMemoryStore,
    provider_id: str,
    on_date: date,
    duration_minutes: int = SLOT_MINUTES,
    slot_minutes: int = SLOT_MINUTES,
) -> list[str]:
    slot_delta = timedelta(minutes=slot_minutes)
    duration = timedelta(minutes=duration_minutes)
    booked = [
        a for a in store.appointments_for_provider(provider_id, on_date)
        if a.status not in _RELEASED_STATUSES
    ]

    available = []
    for work_start, work_end in open_windows(store, provider_id, on_date):
        current = work_start
        while current + duration <= work_end:
            candidate_end = current + duration
            if not any(overlaps(current, candidate_end, a.start, a.end) for a in booked):
                available.append(current.strftime("%H:%M"))
            current += slot_delta
    return available


def ensure_bookable(store: InMemoryStore, provider_id: str, start: datetime, end: datetime) -> None:
    """Raise BookingConflictError unless [start, end) fits an open window and is free."""
    windows = open_windows(store, provider_id, start.date())
    if not any(w_start <= start and end <= w_end for w_start, w_end in windows):
        raise BookingConflictError("Horário fora da disponibilidade do profissional")
    if find_conflicts(store, provider_id, start, end):
        raise BookingConflictError("Horário já reservado para este profissional")
