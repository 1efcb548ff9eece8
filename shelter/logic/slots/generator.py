"""Day-aware slot generation for shower and laundry bookings.

Saturday runs on its own grid (later start, fewer slots) for both services;
every other day uses the weekday grid. The result depends only on the
service type and the date's weekday.
"""
from datetime import date, datetime, timedelta
from typing import List

from shelter.domain.Slot import Slot
from shelter.utilities.civil_time import day_of_week
from shelter.utilities.constants import SLOT_SCHEDULES, SHOWER, LAUNDRY, SATURDAY


def day_type(day: date) -> str:
    return "saturday" if day_of_week(day) == SATURDAY else "weekday"


def generate_slots(service_type: str, day: date) -> List[Slot]:
    """Ordered slots for service_type on day; raises ValueError for unknown services."""
    try:
        schedule = SLOT_SCHEDULES[service_type]
    except KeyError:
        raise ValueError(f"Unknown slot service: {service_type}")
    start, count, minutes = schedule[day_type(day)]
    cursor = datetime.strptime(start, "%H:%M")
    step = timedelta(minutes=minutes)
    slots = []
    for _ in range(count):
        end = cursor + step
        slots.append(Slot(cursor.strftime("%H:%M"), end.strftime("%H:%M")))
        cursor = end
    return slots


def generate_shower_slots(day: date) -> List[Slot]:
    return generate_slots(SHOWER, day)


def generate_laundry_slots(day: date) -> List[Slot]:
    return generate_slots(LAUNDRY, day)


__all__ = ['day_type', 'generate_slots', 'generate_shower_slots', 'generate_laundry_slots']
