"""Guest activity selectors over already-loaded records.

Pure functions: every "today" is derived from the ``now`` argument.
"""
from datetime import date, datetime, timedelta
import calendar
from typing import Dict, Iterable, Optional, Set

from shelter.domain.Action import (
    Action, MEAL_ADDED, EXTRA_MEALS_ADDED, SHOWER_BOOKED, LAUNDRY_BOOKED, BICYCLE_LOGGED,
)
from shelter.domain.Booking import BookingRecord
from shelter.domain.Guest import Guest
from shelter.utilities.civil_time import civil_date_string, today_civil
from shelter.utilities.constants import (
    RECENT_GUEST_WINDOW_DAYS, NEW_BICYCLE_REPAIR_TYPE, NEW_BICYCLE_COOLDOWN_MONTHS, BICYCLE,
)

_ACTION_SLOTS = {
    MEAL_ADDED: 'meal_action_id',
    EXTRA_MEALS_ADDED: 'meal_action_id',
    SHOWER_BOOKED: 'shower_action_id',
    LAUNDRY_BOOKED: 'laundry_action_id',
    BICYCLE_LOGGED: 'bicycle_action_id',
}


class GuestActions:
    """Latest undoable action per service for one guest today."""

    def __init__(self):
        self.meal_action_id: Optional[str] = None
        self.shower_action_id: Optional[str] = None
        self.laundry_action_id: Optional[str] = None
        self.bicycle_action_id: Optional[str] = None

    def to_dict(self):
        return dict(vars(self))


def recent_guest_ids(meal_records: Iterable, now: Optional[datetime] = None,
                     days: int = RECENT_GUEST_WINDOW_DAYS) -> Set[str]:
    """Guests with a meal since the start of the civil day ``days`` days ago."""
    cutoff = (today_civil(now) - timedelta(days=days)).isoformat()
    recent = set()
    for r in meal_records:
        guest_id = getattr(r, 'guest_id', None)
        day = civil_date_string(getattr(r, 'date', None))
        if guest_id and day and day >= cutoff:
            recent.add(guest_id)
    return recent


def today_action_status_map(actions: Iterable[Action], now: Optional[datetime] = None) -> Dict[str, GuestActions]:
    """Per guest, the id of the most recent action of each kind logged today."""
    today = today_civil(now).isoformat()
    status: Dict[str, GuestActions] = {}
    for action in sorted(actions, key=lambda a: a.timestamp, reverse=True):
        slot = _ACTION_SLOTS.get(action.type)
        if slot is None or not action.guest_id or civil_date_string(action.timestamp) != today:
            continue
        entry = status.setdefault(action.guest_id, GuestActions())
        if getattr(entry, slot) is None:
            setattr(entry, slot, action.id)
    return status


def months_before(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    last = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last))


def has_recent_new_bicycle(records: Iterable[BookingRecord], guest_id: str, now: Optional[datetime] = None,
                           months: int = NEW_BICYCLE_COOLDOWN_MONTHS) -> bool:
    """True when the guest received a new bicycle within the last ``months`` months."""
    cutoff = months_before(today_civil(now), months).isoformat()
    for r in records:
        if r.service_type != BICYCLE or r.guest_id != guest_id:
            continue
        if NEW_BICYCLE_REPAIR_TYPE not in (r.repair_types or []):
            continue
        day = civil_date_string(r.date)
        if day and day >= cutoff:
            return True
    return False


def resolve_bicycle_description(snapshot: Guest, guests: Iterable[Guest]) -> str:
    """Bicycle description from the live guest list, falling back to the snapshot."""
    fresh = next((g for g in guests if g.id == snapshot.id), None)
    if fresh is not None and fresh.bicycle_description:
        return fresh.bicycle_description.strip()
    return (snapshot.bicycle_description or "").strip()


__all__ = [
    'GuestActions', 'recent_guest_ids', 'today_action_status_map', 'months_before',
    'has_recent_new_bicycle', 'resolve_bicycle_description',
]
