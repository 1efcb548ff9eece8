"""Slot availability for a single service day.

A slot is OPEN when no active booking for that service and that exact date
occupies it and it is not blocked. Bookings from any other date never
occupy a slot. Several linked bookings can share one slot, so BOOKED
carries an occupant count. A blocked slot reports BLOCKED even when it
still has bookings.
"""
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional

from shelter.domain.Booking import BookingRecord, BlockedSlot, slot_start
from shelter.domain.Slot import Slot
from shelter.logic.slots.generator import generate_slots


class SlotStatus(str, Enum):
    OPEN = "open"
    BOOKED = "booked"
    BLOCKED = "blocked"


class SlotState:
    def __init__(self, slot: Slot, status: SlotStatus, booking_count: int = 0):
        self.slot = slot
        self.status = status
        self.booking_count = booking_count

    @property
    def is_open(self) -> bool:
        return self.status == SlotStatus.OPEN

    def __str__(self) -> str:
        return f"{self.slot.label} {self.status.value} ({self.booking_count})"

    __repr__ = __str__

    def to_dict(self):
        d = self.slot.to_dict()
        d.update({"status": self.status.value, "booking_count": self.booking_count})
        return d


def _day_key(day) -> str:
    return day.isoformat() if isinstance(day, date) else str(day)


def active_bookings_for(service_type: str, day, time: str,
                        bookings: Iterable[BookingRecord]) -> List[BookingRecord]:
    """Active bookings holding service_type/day/time."""
    key = _day_key(day)
    label = slot_start(time)
    return [b for b in bookings if b.occupies(service_type, key, label)]


def is_blocked(service_type: str, day, time: str, blocked: Iterable[BlockedSlot]) -> bool:
    key = _day_key(day)
    label = slot_start(time)
    return any(b.matches(service_type, key, label) for b in blocked)


def resolve_slots(service_type: str, day: date, bookings: Iterable[BookingRecord],
                  blocked: Iterable[BlockedSlot], slots: Optional[List[Slot]] = None) -> List[SlotState]:
    """Classify every slot of the day as open, booked or blocked."""
    slots = slots if slots is not None else generate_slots(service_type, day)
    key = _day_key(day)
    same_day = [b for b in bookings if b.service_type == service_type and b.date == key and b.is_active]
    blocked_labels = {b.time for b in blocked if b.service_type == service_type and b.date == key}

    states = []
    for slot in slots:
        occupants = sum(1 for b in same_day if b.slot_label == slot.label)
        if slot.label in blocked_labels:
            status = SlotStatus.BLOCKED
        elif occupants:
            status = SlotStatus.BOOKED
        else:
            status = SlotStatus.OPEN
        states.append(SlotState(slot, status, occupants))
    return states


def find_next_available(states: Iterable[SlotState]) -> Optional[Slot]:
    """Earliest open slot by label, or None when every slot is taken or blocked."""
    open_slots = sorted((s.slot for s in states if s.is_open), key=lambda slot: slot.label)
    return open_slots[0] if open_slots else None


__all__ = [
    'SlotStatus', 'SlotState', 'active_bookings_for', 'is_blocked',
    'resolve_slots', 'find_next_available',
]
