"""Services store: shower, laundry and bicycle bookings.

Slot bookings are resolved and inserted under one lock so two staff
members booking "next available" at the same moment cannot both receive
the same slot.
"""
import logging
from datetime import date, datetime
from threading import RLock
from typing import Iterable, List, Optional

from shelter.domain.Action import SHOWER_BOOKED, LAUNDRY_BOOKED, BICYCLE_LOGGED
from shelter.domain.Booking import BookingRecord, slot_start
from shelter.domain.Guest import Guest
from shelter.infra.Data_Store import RecordNotFoundError
from shelter.infra.paths import BOOKINGS_TABLE
from shelter.logic.guests.activity import has_recent_new_bicycle, resolve_bicycle_description
from shelter.logic.slots.availability import SlotState, SlotStatus, find_next_available, resolve_slots
from shelter.domain.Slot import Slot
from shelter.stores.base import Store, failed
from shelter.utilities.constants import (
    SHOWER, LAUNDRY, BICYCLE, SLOT_SERVICES, NEW_BICYCLE_REPAIR_TYPE, NEW_BICYCLE_COOLDOWN_MONTHS,
)

logger = logging.getLogger(__name__)

BOOKED = "booked"
WAITLISTED = "waitlisted"
CANCELLED = "cancelled"
DONE = "done"
PENDING = "pending"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
BOOKING_STATUSES = (BOOKED, WAITLISTED, CANCELLED, DONE, PENDING, IN_PROGRESS, COMPLETED)
OFFSITE_LAUNDRY = "offsite"

_BOOKING_ACTIONS = {SHOWER: SHOWER_BOOKED, LAUNDRY: LAUNDRY_BOOKED}


class SlotUnavailableError(Exception):
    """The requested slot is blocked, already taken, or no slot is left."""


def _check_service(service_type: str):
    if service_type not in SLOT_SERVICES:
        raise ValueError(f"Unknown slot service: {service_type}")


class ServicesStore(Store):
    name = "services"

    def __init__(self, *args, blocked_slots=None, history=None, guests=None, **kwargs):
        super().__init__(*args, **kwargs)
        self._blocked_slots = blocked_slots
        self._history = history
        self._guests = guests
        self._bookings: List[BookingRecord] = []
        self._lock = RLock()

    # --- Reads ---------------------------------------------------------------
    def load(self, start: Optional[date] = None, end: Optional[date] = None):
        if start is not None and end is not None:
            rows = self._db.fetch_for_period(BOOKINGS_TABLE, start, end)
        else:
            rows = self._db.fetch_all(BOOKINGS_TABLE)
        self._bookings = [BookingRecord.from_dict(r) for r in rows]
        logger.info("Loaded %s service bookings", len(self._bookings))
        return self

    def bookings(self, service_type: Optional[str] = None, day: Optional[date] = None) -> List[BookingRecord]:
        key = day.isoformat() if day else None
        return [b for b in self._bookings
                if (service_type is None or b.service_type == service_type)
                and (key is None or b.date == key)]

    def get_booking(self, booking_id: str) -> BookingRecord:
        booking = next((b for b in self._bookings if b.id == booking_id), None)
        if booking is None:
            raise RecordNotFoundError(BOOKINGS_TABLE, booking_id)
        return booking

    def slot_states(self, service_type: str, day: date) -> List[SlotState]:
        _check_service(service_type)
        blocked = self._blocked_slots.blocked(service_type, day) if self._blocked_slots else []
        return resolve_slots(service_type, day, self._bookings, blocked)

    def next_available(self, service_type: str, day: date) -> Optional[Slot]:
        return find_next_available(self.slot_states(service_type, day))

    # --- Mutations -----------------------------------------------------------
    def _insert(self, row: dict, failure_message: str, now: Optional[datetime] = None) -> Optional[BookingRecord]:
        saved = self._persist(lambda: self._db.insert(BOOKINGS_TABLE, row), failure_message)
        if failed(saved):
            return None
        booking = BookingRecord.from_dict(saved)
        self._bookings.append(booking)
        self._changed('add', saved)
        action = _BOOKING_ACTIONS.get(booking.service_type)
        if action and booking.status == BOOKED and self._history is not None:
            self._history.add_action(action, booking.id, booking.guest_id, now=now)
        return booking

    def book_slot(self, service_type: str, guest_id: str, day: date, time: str,
                  linked_to: Optional[str] = None, laundry_type: Optional[str] = None,
                  now: Optional[datetime] = None) -> Optional[BookingRecord]:
        """Book a specific slot.

        A blocked slot is always refused. A booked slot is refused unless the
        new booking is linked to an existing one (guests sharing a slot).
        """
        _check_service(service_type)
        label = slot_start(time)
        with self._lock:
            state = next((s for s in self.slot_states(service_type, day) if s.slot.label == label), None)
            if state is None:
                raise ValueError(f"{time} is not a {service_type} slot on {day.isoformat()}")
            if state.status == SlotStatus.BLOCKED:
                raise SlotUnavailableError(f"{service_type} slot {label} on {day.isoformat()} is blocked")
            if state.status == SlotStatus.BOOKED and not linked_to:
                raise SlotUnavailableError(f"{service_type} slot {label} on {day.isoformat()} is already booked")
            row = {
                'service_type': service_type, 'date': day.isoformat(), 'time': label,
                'guest_id': guest_id, 'status': BOOKED, 'linked_to': linked_to, 'laundry_type': laundry_type,
            }
            booking = self._insert(row, f"Failed to book {service_type}", now=now)
        if booking:
            logger.info("Booked %s %s at %s for guest %s", service_type, booking.date, label, guest_id)
        return booking

    def book_next_available(self, service_type: str, guest_id: str, day: Optional[date] = None,
                            now: Optional[datetime] = None) -> Optional[BookingRecord]:
        """Book the earliest open slot, or return None when the day is full."""
        day = day or self.now(now).date()
        with self._lock:
            slot = self.next_available(service_type, day)
            if slot is None:
                logger.info("No %s slots left on %s", service_type, day.isoformat())
                return None
            return self.book_slot(service_type, guest_id, day, slot.label, now=now)

    def add_to_waitlist(self, service_type: str, guest_id: str, day: Optional[date] = None,
                        now: Optional[datetime] = None) -> Optional[BookingRecord]:
        _check_service(service_type)
        day = day or self.now(now).date()
        row = {'service_type': service_type, 'date': day.isoformat(), 'time': None,
               'guest_id': guest_id, 'status': WAITLISTED}
        return self._insert(row, f"Failed to add guest to the {service_type} waitlist", now=now)

    def book_offsite_laundry(self, guest_id: str, day: Optional[date] = None,
                             now: Optional[datetime] = None) -> Optional[BookingRecord]:
        """Off-site laundry has no on-site slot, so it never occupies one."""
        day = day or self.now(now).date()
        row = {'service_type': LAUNDRY, 'date': day.isoformat(), 'time': None,
               'guest_id': guest_id, 'status': BOOKED, 'laundry_type': OFFSITE_LAUNDRY}
        return self._insert(row, "Failed to book off-site laundry", now=now)

    def update_booking_status(self, booking_id: str, status: str) -> Optional[BookingRecord]:
        if status not in BOOKING_STATUSES:
            raise ValueError(f"Unknown booking status: {status}")
        booking = self.get_booking(booking_id)
        saved = self._persist(lambda: self._db.update(BOOKINGS_TABLE, booking_id, {'status': status}),
                              "Failed to update booking")
        if failed(saved):
            return None
        booking.status = status
        self._changed('update', saved)
        return booking

    def cancel_booking(self, booking_id: str) -> Optional[BookingRecord]:
        return self.update_booking_status(booking_id, CANCELLED)

    def add_bicycle_record(self, guest: Guest, repair_types: Iterable[str], day: Optional[date] = None,
                           now: Optional[datetime] = None) -> Optional[BookingRecord]:
        """Log a bicycle repair for a guest.

        The guest must not be banned from bicycle services and must have a
        bicycle description on file; a "New Bicycle" is allowed once per
        cooldown period.
        """
        current = self.now(now)
        known = self._guests.guests if self._guests is not None else []
        fresh = next((g for g in known if g.id == guest.id), guest)
        if fresh.banned_from_bicycle:
            raise ValueError(f"{fresh.display_name} is banned from bicycle services")
        if not resolve_bicycle_description(guest, known):
            raise ValueError(f"{fresh.display_name} has no bicycle description on file")
        repair_types = [r for r in repair_types if r]
        if not repair_types:
            raise ValueError("At least one repair type is required")
        if NEW_BICYCLE_REPAIR_TYPE in repair_types:
            history = [BookingRecord.from_dict(r) for r in self._db.fetch_all(BOOKINGS_TABLE)]
            if has_recent_new_bicycle(history, guest.id, current):
                raise ValueError(f"{fresh.display_name} already received a new bicycle "
                                 f"in the last {NEW_BICYCLE_COOLDOWN_MONTHS} months")
        row = {'service_type': BICYCLE, 'date': (day or current.date()).isoformat(), 'time': None,
               'guest_id': guest.id, 'status': PENDING, 'repair_types': repair_types}
        booking = self._insert(row, "Failed to log bicycle repair", now=current)
        if booking and self._history is not None:
            self._history.add_action(BICYCLE_LOGGED, booking.id, guest.id, now=current)
        return booking


__all__ = ['SlotUnavailableError', 'ServicesStore', 'BOOKING_STATUSES', 'OFFSITE_LAUNDRY']
