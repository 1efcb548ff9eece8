"""Blocked slots store: slots staff have closed regardless of bookings."""
import logging
from datetime import date
from typing import Callable, Iterable, List, Optional

from shelter.domain.Booking import BlockedSlot, BookingRecord, slot_start
from shelter.infra.paths import BLOCKED_SLOTS_TABLE
from shelter.logic.slots.availability import active_bookings_for
from shelter.logic.slots.generator import generate_slots
from shelter.stores.base import Store, failed

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

BLOCKED = "blocked"
UNBLOCKED = "unblocked"
UNCHANGED = "unchanged"


class BlockedSlotsStore(Store):
    name = "blocked_slots"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._blocked: List[BlockedSlot] = []

    def fetch_blocked_slots(self, start: Optional[date] = None, end: Optional[date] = None):
        if start is not None and end is not None:
            rows = self._db.fetch_for_period(BLOCKED_SLOTS_TABLE, start, end)
        else:
            rows = self._db.fetch_all(BLOCKED_SLOTS_TABLE)
        self._blocked = [BlockedSlot.from_dict(r) for r in rows]
        return self

    def blocked(self, service_type: Optional[str] = None, day: Optional[date] = None) -> List[BlockedSlot]:
        key = day.isoformat() if day else None
        return [b for b in self._blocked
                if (service_type is None or b.service_type == service_type)
                and (key is None or b.date == key)]

    def is_slot_blocked(self, service_type: str, time: str, day: date) -> bool:
        return self._find(service_type, time, day) is not None

    def _find(self, service_type: str, time: str, day: date) -> Optional[BlockedSlot]:
        key, label = day.isoformat(), slot_start(time)
        return next((b for b in self._blocked if b.matches(service_type, key, label)), None)

    def _check_slot(self, service_type: str, time: str, day: date):
        label = slot_start(time)
        if label not in {s.label for s in generate_slots(service_type, day)}:
            raise ValueError(f"{time} is not a {service_type} slot on {day.isoformat()}")

    def block_slot(self, service_type: str, time: str, day: date) -> Optional[BlockedSlot]:
        self._check_slot(service_type, time, day)
        existing = self._find(service_type, time, day)
        if existing:
            return existing
        row = {'service_type': service_type, 'date': day.isoformat(), 'time': slot_start(time)}
        saved = self._persist(lambda: self._db.insert(BLOCKED_SLOTS_TABLE, row), "Failed to update slot status")
        if failed(saved):
            return None
        slot = BlockedSlot.from_dict(saved)
        self._blocked.append(slot)
        logger.info("Blocked %s slot %s on %s", service_type, slot.time, slot.date)
        self._changed('block', saved)
        return slot

    def unblock_slot(self, service_type: str, time: str, day: date) -> bool:
        existing = self._find(service_type, time, day)
        if existing is None:
            return True
        result = self._persist(lambda: self._db.delete(BLOCKED_SLOTS_TABLE, existing.id),
                               "Failed to update slot status")
        if failed(result):
            return False
        self._blocked = [b for b in self._blocked if b.id != existing.id]
        logger.info("Unblocked %s slot %s on %s", service_type, existing.time, existing.date)
        self._changed('unblock', existing.to_dict())
        return True

    def toggle_slot(self, service_type: str, time: str, day: date,
                    bookings: Iterable[BookingRecord], confirm: Confirm) -> Optional[str]:
        """Block an open slot or unblock a blocked one.

        Blocking a slot that still has active bookings first asks
        confirm(message); a False answer leaves everything untouched.
        Returns BLOCKED, UNBLOCKED, UNCHANGED, or None when persistence failed.
        """
        if self.is_slot_blocked(service_type, time, day):
            return UNBLOCKED if self.unblock_slot(service_type, time, day) else None
        self._check_slot(service_type, time, day)
        active = active_bookings_for(service_type, day, time, bookings)
        if active:
            message = (f"This slot has {len(active)} active bookings. "
                       f"Block it anyway? Booked guests keep their booking.")
            if not confirm(message):
                return UNCHANGED
        return BLOCKED if self.block_slot(service_type, time, day) else None
