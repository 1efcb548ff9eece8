"""Booking domain entities: service bookings and administratively blocked slots."""
from typing import List, Optional

from shelter.utilities.constants import INACTIVE_BOOKING_STATUSES


def slot_start(time_value: Optional[str]) -> str:
    '''Normalise a stored slot time ("07:30" or "07:30 - 08:30") to its start label.'''
    if not time_value:
        return ""
    return time_value.split('-')[0].strip()


class BookingRecord:
    def __init__(self, id: str = "", service_type: str = "shower", date: str = "",
                 time: Optional[str] = None, guest_id: str = "", status: str = "booked",
                 laundry_type: Optional[str] = None, linked_to: Optional[str] = None,
                 repair_types: Optional[List[str]] = None, created_at: Optional[str] = None):
        self.id = id
        self.service_type = service_type
        self.date = date
        self.time = time
        self.guest_id = guest_id
        self.status = status
        self.laundry_type = laundry_type
        self.linked_to = linked_to
        self.repair_types = repair_types[:] if repair_types else []
        self.created_at = created_at

    @property
    def slot_label(self) -> str:
        return slot_start(self.time)

    @property
    def is_active(self) -> bool:
        return self.status not in INACTIVE_BOOKING_STATUSES

    def occupies(self, service_type: str, date: str, label: str) -> bool:
        '''True when this booking holds the given slot on the given date.'''
        return (self.is_active
                and self.service_type == service_type
                and self.date == date
                and bool(self.slot_label)
                and self.slot_label == label)

    def __str__(self) -> str:
        return f"{self.service_type} {self.date} {self.time or '-'} guest={self.guest_id} [{self.status}]"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "service_type", "date", "time", "guest_id", "status",
                   "laundry_type", "linked_to", "repair_types", "created_at"}
        return BookingRecord(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "id": self.id,
            "service_type": self.service_type,
            "date": self.date,
            "time": self.time,
            "guest_id": self.guest_id,
            "status": self.status,
            "laundry_type": self.laundry_type,
            "linked_to": self.linked_to,
            "repair_types": self.repair_types,
            "created_at": self.created_at,
        }


class BlockedSlot:
    def __init__(self, id: str = "", service_type: str = "shower", date: str = "", time: str = "",
                 created_at: Optional[str] = None):
        self.id = id
        self.service_type = service_type
        self.date = date
        self.time = slot_start(time)
        self.created_at = created_at

    def matches(self, service_type: str, date: str, label: str) -> bool:
        return self.service_type == service_type and self.date == date and self.time == label

    def __str__(self) -> str:
        return f"blocked {self.service_type} {self.date} {self.time}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "service_type", "date", "time", "created_at"}
        return BlockedSlot(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "id": self.id,
            "service_type": self.service_type,
            "date": self.date,
            "time": self.time,
            "created_at": self.created_at,
        }
