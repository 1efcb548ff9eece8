"""Reminder domain entity: a staff note shown on a guest's service cards until dismissed."""
from typing import List, Optional

from shelter.utilities.constants import REMINDER_SERVICE_TYPES


def normalize_applies_to(services: Optional[List[str]]) -> List[str]:
    '''Keep known services only; "all" (or nothing) collapses to ["all"].'''
    picked = [s for s in (services or []) if s in REMINDER_SERVICE_TYPES]
    if not picked or "all" in picked:
        return ["all"]
    # preserve order, drop duplicates
    return list(dict.fromkeys(picked))


class Reminder:
    def __init__(self, id: str = "", guest_id: str = "", message: str = "",
                 applies_to: Optional[List[str]] = None, created_at: Optional[str] = None,
                 dismissed_at: Optional[str] = None):
        self.id = id
        self.guest_id = guest_id
        self.message = message
        self.applies_to = normalize_applies_to(applies_to)
        self.created_at = created_at
        self.dismissed_at = dismissed_at

    @property
    def is_active(self) -> bool:
        return not self.dismissed_at

    def applies_to_service(self, service_type: str) -> bool:
        return "all" in self.applies_to or service_type in self.applies_to

    def __str__(self) -> str:
        state = "dismissed" if self.dismissed_at else "active"
        return f"{self.message} ({', '.join(self.applies_to)}) [{state}]"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "guest_id", "message", "applies_to", "created_at", "dismissed_at"}
        return Reminder(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "id": self.id,
            "guest_id": self.guest_id,
            "message": self.message,
            "applies_to": self.applies_to,
            "created_at": self.created_at,
            "dismissed_at": self.dismissed_at,
        }
