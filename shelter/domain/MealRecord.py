"""MealRecord domain entity: a counted batch of meals of one category on one date."""
from typing import Optional

from shelter.utilities.constants import BULK_CATEGORIES


class MealRecord:
    def __init__(self, id: str = "", date: str = "", count: int = 0, category: str = "guest",
                 guest_id: Optional[str] = None, picked_up_by_guest_id: Optional[str] = None,
                 created_at: Optional[str] = None):
        self.id = id
        self.date = date
        self.count = count
        self.category = category
        self.guest_id = guest_id
        self.picked_up_by_guest_id = picked_up_by_guest_id
        self.created_at = created_at

    @property
    def bulk(self) -> bool:
        return self.category in BULK_CATEGORIES

    @property
    def is_proxy_pickup(self) -> bool:
        return bool(self.picked_up_by_guest_id) and self.picked_up_by_guest_id != self.guest_id

    def __str__(self) -> str:
        who = f" - guest {self.guest_id}" if self.guest_id else ""
        return f"{self.category} x{self.count} on {self.date}{who}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a MealRecord from a stored dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "date", "count", "category", "guest_id", "picked_up_by_guest_id", "created_at"}
        filtered = {k: v for k, v in d.items() if k in allowed}
        return MealRecord(**filtered)

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date,
            "count": self.count,
            "category": self.category,
            "guest_id": self.guest_id,
            "picked_up_by_guest_id": self.picked_up_by_guest_id,
            "created_at": self.created_at,
        }
