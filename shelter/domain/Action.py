"""Action domain entity: one undoable staff action kept in the action history."""
from typing import Optional

MEAL_ADDED = "MEAL_ADDED"
EXTRA_MEALS_ADDED = "EXTRA_MEALS_ADDED"
SHOWER_BOOKED = "SHOWER_BOOKED"
LAUNDRY_BOOKED = "LAUNDRY_BOOKED"
BICYCLE_LOGGED = "BICYCLE_LOGGED"

ACTION_TYPES = (MEAL_ADDED, EXTRA_MEALS_ADDED, SHOWER_BOOKED, LAUNDRY_BOOKED, BICYCLE_LOGGED)


class Action:
    def __init__(self, id: str = "", type: str = MEAL_ADDED, timestamp: str = "",
                 data: Optional[dict] = None):
        self.id = id
        self.type = type
        self.timestamp = timestamp
        self.data = dict(data) if data else {}

    @property
    def guest_id(self) -> Optional[str]:
        return self.data.get("guest_id")

    @property
    def record_id(self) -> Optional[str]:
        return self.data.get("record_id")

    def __str__(self) -> str:
        return f"{self.type} {self.timestamp} {self.data}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Action(d.get("id", ""), d.get("type", MEAL_ADDED), d.get("timestamp", ""), d.get("data"))

    def to_dict(self):
        return {"id": self.id, "type": self.type, "timestamp": self.timestamp, "data": self.data}
