"""Slot value object: one bookable time window for a service on a given day."""
from shelter.utilities.civil_time import format_slot_label


class Slot:
    def __init__(self, label: str, end: str):
        self.label = label  # "HH:MM" start, 24h
        self.end = end

    @property
    def display_label(self) -> str:
        return format_slot_label(self.label)

    @property
    def range_label(self) -> str:
        return f"{self.label} - {self.end}"

    @property
    def display_range(self) -> str:
        return f"{format_slot_label(self.label)} - {format_slot_label(self.end)}"

    def __eq__(self, other):
        return isinstance(other, Slot) and (self.label, self.end) == (other.label, other.end)

    def __hash__(self):
        return hash((self.label, self.end))

    def __str__(self) -> str:
        return self.range_label

    __repr__ = __str__

    def to_dict(self):
        return {
            "label": self.label,
            "end": self.end,
            "display_label": self.display_label,
            "range_label": self.range_label,
            "display_range": self.display_range,
        }
