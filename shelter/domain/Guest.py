"""Guest domain entity (the fields the services desk reads)."""


class Guest:
    def __init__(self, id: str = "", name: str = "", preferred_name: str = "",
                 bicycle_description: str = "", banned_from_bicycle: bool = False):
        self.id = id
        self.name = name
        self.preferred_name = preferred_name
        self.bicycle_description = bicycle_description
        self.banned_from_bicycle = banned_from_bicycle

    @property
    def display_name(self) -> str:
        return self.preferred_name or self.name

    def __str__(self) -> str:
        return f"{self.display_name} ({self.id})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "name", "preferred_name", "bicycle_description", "banned_from_bicycle"}
        return Guest(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "preferred_name": self.preferred_name,
            "bicycle_description": self.bicycle_description,
            "banned_from_bicycle": self.banned_from_bicycle,
        }
