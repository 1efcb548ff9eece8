"""Guests store: the guest fields the services desk needs."""
import logging
from typing import List, Optional

from shelter.domain.Guest import Guest
from shelter.infra.Data_Store import RecordNotFoundError
from shelter.infra.paths import GUESTS_TABLE
from shelter.stores.base import Store, failed

logger = logging.getLogger(__name__)


class GuestsStore(Store):
    name = "guests"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._guests: List[Guest] = []

    def load(self):
        self._guests = [Guest.from_dict(r) for r in self._db.fetch_all(GUESTS_TABLE)]
        return self

    @property
    def guests(self) -> List[Guest]:
        return list(self._guests)

    def get_guest(self, guest_id: str) -> Optional[Guest]:
        return next((g for g in self._guests if g.id == guest_id), None)

    def add_guest(self, name: str, preferred_name: str = "", bicycle_description: str = "",
                  banned_from_bicycle: bool = False) -> Optional[Guest]:
        if not name or not name.strip():
            raise ValueError("Guest name is required")
        row = Guest(name=name.strip(), preferred_name=preferred_name, bicycle_description=bicycle_description,
                    banned_from_bicycle=banned_from_bicycle).to_dict()
        row.pop('id')
        saved = self._persist(lambda: self._db.insert(GUESTS_TABLE, row), "Failed to add guest")
        if failed(saved):
            return None
        guest = Guest.from_dict(saved)
        self._guests.append(guest)
        self._changed('add', saved)
        return guest

    def update_guest(self, guest_id: str, **changes) -> Optional[Guest]:
        guest = self.get_guest(guest_id)
        if guest is None:
            raise RecordNotFoundError(GUESTS_TABLE, guest_id)
        allowed = {k: v for k, v in changes.items() if k in guest.to_dict() and k != 'id'}
        saved = self._persist(lambda: self._db.update(GUESTS_TABLE, guest_id, allowed), "Failed to update guest")
        if failed(saved):
            return None
        for key, value in allowed.items():
            setattr(guest, key, value)
        self._changed('update', saved)
        return guest
