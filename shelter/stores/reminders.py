"""Reminders store: staff notes attached to a guest until dismissed."""
import logging
from datetime import datetime
from typing import List, Optional

from shelter.domain.Reminder import Reminder
from shelter.infra.Data_Store import RecordNotFoundError
from shelter.infra.paths import REMINDERS_TABLE
from shelter.stores.base import Store, failed
from shelter.utilities.civil_time import utc_timestamp

logger = logging.getLogger(__name__)


class RemindersStore(Store):
    name = "reminders"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._reminders: List[Reminder] = []

    def load(self):
        self._reminders = [Reminder.from_dict(r) for r in self._db.fetch_all(REMINDERS_TABLE)]
        return self

    def _get(self, reminder_id: str) -> Reminder:
        reminder = next((r for r in self._reminders if r.id == reminder_id), None)
        if reminder is None:
            raise RecordNotFoundError(REMINDERS_TABLE, reminder_id)
        return reminder

    # --- Reads ---------------------------------------------------------------
    def get_reminders_for_guest(self, guest_id: str) -> List[Reminder]:
        return [r for r in self._reminders if r.guest_id == guest_id]

    def get_active_reminders_for_guest(self, guest_id: str) -> List[Reminder]:
        return [r for r in self.get_reminders_for_guest(guest_id) if r.is_active]

    def get_reminders_for_service(self, guest_id: str, service_type: str) -> List[Reminder]:
        """Active reminders for guest_id that apply to service_type (or to everything)."""
        return [r for r in self.get_active_reminders_for_guest(guest_id) if r.applies_to_service(service_type)]

    def has_active_reminder(self, guest_id: str, service_type: Optional[str] = None) -> bool:
        if service_type is None:
            return bool(self.get_active_reminders_for_guest(guest_id))
        return bool(self.get_reminders_for_service(guest_id, service_type))

    # --- Mutations -----------------------------------------------------------
    def add_reminder(self, guest_id: str, message: str, applies_to: Optional[List[str]] = None,
                     now: Optional[datetime] = None) -> Optional[Reminder]:
        if not guest_id:
            raise ValueError("A reminder needs a guest")
        if not message or not message.strip():
            raise ValueError("Reminder message cannot be empty")
        reminder = Reminder(guest_id=guest_id, message=message.strip(), applies_to=applies_to,
                            created_at=utc_timestamp(self.now(now)))
        row = reminder.to_dict()
        row.pop('id')
        saved = self._persist(lambda: self._db.insert(REMINDERS_TABLE, row), "Failed to add reminder")
        if failed(saved):
            return None
        stored = Reminder.from_dict(saved)
        self._reminders.append(stored)
        self._changed('add', saved)
        return stored

    def dismiss_reminder(self, reminder_id: str, now: Optional[datetime] = None) -> Optional[Reminder]:
        reminder = self._get(reminder_id)
        if not reminder.is_active:
            return reminder
        stamp = utc_timestamp(self.now(now))
        saved = self._persist(lambda: self._db.update(REMINDERS_TABLE, reminder_id, {'dismissed_at': stamp}),
                              "Failed to dismiss reminder")
        if failed(saved):
            return None
        reminder.dismissed_at = stamp
        self._changed('dismiss', saved)
        return reminder

    def delete_reminder(self, reminder_id: str) -> bool:
        self._get(reminder_id)
        result = self._persist(lambda: self._db.delete(REMINDERS_TABLE, reminder_id), "Failed to delete reminder")
        if failed(result):
            return False
        self._reminders = [r for r in self._reminders if r.id != reminder_id]
        self._changed('delete', {'id': reminder_id})
        return True
