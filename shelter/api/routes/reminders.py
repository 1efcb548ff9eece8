from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from shelter.api.deps import ShelterStores, get_now, get_stores, http_errors, saved_or_500
from shelter.utilities.validators import ReminderInput

router = APIRouter()


@router.get("/api/guests/{guest_id}/reminders")
def list_reminders(guest_id: str, active_only: bool = Query(default=False),
                   service: Optional[str] = Query(default=None),
                   stores: ShelterStores = Depends(get_stores)):
    """A guest's reminders; service narrows to active reminders for that service."""
    reminders = stores.reminders
    if service:
        items = reminders.get_reminders_for_service(guest_id, service)
    elif active_only:
        items = reminders.get_active_reminders_for_guest(guest_id)
    else:
        items = reminders.get_reminders_for_guest(guest_id)
    return {
        'guest_id': guest_id,
        'has_active': reminders.has_active_reminder(guest_id, service),
        'reminders': [r.to_dict() for r in items],
    }


@router.post("/api/guests/{guest_id}/reminders", status_code=201)
def add_reminder(guest_id: str, payload: ReminderInput, stores: ShelterStores = Depends(get_stores),
                 now: datetime = Depends(get_now)):
    with http_errors():
        reminder = stores.reminders.add_reminder(guest_id, payload.message, payload.applies_to, now=now)
    return saved_or_500(reminder, "Failed to add reminder").to_dict()


@router.post("/api/reminders/{reminder_id}/dismiss")
def dismiss_reminder(reminder_id: str, stores: ShelterStores = Depends(get_stores),
                     now: datetime = Depends(get_now)):
    with http_errors():
        reminder = stores.reminders.dismiss_reminder(reminder_id, now=now)
    return saved_or_500(reminder, "Failed to dismiss reminder").to_dict()


@router.delete("/api/reminders/{reminder_id}")
def delete_reminder(reminder_id: str, stores: ShelterStores = Depends(get_stores)):
    with http_errors():
        deleted = stores.reminders.delete_reminder(reminder_id)
    if not deleted:
        saved_or_500(None, "Failed to delete reminder")
    return {'deleted': reminder_id}
