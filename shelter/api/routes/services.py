from datetime import date, datetime
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from shelter.api.deps import ShelterStores, get_now, get_stores, http_errors, saved_or_500
from shelter.logic.guests.activity import today_action_status_map
from shelter.logic.slots.availability import find_next_available
from shelter.stores.blocked_slots import UNCHANGED
from shelter.stores.services import OFFSITE_LAUNDRY
from shelter.utilities.constants import SLOT_SERVICES, LAUNDRY
from shelter.utilities.validators import BookingInput, BicycleInput

router = APIRouter()
logger = logging.getLogger(__name__)


def _check_service(service: str) -> str:
    if service not in SLOT_SERVICES:
        raise HTTPException(status_code=404, detail=f"Unknown service: {service}")
    return service


# -------------------- Slots --------------------
@router.get("/api/slots/{service}/{day}")
def get_slots(service: str, day: date, stores: ShelterStores = Depends(get_stores)):
    """Every slot of the day with its status and the earliest open one."""
    _check_service(service)
    states = stores.services.slot_states(service, day)
    next_slot = find_next_available(states)
    return {
        'service': service,
        'date': day.isoformat(),
        'slots': [s.to_dict() for s in states],
        'next_available': next_slot.to_dict() if next_slot else None,
    }


@router.post("/api/slots/{service}/{day}/{time}/block")
def block_slot(service: str, day: date, time: str, confirm: bool = Query(default=False),
               stores: ShelterStores = Depends(get_stores)):
    """Block a slot. A slot with active bookings needs confirm=true."""
    _check_service(service)
    if stores.blocked_slots.is_slot_blocked(service, time, day):
        return {'status': 'blocked', 'time': time, 'date': day.isoformat()}
    prompts: List[str] = []

    def _confirm(message: str) -> bool:
        prompts.append(message)
        return confirm

    with http_errors():
        outcome = stores.blocked_slots.toggle_slot(service, time, day, stores.services.bookings(service, day), _confirm)
    if outcome == UNCHANGED:
        raise HTTPException(status_code=409, detail=prompts[0])
    saved_or_500(outcome, "Failed to update slot status")
    return {'status': outcome, 'time': time, 'date': day.isoformat()}


@router.delete("/api/slots/{service}/{day}/{time}/block")
def unblock_slot(service: str, day: date, time: str, stores: ShelterStores = Depends(get_stores)):
    _check_service(service)
    if not stores.blocked_slots.unblock_slot(service, time, day):
        raise HTTPException(status_code=500, detail="Failed to update slot status")
    return {'status': 'unblocked', 'time': time, 'date': day.isoformat()}


# -------------------- Bookings --------------------
@router.post("/api/bookings/{service}/next-available", status_code=201)
def book_next_available(service: str, payload: BookingInput, stores: ShelterStores = Depends(get_stores),
                        now: datetime = Depends(get_now)):
    _check_service(service)
    with http_errors():
        booking = stores.services.book_next_available(service, payload.guest_id, payload.date, now=now)
    if booking is None:
        raise HTTPException(status_code=409, detail=f"No {service} slots available")
    return booking.to_dict()


@router.post("/api/bookings/{service}", status_code=201)
def create_booking(service: str, payload: BookingInput, stores: ShelterStores = Depends(get_stores),
                   now: datetime = Depends(get_now)):
    """Book a given slot, join the waitlist, or book off-site laundry."""
    _check_service(service)
    day = payload.date or now.date()
    with http_errors():
        if payload.waitlist:
            booking = stores.services.add_to_waitlist(service, payload.guest_id, day, now=now)
        elif service == LAUNDRY and payload.laundry_type == OFFSITE_LAUNDRY:
            booking = stores.services.book_offsite_laundry(payload.guest_id, day, now=now)
        else:
            if not payload.time:
                raise HTTPException(status_code=400, detail="A slot time is required")
            booking = stores.services.book_slot(service, payload.guest_id, day, payload.time,
                                                linked_to=payload.linked_to,
                                                laundry_type=payload.laundry_type, now=now)
    return saved_or_500(booking, f"Failed to book {service}").to_dict()


@router.delete("/api/bookings/{booking_id}")
def cancel_booking(booking_id: str, stores: ShelterStores = Depends(get_stores)):
    with http_errors():
        booking = stores.services.cancel_booking(booking_id)
    return saved_or_500(booking, "Failed to cancel booking").to_dict()


@router.post("/api/bookings/{booking_id}/status")
def update_booking_status(booking_id: str, status: str = Query(...), stores: ShelterStores = Depends(get_stores)):
    with http_errors():
        booking = stores.services.update_booking_status(booking_id, status)
    return saved_or_500(booking, "Failed to update booking").to_dict()


# -------------------- Bicycle --------------------
@router.post("/api/bicycle", status_code=201)
def log_bicycle_repair(payload: BicycleInput, stores: ShelterStores = Depends(get_stores),
                       now: datetime = Depends(get_now)):
    guest = stores.guests.get_guest(payload.guest_id)
    if guest is None:
        raise HTTPException(status_code=404, detail="Guest not found")
    with http_errors():
        record = stores.services.add_bicycle_record(guest, payload.repair_types, now=now)
    return saved_or_500(record, "Failed to log bicycle repair").to_dict()


# -------------------- Today --------------------
@router.get("/api/actions/today")
def today_actions(stores: ShelterStores = Depends(get_stores), now: datetime = Depends(get_now)):
    """Per guest, the latest undoable action of each kind logged today."""
    status = today_action_status_map(stores.history.actions, now)
    return {guest_id: entry.to_dict() for guest_id, entry in status.items()}
