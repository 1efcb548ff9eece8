from fastapi import FastAPI, Depends, HTTPException, Query
from datetime import datetime
from typing import Optional
import logging

from shelter.api.deps import ShelterStores, get_now, get_stores, http_errors, saved_or_500
from shelter.events.web_observers import start as start_event_observers, get_events as get_web_events
from shelter.logic.guests.activity import recent_guest_ids
from shelter.utilities.validators import GuestInput

# Routers
from shelter.api.routes import meals, services, reminders, reports

# Logging
logger = logging.getLogger("shelter_app")

# Initialize FastAPI app
app = FastAPI(title="Shelter Services API")

# Include routers
app.include_router(meals.router)
app.include_router(services.router)
app.include_router(reminders.router)
app.include_router(reports.router)


@app.on_event("startup")
def _startup():
    """Register notification observers and load the stores when the app starts."""
    start_event_observers()
    stores = get_stores()
    logger.info("Shelter API ready (%s guests, %s meal records)",
                len(stores.guests.guests), len(stores.meals.records()))


# -------------------- Guests --------------------
@app.get("/api/guests")
def list_guests(stores: ShelterStores = Depends(get_stores)):
    return {'guests': [g.to_dict() for g in stores.guests.guests]}


@app.post("/api/guests", status_code=201)
def add_guest(payload: GuestInput, stores: ShelterStores = Depends(get_stores)):
    with http_errors():
        guest = stores.guests.add_guest(payload.name, payload.preferred_name,
                                        payload.bicycle_description, payload.banned_from_bicycle)
    return saved_or_500(guest, "Failed to add guest").to_dict()


@app.get("/api/guests/recent")
def recent_guests(days: int = Query(default=7, ge=1, le=90), stores: ShelterStores = Depends(get_stores),
                  now: datetime = Depends(get_now)):
    """Guests who had a meal in the last `days` civil days."""
    ids = recent_guest_ids(stores.meals.records(), now, days)
    known = {g.id: g for g in stores.guests.guests}
    return {
        'count': len(ids),
        'guests': [known[i].to_dict() if i in known else {'id': i} for i in sorted(ids)],
    }


@app.get("/api/guests/{guest_id}")
def get_guest(guest_id: str, stores: ShelterStores = Depends(get_stores)):
    guest = stores.guests.get_guest(guest_id)
    if guest is None:
        raise HTTPException(status_code=404, detail="Guest not found")
    return guest.to_dict()


# -------------------- Notifications --------------------
@app.get("/api/notifications")
def notifications(since: Optional[int] = Query(default=None)):
    """Toast notifications newer than `since`."""
    return get_web_events(since)
