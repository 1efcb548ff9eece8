"""Shared FastAPI dependencies: the clock, the wired stores and error mapping."""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from fastapi import HTTPException

from shelter.events.Event_Bus import EventBus
from shelter.infra.Data_Store import JsonDataStore, RecordNotFoundError
from shelter.stores.action_history import ActionHistoryStore
from shelter.stores.blocked_slots import BlockedSlotsStore
from shelter.stores.guests import GuestsStore
from shelter.stores.meals import MealsStore
from shelter.stores.reminders import RemindersStore
from shelter.stores.services import ServicesStore, SlotUnavailableError
from shelter.utilities.civil_time import now_civil

logger = logging.getLogger(__name__)


class ShelterStores:
    """All state containers wired to one data store."""

    def __init__(self, data_store: JsonDataStore, bus: Optional[EventBus] = None):
        self.data_store = data_store
        self.history = ActionHistoryStore(data_store, bus=bus)
        self.guests = GuestsStore(data_store, bus=bus)
        self.blocked_slots = BlockedSlotsStore(data_store, bus=bus)
        self.meals = MealsStore(data_store, bus=bus, history=self.history)
        self.services = ServicesStore(data_store, bus=bus, blocked_slots=self.blocked_slots,
                                      history=self.history, guests=self.guests)
        self.reminders = RemindersStore(data_store, bus=bus)

    def load(self):
        self.history.load()
        self.guests.load()
        self.blocked_slots.fetch_blocked_slots()
        self.meals.load()
        self.services.load()
        self.reminders.load()
        return self


_stores: Optional[ShelterStores] = None


def configure_stores(data_store: Optional[JsonDataStore] = None, bus: Optional[EventBus] = None) -> ShelterStores:
    """(Re)wire the stores the API serves, loading everything from data_store."""
    global _stores
    data_store = data_store or JsonDataStore()
    _stores = ShelterStores(data_store, bus=bus).load()
    logger.info("Stores loaded from %s", data_store.path)
    return _stores


def get_stores() -> ShelterStores:
    if _stores is None:
        return configure_stores()
    return _stores


def get_now() -> datetime:
    """Current civil time; tests override this dependency to pin the clock."""
    return now_civil()


@contextmanager
def http_errors():
    """Translate store errors into HTTP responses."""
    try:
        yield
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SlotUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def saved_or_500(result, message: str):
    """Stores return None when persistence failed (already notified)."""
    if result is None:
        raise HTTPException(status_code=500, detail=message)
    return result


__all__ = ['ShelterStores', 'configure_stores', 'get_stores', 'get_now', 'http_errors', 'saved_or_500']
