"""Shared plumbing for the state containers.

A store owns an in-memory view of some tables, exposes read methods, lets
callers subscribe to changes and performs mutations through the data store.
Local state is only touched after the data store call succeeded; a failed
call publishes an error notification and leaves local state as it was.
"""
import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from shelter.events.Event_Bus import GLOBAL_EVENT_BUS, EventBus
from shelter.events.event_helpers import notify_error, notify_success, publish_store_changed
from shelter.infra.Data_Store import DataStoreError, JsonDataStore
from shelter.utilities.civil_time import now_civil

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
_FAILED = object()


class Store:
    name = "store"

    def __init__(self, data_store: JsonDataStore, bus: Optional[EventBus] = None,
                 clock: Optional[Clock] = None):
        self._db = data_store
        self._bus = bus or GLOBAL_EVENT_BUS
        self._clock = clock
        self._subscribers: List[Callable[[dict], None]] = []

    # --- Clock ---------------------------------------------------------------
    def now(self, now: Optional[datetime] = None) -> datetime:
        if now is None and self._clock is not None:
            now = self._clock()
        return now_civil(now)

    # --- Observer helpers ----------------------------------------------------
    def subscribe(self, callback: Callable[[dict], None]) -> Callable[[], None]:
        """Register callback(change) and return a function that unsubscribes it."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

        def _unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return _unsubscribe

    def _changed(self, action: str, record: Optional[dict] = None):
        change = {'store': self.name, 'action': action, 'record': record}
        for cb in list(self._subscribers):
            cb(change)
        publish_store_changed(self.name, action, record, bus=self._bus)

    # --- Persistence ---------------------------------------------------------
    def _persist(self, call: Callable[[], Any], failure_message: str):
        """Run a data store call; on failure notify and return the _FAILED sentinel."""
        try:
            return call()
        except DataStoreError as e:
            logger.error("%s: %s", failure_message, e)
            notify_error(failure_message, str(e), bus=self._bus)
            return _FAILED

    def _success(self, message: str):
        notify_success(message, bus=self._bus)


def failed(result) -> bool:
    return result is _FAILED


__all__ = ['Store', 'Clock', 'failed']
