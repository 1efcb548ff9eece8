"""Simple Event Bus / Observer implementation for store changes and notifications.

Event names used so far:
  store.changed       -> payload {"store": str, "action": str, "record": dict | None}
  notify.success      -> payload {"message": str}
  notify.error        -> payload {"message": str, "detail": str | None}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
STORE_CHANGED = "store.changed"
NOTIFY_SUCCESS = "notify.success"
NOTIFY_ERROR = "notify.error"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception as e:  # pragma: no cover
				logger.error("Error delivering %s to %s: %s", event_name, cb, e)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


__all__ = ['EventBus', 'GLOBAL_EVENT_BUS', 'STORE_CHANGED', 'NOTIFY_SUCCESS', 'NOTIFY_ERROR']
