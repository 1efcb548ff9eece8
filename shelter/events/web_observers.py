"""Web-facing observer for transient notifications.

Subscribes to notify.success / notify.error on the GLOBAL_EVENT_BUS and
keeps an in-memory ring buffer the web layer polls to show toasts.

  * Each notification gets an auto-increment integer id (cursor); clients
    ask only for newer ones with since=<last_id_seen>.
  * A Lock guards the buffer (uvicorn may serve requests from a thread pool).
  * MAX_EVENTS caps memory.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import GLOBAL_EVENT_BUS, NOTIFY_SUCCESS, NOTIFY_ERROR

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 200
_started = False


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': 'error' if event_name == NOTIFY_ERROR else 'success',
            'ts': datetime.now(timezone.utc).isoformat(),
        }
        if isinstance(payload, dict):
            evt['message'] = payload.get('message', '')
            if payload.get('detail'):
                evt['detail'] = payload['detail']
        else:
            evt['message'] = str(payload)
        _events.append(evt)
        _next_id += 1
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    GLOBAL_EVENT_BUS.subscribe(NOTIFY_SUCCESS, _record)
    GLOBAL_EVENT_BUS.subscribe(NOTIFY_ERROR, _record)
    _started = True
    logger.info("Notification observers started")


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return notifications newer than 'since' (exclusive) plus next_cursor."""
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


def clear():
    """Drop buffered notifications (used between tests)."""
    with _lock:
        _events.clear()


__all__ = ['start', 'get_events', 'clear']
