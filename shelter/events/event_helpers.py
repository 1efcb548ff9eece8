"""Event helper utilities.

Quick import:
    from shelter.events.event_helpers import (
        notify_success, notify_error, publish_store_changed
    )

All helpers take an optional ``bus`` so stores wired to a private bus (tests)
don't leak events onto the global one.
"""
from __future__ import annotations
from typing import Optional

from .Event_Bus import GLOBAL_EVENT_BUS, EventBus, STORE_CHANGED, NOTIFY_SUCCESS, NOTIFY_ERROR

__all__ = ['notify_success', 'notify_error', 'publish_store_changed']


def notify_success(message: str, bus: Optional[EventBus] = None):
    """Publish a transient success notification."""
    (bus or GLOBAL_EVENT_BUS).publish(NOTIFY_SUCCESS, {'message': message})


def notify_error(message: str, detail: Optional[str] = None, bus: Optional[EventBus] = None):
    """Publish a transient error notification (persistence failures, rejected actions)."""
    (bus or GLOBAL_EVENT_BUS).publish(NOTIFY_ERROR, {'message': message, 'detail': detail})


def publish_store_changed(store: str, action: str, record: Optional[dict] = None,
                          bus: Optional[EventBus] = None):
    """Publish a store.changed event after a committed mutation.

    Payload structure:
        { 'store': 'meals', 'action': 'add', 'record': {...} }
    """
    (bus or GLOBAL_EVENT_BUS).publish(STORE_CHANGED, {
        'store': store,
        'action': action,
        'record': record,
    })
