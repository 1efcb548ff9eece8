"""Action history: newest-first log of staff actions."""
import logging
from datetime import datetime
from typing import List, Optional

from shelter.domain.Action import Action, ACTION_TYPES
from shelter.infra.paths import ACTIONS_TABLE
from shelter.stores.base import Store, failed
from shelter.utilities.civil_time import utc_timestamp

logger = logging.getLogger(__name__)


class ActionHistoryStore(Store):
    name = "action_history"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._actions: List[Action] = []

    def load(self):
        rows = self._db.fetch_all(ACTIONS_TABLE)
        self._actions = sorted((Action.from_dict(r) for r in rows), key=lambda a: a.timestamp, reverse=True)
        return self

    @property
    def actions(self) -> List[Action]:
        return list(self._actions)

    def add_action(self, action_type: str, record_id: str, guest_id: Optional[str] = None,
                   now: Optional[datetime] = None) -> Optional[Action]:
        if action_type not in ACTION_TYPES:
            raise ValueError(f"Unknown action type: {action_type}")
        row = {
            'type': action_type,
            'timestamp': utc_timestamp(self.now(now)),
            'data': {'record_id': record_id, 'guest_id': guest_id},
        }
        saved = self._persist(lambda: self._db.insert(ACTIONS_TABLE, row), "Failed to record action")
        if failed(saved):
            return None
        action = Action.from_dict(saved)
        self._actions.insert(0, action)
        self._changed('add', saved)
        return action

