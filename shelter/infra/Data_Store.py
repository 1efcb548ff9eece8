"""JSON document store: the persistence boundary for every record table.

Records live in one JSON document keyed by table name. Each record is a
dict with an 'id'. Writes go through a temp file and a move so a crash
never leaves a half-written document behind.
"""
import json
import logging
import os
import shutil
import tempfile
from datetime import date
from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional, Union
from uuid import uuid4

from shelter.infra.paths import DATA_FILE, TABLES
from shelter.logic.reporting.classifier import classify
from shelter.utilities.civil_time import civil_date_string, utc_timestamp

logger = logging.getLogger(__name__)


class DataStoreError(Exception):
    """A persistence call failed."""


class RecordNotFoundError(DataStoreError):
    def __init__(self, table: str, record_id: str):
        super().__init__(f"{table} record '{record_id}' not found")
        self.table = table
        self.record_id = record_id


class JsonDataStore:
    def __init__(self, path: Union[str, Path] = DATA_FILE):
        self.path = Path(path)
        self._lock = Lock()

    # --- Document I/O --------------------------------------------------------
    def _empty(self) -> Dict[str, List[dict]]:
        return {t: [] for t in TABLES}

    def _load(self) -> Dict[str, List[dict]]:
        if not self.path.exists():
            return self._empty()
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                doc = json.load(f) or {}
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in data store %s: %s. Starting empty.", self.path, e)
            return self._empty()
        if not isinstance(doc, dict):
            logger.warning("Data store %s is not a JSON object. Starting empty.", self.path)
            return self._empty()
        for t in TABLES:
            doc.setdefault(t, [])
        return doc

    def _write(self, doc: Dict[str, List[dict]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".shelter_", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    json.dump(doc, tmp, indent=2, ensure_ascii=False)
                shutil.move(tmp_path, str(self.path))
            finally:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
        except OSError as e:
            logger.error("Failed to write data store %s: %s", self.path, e)
            raise DataStoreError(f"Failed to write data store: {e}") from e

    # --- CRUD ----------------------------------------------------------------
    def fetch_all(self, table: str) -> List[dict]:
        with self._lock:
            return [dict(r) for r in self._load().get(table, [])]

    def fetch_for_period(self, table: str, start: date, end: date, field: str = 'date') -> List[dict]:
        """Records whose civil date falls within [start, end]; unreadable dates are skipped."""
        lo, hi = start.isoformat(), end.isoformat()
        rows = []
        for r in self.fetch_all(table):
            day = civil_date_string(r.get(field))
            if day and lo <= day <= hi:
                rows.append(r)
        return rows

    def get(self, table: str, record_id: str) -> dict:
        for r in self.fetch_all(table):
            if r.get('id') == record_id:
                return r
        raise RecordNotFoundError(table, record_id)

    def insert(self, table: str, record: dict) -> dict:
        row = dict(record)
        row['id'] = row.get('id') or str(uuid4())
        row['created_at'] = row.get('created_at') or utc_timestamp()
        with self._lock:
            doc = self._load()
            doc.setdefault(table, []).append(row)
            self._write(doc)
        return dict(row)

    def update(self, table: str, record_id: str, changes: dict) -> dict:
        with self._lock:
            doc = self._load()
            for row in doc.get(table, []):
                if row.get('id') == record_id:
                    row.update({k: v for k, v in changes.items() if k != 'id'})
                    self._write(doc)
                    return dict(row)
        raise RecordNotFoundError(table, record_id)

    def delete(self, table: str, record_id: str) -> None:
        self._delete_where(table, record_id, lambda row: True)

    def delete_by_id_and_category(self, table: str, record_id: str, category: Optional[str]) -> None:
        """Delete only when the stored record classifies to the expected category.

        Older rows carry a loose 'type' tag instead of 'category'; they match
        the canonical category they load as.
        """
        self._delete_where(table, record_id, lambda row: classify(row).category == category)

    def _delete_where(self, table: str, record_id: str, predicate) -> None:
        with self._lock:
            doc = self._load()
            rows = doc.get(table, [])
            remaining = [r for r in rows if not (r.get('id') == record_id and predicate(r))]
            if len(remaining) == len(rows):
                raise RecordNotFoundError(table, record_id)
            doc[table] = remaining
            self._write(doc)


__all__ = ['DataStoreError', 'RecordNotFoundError', 'JsonDataStore']
