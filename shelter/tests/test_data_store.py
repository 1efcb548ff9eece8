import json
import tempfile
import unittest
from datetime import date
from pathlib import Path

from shelter.infra.Data_Store import JsonDataStore, RecordNotFoundError
from shelter.infra.paths import MEALS_TABLE, TABLES


class TestJsonDataStore(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "shelter.json"
        self.db = JsonDataStore(self.path)

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_is_empty(self):
        self.assertEqual(self.db.fetch_all(MEALS_TABLE), [])

    def test_insert_assigns_id_and_writes_document(self):
        row = self.db.insert(MEALS_TABLE, {'date': '2026-01-05', 'count': 3, 'category': 'rv'})
        self.assertTrue(row['id'])
        self.assertTrue(row['created_at'].endswith('Z'))
        with open(self.path, encoding='utf-8') as f:
            doc = json.load(f)
        self.assertEqual(set(doc), set(TABLES))
        self.assertEqual(doc[MEALS_TABLE][0]['count'], 3)
        self.assertEqual(list(self.path.parent.glob(".shelter_*")), [])

    def test_update_and_delete(self):
        row = self.db.insert(MEALS_TABLE, {'date': '2026-01-05', 'count': 3, 'category': 'rv'})
        self.assertEqual(self.db.update(MEALS_TABLE, row['id'], {'count': 9, 'id': 'hijack'})['count'], 9)
        self.assertEqual(self.db.get(MEALS_TABLE, row['id'])['count'], 9)
        self.db.delete(MEALS_TABLE, row['id'])
        with self.assertRaises(RecordNotFoundError):
            self.db.get(MEALS_TABLE, row['id'])
        with self.assertRaises(RecordNotFoundError):
            self.db.update(MEALS_TABLE, row['id'], {'count': 1})

    def test_delete_by_id_and_category(self):
        row = self.db.insert(MEALS_TABLE, {'date': '2026-01-05', 'count': 3, 'category': 'rv'})
        with self.assertRaises(RecordNotFoundError):
            self.db.delete_by_id_and_category(MEALS_TABLE, row['id'], 'shelter')
        self.db.delete_by_id_and_category(MEALS_TABLE, row['id'], 'rv')
        self.assertEqual(self.db.fetch_all(MEALS_TABLE), [])

    def test_delete_by_category_matches_loose_type_tags(self):
        row = self.db.insert(MEALS_TABLE, {'date': '2026-01-07', 'count': 20, 'type': 'rv_delivery'})
        with self.assertRaises(RecordNotFoundError):
            self.db.delete_by_id_and_category(MEALS_TABLE, row['id'], 'shelter')
        self.db.delete_by_id_and_category(MEALS_TABLE, row['id'], 'rv')
        self.assertEqual(self.db.fetch_all(MEALS_TABLE), [])

    def test_fetch_for_period_uses_civil_dates(self):
        self.db.insert(MEALS_TABLE, {'date': '2026-02-01T05:00:00.000Z', 'count': 1})
        self.db.insert(MEALS_TABLE, {'date': '2026-02-01', 'count': 2})
        self.db.insert(MEALS_TABLE, {'date': 'unknown', 'count': 4})
        rows = self.db.fetch_for_period(MEALS_TABLE, date(2026, 1, 1), date(2026, 1, 31))
        self.assertEqual([r['count'] for r in rows], [1])

    def test_corrupt_file_starts_empty(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("{not json", encoding='utf-8')
        with self.assertLogs('shelter.infra.Data_Store', level='WARNING'):
            self.assertEqual(self.db.fetch_all(MEALS_TABLE), [])
