# tests/test_storage.py
"""
Tests for PocketLedger.core.storage (MemoryStore, SQLiteStore and the JSON helpers).

Run with:
    python -m unittest tests.test_storage
"""
import re
import shutil
import sqlite3
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PocketLedger.core import storage
from PocketLedger.status import status


class MemoryStoreTests(unittest.TestCase):

    def test_get_set_remove(self):
        store = storage.MemoryStore()
        self.assertIsNone(store.get('k'))
        self.assertTrue(store.set('k', b'v'))
        self.assertEqual(store.get('k'), b'v')
        self.assertTrue(store.remove('k'))
        self.assertIsNone(store.get('k'))
        self.assertTrue(store.remove('missing'))

    def test_initial_data_is_copied(self):
        data = {'a': b'1'}
        store = storage.MemoryStore(data)
        store.set('b', b'2')
        self.assertEqual(sorted(store.keys()), ['a', 'b'])
        self.assertEqual(data, {'a': b'1'})


class SQLiteStoreTests(unittest.TestCase):

    def setUp(self) -> None:
        self.tmp = Path(tempfile.mkdtemp(prefix='pocketledger_store_'))
        self.path = self.tmp / 'nested' / 'store.db'
        self.store = storage.SQLiteStore(self.path)

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_creates_database(self):
        self.assertTrue(self.path.exists())

    def test_round_trip_and_overwrite(self):
        self.assertIsNone(self.store.get('k'))
        self.assertTrue(self.store.set('k', b'one'))
        self.assertTrue(self.store.set('k', b'two'))
        self.assertEqual(self.store.get('k'), b'two')

    def test_persists_across_instances(self):
        self.store.set('k', b'kept')
        self.assertEqual(storage.SQLiteStore(self.path).get('k'), b'kept')

    def test_remove(self):
        self.store.set('k', b'v')
        self.assertTrue(self.store.remove('k'))
        self.assertIsNone(self.store.get('k'))

    def test_errors_are_reported_not_raised(self):
        with patch.object(storage.SQLiteStore, 'connection', side_effect=sqlite3.OperationalError('locked')):
            self.assertIsNone(self.store.get('k'))
            self.assertFalse(self.store.set('k', b'v'))
            self.assertFalse(self.store.remove('k'))

    def test_unopenable_database_raises(self):
        with patch.object(storage.SQLiteStore, 'connection', side_effect=sqlite3.OperationalError('nope')):
            with self.assertRaises(status.StorageUnavailableException):
                storage.SQLiteStore(self.tmp / 'other.db')


class JsonHelperTests(unittest.TestCase):

    def test_round_trip(self):
        store = storage.MemoryStore()
        storage.dump_json(store, 'k', [{'name': 'Café'}])
        self.assertEqual(storage.load_json(store, 'k'), [{'name': 'Café'}])

    def test_missing_returns_default(self):
        self.assertEqual(storage.load_json(storage.MemoryStore(), 'k', []), [])

    def test_invalid_json_returns_default(self):
        store = storage.MemoryStore({'k': b'{not json'})
        self.assertEqual(storage.load_json(store, 'k', {}), {})

    def test_refused_write_raises(self):
        store = storage.MemoryStore()
        with patch.object(store, 'set', return_value=False):
            with self.assertRaises(status.StorageUnavailableException):
                storage.dump_json(store, 'k', {})


class HelperTests(unittest.TestCase):

    def test_make_id_format_and_uniqueness(self):
        ids = {storage.make_id() for _ in range(200)}
        self.assertEqual(len(ids), 200)
        for _id in ids:
            self.assertRegex(_id, re.compile(r'^\d{13,}[0-9a-z]{9}$'))

    def test_now_str_is_utc_iso(self):
        self.assertTrue(storage.now_str().endswith('+00:00'))
