"""
Local key-value storage for ledger records.

Every service receives a :class:`KeyValueStore` instead of reaching for a shared module.
The application uses :class:`SQLiteStore`; tests use :class:`MemoryStore`.

Values are bytes; the services keep JSON documents in them via :func:`load_json` and
:func:`dump_json`.
"""

import datetime
import json
import logging
import pathlib
import random
import sqlite3
import string
import time
from typing import Any, Dict, Optional, Protocol, Union

from ..status import status

USERS_KEY = '@users'
CURRENT_USER_KEY = '@currentUser'
CATEGORIES_KEY = '@categories'
TRANSACTIONS_KEY = '@transactions'

TABLE = 'kv'

_ID_ALPHABET = string.digits + string.ascii_lowercase


class KeyValueStore(Protocol):
    """Capability required by the services."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> bool:
        ...

    def remove(self, key: str) -> bool:
        ...


def now_str() -> str:
    """Return current UTC date and time as an ISO 8601 string.

    Returns:
        str: Current UTC date and time in ISO 8601 format.
    """
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def make_id() -> str:
    """Return a new record id: a millisecond timestamp followed by 9 random base36 characters."""
    suffix = ''.join(random.choices(_ID_ALPHABET, k=9))
    return f'{int(time.time() * 1000)}{suffix}'


class MemoryStore:
    """Dict-backed store."""

    def __init__(self, data: Optional[Dict[str, bytes]] = None) -> None:
        self._data: Dict[str, bytes] = dict(data or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> bool:
        self._data[key] = bytes(value)
        return True

    def remove(self, key: str) -> bool:
        self._data.pop(key, None)
        return True

    def keys(self):
        return list(self._data.keys())


class SQLiteStore:
    """SQLite-backed store keeping every key in a single two-column table."""

    def __init__(self, path: Union[str, pathlib.Path]) -> None:
        self.path = pathlib.Path(path)
        self._initialize_schema()

    def connection(self) -> sqlite3.Connection:
        """Return a new connection to the store database.

        Returns:
            sqlite3.Connection: Database connection object.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.path), timeout=2.0)
        conn.set_progress_handler(lambda: logging.debug('Waiting on DB lock…'), 1000)
        return conn

    def _initialize_schema(self) -> None:
        conn: Optional[sqlite3.Connection] = None
        try:
            conn = self.connection()
            conn.execute(f'CREATE TABLE IF NOT EXISTS {TABLE} (key TEXT PRIMARY KEY, value BLOB)')
            conn.commit()
            logging.debug(f'Key-value store ready at {self.path}')
        except sqlite3.Error as e:
            raise status.StorageUnavailableException(f'Could not open {self.path}: {e}') from e
        finally:
            if conn:
                conn.close()

    def get(self, key: str) -> Optional[bytes]:
        conn: Optional[sqlite3.Connection] = None
        try:
            conn = self.connection()
            row = conn.execute(f'SELECT value FROM {TABLE} WHERE key=?', (key,)).fetchone()
            return bytes(row[0]) if row else None
        except sqlite3.Error as e:
            logging.error(f'Failed to read "{key}": {e}')
            return None
        finally:
            if conn:
                conn.close()

    def set(self, key: str, value: bytes) -> bool:
        conn: Optional[sqlite3.Connection] = None
        try:
            conn = self.connection()
            conn.execute(
                f'INSERT OR REPLACE INTO {TABLE} (key, value) VALUES (?, ?)',
                (key, sqlite3.Binary(value))
            )
            conn.commit()
            return True
        except sqlite3.Error as e:
            logging.error(f'Failed to write "{key}": {e}')
            return False
        finally:
            if conn:
                conn.close()

    def remove(self, key: str) -> bool:
        conn: Optional[sqlite3.Connection] = None
        try:
            conn = self.connection()
            conn.execute(f'DELETE FROM {TABLE} WHERE key=?', (key,))
            conn.commit()
            return True
        except sqlite3.Error as e:
            logging.error(f'Failed to remove "{key}": {e}')
            return False
        finally:
            if conn:
                conn.close()


def load_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    """Read and decode a JSON document, returning `default` if missing or undecodable."""
    raw = store.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logging.error(f'Stored value of "{key}" is not valid JSON: {e}')
        return default


def dump_json(store: KeyValueStore, key: str, value: Any) -> None:
    """Encode and write a JSON document.

    Raises:
        status.StorageUnavailableException: If the store refused the write.
    """
    data = json.dumps(value, ensure_ascii=False).encode('utf-8')
    if not store.set(key, data):
        raise status.StorageUnavailableException(f'Could not save "{key}".')
