"""Persistent string key-value storage.

The preferences store is the substrate that sync checkpoints live in: a
flat mapping of string keys to string values that survives process
restarts. Two backends are provided, a JSON file and a SQLite table.
Neither keeps values in memory, so independent handles on the same store
see each other's writes.
Every write is flushed before `set` returns.
"""
import fcntl
import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Optional

from config import STORAGE, get_logger
from config.exceptions import StorageError

logger = get_logger(__name__)


class PreferencesStore(ABC):
    """String-keyed, string-valued persistent store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value for `key`, or None if it was never set."""

    @abstractmethod
    def set(self, key: str, value: Optional[str]) -> None:
        """Store `value` under `key`. None removes the key."""

    @abstractmethod
    def keys(self) -> List[str]:
        """Return all stored keys."""

    def remove(self, key: str) -> None:
        self.set(key, None)

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

    def __contains__(self, key: str) -> bool:
        return self.contains(key)

    @staticmethod
    def _check_value(key: str, value: Optional[str]) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Preference keys must be str, got {type(key).__name__}")
        if value is not None and not isinstance(value, str):
            raise TypeError(f"Preference values must be str or None, got {type(value).__name__}")


class JsonPreferences(PreferencesStore):
    """Preferences persisted to a single JSON object file.

    Nothing is cached between calls: every read goes to the file, and every
    write re-reads it under an exclusive lock before changing one key, so
    several handles (or processes) on the same file never drop each
    other's keys.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.lock_path = self.path.with_suffix(self.path.suffix + '.lock')
        self._lock = threading.Lock()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._read()  # surface a corrupt file at open time
        logger.debug(f"JsonPreferences initialized at {self.path}")

    @contextmanager
    def _file_lock(self, exclusive: bool):
        """Hold an flock on the side lock file for the duration of the block."""
        try:
            lock_fd = open(self.lock_path, 'a')
        except OSError as e:
            raise StorageError(f"Could not lock preferences: {e}", {"path": str(self.lock_path)})
        try:
            fcntl.flock(lock_fd.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
            yield
        finally:
            fcntl.flock(lock_fd.fileno(), fcntl.LOCK_UN)
            lock_fd.close()

    def _read(self) -> Dict[str, str]:
        """Load the current file contents. A missing file is empty."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not load preferences: {e}")
            raise StorageError(f"Failed to load preferences: {e}", {"path": str(self.path)})
        if not isinstance(data, dict):
            raise StorageError("Preferences file is not a JSON object", {"path": str(self.path)})
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, data: Dict[str, str]) -> None:
        """Atomic write: write to temp file then rename."""
        temp_file = self.path.with_suffix(self.path.suffix + '.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, sort_keys=True)
            temp_file.replace(self.path)
        except OSError as e:
            logger.error(f"Error saving preferences: {e}")
            temp_file.unlink(missing_ok=True)
            raise StorageError(f"Failed to save preferences: {e}", {"path": str(self.path)})

    def get(self, key: str) -> Optional[str]:
        with self._lock, self._file_lock(exclusive=False):
            return self._read().get(key)

    def set(self, key: str, value: Optional[str]) -> None:
        self._check_value(key, value)
        with self._lock, self._file_lock(exclusive=True):
            data = self._read()
            if value is None:
                if key not in data:
                    return
                del data[key]
            else:
                data[key] = value
            self._write(data)

    def keys(self) -> List[str]:
        with self._lock, self._file_lock(exclusive=False):
            return sorted(self._read())


class SQLitePreferences(PreferencesStore):
    """Preferences persisted to a SQLite key/value table."""

    SCHEMA = """
    CREATE TABLE IF NOT EXISTS preferences (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()
        logger.debug(f"SQLitePreferences initialized at {self.path}")

    @contextmanager
    def _connection(self):
        """Context manager for database connections.

        Translates driver errors into StorageError.
        """
        try:
            conn = sqlite3.connect(str(self.path), timeout=30.0, isolation_level=None)
        except sqlite3.Error as e:
            raise StorageError(f"Could not open preferences database: {e}", {"path": str(self.path)})
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            yield conn
        except sqlite3.Error as e:
            logger.error(f"Preferences database error: {e}")
            raise StorageError(f"Preferences database error: {e}", {"path": str(self.path)})
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._connection() as conn:
            conn.executescript(self.SCHEMA)

    def get(self, key: str) -> Optional[str]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT value FROM preferences WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: Optional[str]) -> None:
        self._check_value(key, value)
        with self._lock, self._connection() as conn:
            if value is None:
                conn.execute("DELETE FROM preferences WHERE key = ?", (key,))
            else:
                conn.execute(
                    """INSERT INTO preferences (key, value, updated_at)
                       VALUES (?, ?, CURRENT_TIMESTAMP)
                       ON CONFLICT(key) DO UPDATE SET
                           value = excluded.value,
                           updated_at = CURRENT_TIMESTAMP""",
                    (key, value)
                )

    def keys(self) -> List[str]:
        with self._connection() as conn:
            rows = conn.execute("SELECT key FROM preferences ORDER BY key").fetchall()
        return [row[0] for row in rows]


BACKENDS = {
    "json": (JsonPreferences, STORAGE.PREFERENCES_SUFFIX_JSON),
    "sqlite": (SQLitePreferences, STORAGE.PREFERENCES_SUFFIX_SQLITE),
}


def open_preferences(namespace: str, data_dir: Optional[Path] = None,
                     backend: str = "json") -> PreferencesStore:
    """Open the preferences store for a storage namespace.

    Args:
        namespace: Storage namespace; selects the file name.
        data_dir: Directory holding the store. Defaults to ~/.sharebudget/
        backend: "json" or "sqlite".
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown preferences backend: {backend!r}")
    if data_dir is None:
        data_dir = Path.home() / STORAGE.DATA_DIR_NAME
    store_cls, suffix = BACKENDS[backend]
    return store_cls(Path(data_dir) / f"{namespace}{suffix}")
