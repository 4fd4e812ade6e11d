"""
Key/value backends - concrete stores behind the persistence adapter.

Backends raise on failure; SafeStorage is the only layer that catches.

- MemoryBackend: process-local dict
- JsonFileBackend: one JSON object file, the on-disk analogue of localStorage
- PostgresBackend: a (key, value) table reached through psycopg2
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Any

from ..log import get_logger

logger = get_logger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


class StorageError(Exception):
    """The backing store could not complete an operation."""


class QuotaExceededError(StorageError):
    """A write would grow the store past its configured size limit."""


class KeyValueBackend:
    """Interface shared by all backends. Values are always strings."""

    kind = "base"

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def describe(self) -> str:
        return self.kind


class MemoryBackend(KeyValueBackend):
    """Dict-backed store. Keys enumerate in insertion order."""

    kind = "memory"

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self.data.keys())


class JsonFileBackend(KeyValueBackend):
    """
    Store every key in a single JSON object file.

    The whole file is re-read on each call so that edits made by another
    process are visible. Writes go to a temp file that replaces the target,
    so a crash never leaves a half-written store behind.
    """

    kind = "json"

    def __init__(self, path, quota_bytes: int = 0):
        """
        Initialize the file store.

        Args:
            path: Location of the JSON file (created on first write)
            quota_bytes: Maximum serialized size; 0 disables the limit
        """
        self.path = Path(os.path.expanduser(str(path)))
        self.quota_bytes = quota_bytes

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not contain a JSON object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        serialized = json.dumps(data, indent=2, ensure_ascii=False)
        size = len(serialized.encode("utf-8"))
        if self.quota_bytes and size > self.quota_bytes:
            raise QuotaExceededError(
                f"store would grow to {size} bytes (quota {self.quota_bytes})"
            )

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(serialized)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        if value is None or isinstance(value, str):
            return value
        # Hand-edited files may hold raw JSON values
        return json.dumps(value)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> List[str]:
        return list(self._load().keys())

    def describe(self) -> str:
        return f"json ({self.path})"


class PostgresBackend(KeyValueBackend):
    """
    Store keys in a PostgreSQL table:

        CREATE TABLE <table> (key TEXT PRIMARY KEY, value TEXT NOT NULL)

    Statements run in autocommit mode; there is no multi-key transaction.
    """

    kind = "postgres"

    def __init__(self, dsn: str = "", table: str = "profile_kv", conn=None):
        """
        Initialize the table store.

        Args:
            dsn: libpq connection string (ignored when conn is given)
            table: Table name, a plain SQL identifier
            conn: Existing psycopg2 connection to reuse
        """
        if not _IDENTIFIER_RE.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self.dsn = dsn
        self.table = table
        self._conn = conn
        self._owns_conn = conn is None
        self._table_ready = False

    @property
    def conn(self):
        """Get or open the database connection."""
        if self._conn is None:
            import psycopg2

            self._conn = psycopg2.connect(self.dsn)
            self._conn.autocommit = True
        if not self._table_ready:
            self._ensure_table()
        return self._conn

    def _ensure_table(self) -> None:
        with self._conn.cursor() as cur:
            cur.execute(
                f'CREATE TABLE IF NOT EXISTS "{self.table}" '
                f'(key TEXT PRIMARY KEY, value TEXT NOT NULL)'
            )
        self._table_ready = True
        logger.debug("Table %s ready", self.table)

    def get(self, key: str) -> Optional[str]:
        with self.conn.cursor() as cur:
            cur.execute(f'SELECT value FROM "{self.table}" WHERE key = %s', (key,))
            row = cur.fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self.conn.cursor() as cur:
            cur.execute(
                f'INSERT INTO "{self.table}" (key, value) VALUES (%s, %s) '
                f'ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value',
                (key, value),
            )

    def delete(self, key: str) -> None:
        with self.conn.cursor() as cur:
            cur.execute(f'DELETE FROM "{self.table}" WHERE key = %s', (key,))

    def keys(self) -> List[str]:
        with self.conn.cursor() as cur:
            cur.execute(f'SELECT key FROM "{self.table}" ORDER BY key')
            return [row[0] for row in cur.fetchall()]

    def close(self) -> None:
        if self._conn is not None and self._owns_conn:
            self._conn.close()
            self._conn = None
            self._table_ready = False

    def describe(self) -> str:
        return f"postgres (table {self.table})"


BACKENDS = ("json", "postgres", "memory")


def create_backend(
    kind: str,
    path: str = "",
    dsn: str = "",
    table: str = "profile_kv",
    quota_bytes: int = 0,
) -> KeyValueBackend:
    """
    Build a backend from configuration values.

    Raises:
        ValueError: Unknown backend kind or missing required setting
    """
    if kind == "memory":
        return MemoryBackend()
    if kind == "json":
        if not path:
            raise ValueError("The json backend requires a store path")
        return JsonFileBackend(path, quota_bytes=quota_bytes)
    if kind == "postgres":
        if not dsn:
            raise ValueError("The postgres backend requires a DSN")
        return PostgresBackend(dsn=dsn, table=table)
    raise ValueError(f"Unknown storage backend: {kind!r} (expected one of {', '.join(BACKENDS)})")
