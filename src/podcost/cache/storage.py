"""Cache persistence backends.

Caches hold their entries through a ``CachePersistence`` so a durable
store can replace process memory without touching decision logic.
"""

import json
import re
import sqlite3
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any, Generic, TypeVar

from .models import CacheEntry, CacheMetadata

T = TypeVar("T")


class CachePersistence(ABC, Generic[T]):
    """Storage interface for cache entries keyed by content hash."""

    @abstractmethod
    def load(self, content_hash: str) -> CacheEntry[T] | None:
        """Return the stored entry for ``content_hash`` or None."""

    @abstractmethod
    def save(self, entry: CacheEntry[T]) -> None:
        """Insert or overwrite the entry for ``entry.content_hash``."""

    @abstractmethod
    def delete(self, content_hash: str) -> None:
        """Remove the entry if present."""

    @abstractmethod
    def entries(self) -> list[CacheEntry[T]]:
        """Return every stored entry."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry."""

    def close(self) -> None:
        """Release any held resources."""


class InMemoryCachePersistence(CachePersistence[T]):
    """Dictionary-backed persistence; contents are lost on process exit."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def load(self, content_hash: str) -> CacheEntry[T] | None:
        with self._lock:
            return self._entries.get(content_hash)

    def save(self, entry: CacheEntry[T]) -> None:
        with self._lock:
            self._entries[entry.content_hash] = entry

    def delete(self, content_hash: str) -> None:
        with self._lock:
            self._entries.pop(content_hash, None)

    def entries(self) -> list[CacheEntry[T]]:
        with self._lock:
            return list(self._entries.values())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def _identity(value: Any) -> Any:
    return value


class SQLiteCachePersistence(CachePersistence[T]):
    """SQLite-based cache persistence.

    Each cache instance uses its own table inside ``cache.db``. Payloads
    are stored as text produced by ``encode`` and restored by ``decode``.
    """

    def __init__(
        self,
        cache_dir: Path,
        table: str,
        encode: Callable[[T], str] = _identity,
        decode: Callable[[str], T] = _identity,
    ):
        """Initialize cache storage with database in given directory.

        Args:
            cache_dir: Directory containing cache database
            table: Table name for this cache (letters, digits, underscores)
            encode: Payload to text conversion
            decode: Text to payload conversion

        Raises:
            ValueError: If table name is not a plain identifier
        """
        if not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", table):
            raise ValueError(f"Invalid table name: {table!r}")

        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = self.cache_dir / "cache.db"
        self.table = table
        self._encode = encode
        self._decode = decode

        conn = self._get_connection()
        try:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    content_hash TEXT PRIMARY KEY,
                    id TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    model TEXT NOT NULL,
                    cost REAL NOT NULL,
                    quality TEXT,
                    created_at TEXT NOT NULL,
                    expires_at TEXT NOT NULL,
                    last_accessed TEXT NOT NULL,
                    access_count INTEGER NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection with WAL mode for concurrency."""
        conn = sqlite3.connect(
            str(self.db_path),
            timeout=30.0,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=30000")
        conn.execute("PRAGMA synchronous=NORMAL")
        return conn

    def _row_to_entry(self, row: sqlite3.Row) -> CacheEntry[T]:
        # Convert stored strings back to proper types
        return CacheEntry(
            id=row["id"],
            content_hash=row["content_hash"],
            payload=self._decode(row["payload"]),
            metadata=CacheMetadata(
                model=row["model"],
                cost=row["cost"],
                quality=json.loads(row["quality"]),
                created_at=datetime.fromisoformat(row["created_at"]),
                expires_at=datetime.fromisoformat(row["expires_at"]),
                last_accessed=datetime.fromisoformat(row["last_accessed"]),
                access_count=row["access_count"],
            ),
        )

    def load(self, content_hash: str) -> CacheEntry[T] | None:
        conn = self._get_connection()
        try:
            row = conn.execute(
                f"SELECT * FROM {self.table} WHERE content_hash = ?",
                (content_hash,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return self._row_to_entry(row)

    def save(self, entry: CacheEntry[T]) -> None:
        meta = entry.metadata
        conn = self._get_connection()
        try:
            conn.execute(
                f"""
                INSERT OR REPLACE INTO {self.table}
                (content_hash, id, payload, model, cost, quality,
                 created_at, expires_at, last_accessed, access_count)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    entry.content_hash,
                    entry.id,
                    self._encode(entry.payload),
                    meta.model,
                    meta.cost,
                    json.dumps(meta.quality),
                    meta.created_at.isoformat(),
                    meta.expires_at.isoformat(),
                    meta.last_accessed.isoformat(),
                    meta.access_count,
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, content_hash: str) -> None:
        conn = self._get_connection()
        try:
            conn.execute(
                f"DELETE FROM {self.table} WHERE content_hash = ?", (content_hash,)
            )
            conn.commit()
        finally:
            conn.close()

    def entries(self) -> list[CacheEntry[T]]:
        conn = self._get_connection()
        try:
            rows = conn.execute(f"SELECT * FROM {self.table}").fetchall()
        finally:
            conn.close()
        return [self._row_to_entry(row) for row in rows]

    def clear(self) -> None:
        conn = self._get_connection()
        try:
            conn.execute(f"DELETE FROM {self.table}")
            conn.commit()
        finally:
            conn.close()
