"""SQLite backend — a single database file for records and sequences."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from contextlib import closing

logger = logging.getLogger(__name__)

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS records ("
    " collection TEXT NOT NULL,"
    " key TEXT NOT NULL,"
    " value BLOB NOT NULL,"
    " PRIMARY KEY (collection, key))",
    "CREATE TABLE IF NOT EXISTS sequences ("
    " name TEXT PRIMARY KEY,"
    " value INTEGER NOT NULL)",
)
_BUSY_TIMEOUT_SECONDS = 30.0


class SqliteBackend:
    """Store records in SQLite.

    Every operation opens its own connection in a worker thread, so reads
    and writes from concurrent requests never share a cursor and never
    block the event loop. SQLite's file locking serializes the writers.
    """

    def __init__(self, path: str) -> None:
        self._path = path

    def _connect(self) -> sqlite3.Connection:
        # Autocommit mode; transactions are opened explicitly where needed.
        return sqlite3.connect(
            self._path, timeout=_BUSY_TIMEOUT_SECONDS, isolation_level=None
        )

    async def initialize(self) -> None:
        """Create the tables if this is a fresh database file."""
        await asyncio.to_thread(self._create_schema)
        logger.info("SQLite backend opened — path=%s", self._path)

    def _create_schema(self) -> None:
        with closing(self._connect()) as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            for statement in _SCHEMA:
                conn.execute(statement)

    async def close(self) -> None:
        logger.info("SQLite backend closed — path=%s", self._path)

    async def get(self, collection: str, key: str) -> bytes | None:
        return await asyncio.to_thread(self._get, collection, key)

    def _get(self, collection: str, key: str) -> bytes | None:
        with closing(self._connect()) as conn:
            row = conn.execute(
                "SELECT value FROM records WHERE collection = ? AND key = ?",
                (collection, key),
            ).fetchone()
        return None if row is None else bytes(row[0])

    async def put(self, collection: str, key: str, value: bytes) -> None:
        await asyncio.to_thread(self._put, collection, key, value)

    def _put(self, collection: str, key: str, value: bytes) -> None:
        with closing(self._connect()) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO records (collection, key, value) VALUES (?, ?, ?)",
                (collection, key, value),
            )

    async def next_sequence(self, collection: str) -> int:
        return await asyncio.to_thread(self._next_sequence, collection)

    def _next_sequence(self, collection: str) -> int:
        with closing(self._connect()) as conn:
            # IMMEDIATE takes the write lock up front so the read of the new
            # value cannot interleave with another allocator.
            conn.execute("BEGIN IMMEDIATE")
            try:
                conn.execute(
                    "INSERT OR IGNORE INTO sequences (name, value) VALUES (?, 0)",
                    (collection,),
                )
                conn.execute(
                    "UPDATE sequences SET value = value + 1 WHERE name = ?",
                    (collection,),
                )
                (value,) = conn.execute(
                    "SELECT value FROM sequences WHERE name = ?", (collection,)
                ).fetchone()
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        return int(value)

    async def count(self, collection: str) -> int:
        return await asyncio.to_thread(self._count, collection)

    def _count(self, collection: str) -> int:
        with closing(self._connect()) as conn:
            (total,) = conn.execute(
                "SELECT COUNT(*) FROM records WHERE collection = ?", (collection,)
            ).fetchone()
        return int(total)
