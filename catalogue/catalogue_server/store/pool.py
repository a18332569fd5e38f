"""
Bounded SQLite connection pool.

Connections are opened lazily up to pool_size and reused afterwards. Every
connection runs in autocommit mode (isolation_level=None); callers that need
atomicity use transaction(), which wraps the body in BEGIN IMMEDIATE /
COMMIT and rolls back on any exception.

Invariants:
    - At most pool_size connections are handed out at once
    - acquire() waits at most timeout_seconds, then raises
      ResourceExhaustedError
    - A connection is never returned to the pool inside a transaction

How to change safely:
    - Keep PRAGMAs and SQL functions identical on every connection
    - Never hold a connection across an await
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from ..errors import ResourceExhaustedError
from ..query.builder import CASEFOLD_FUNCTION, casefold
from .ddl import schema_sql

logger = logging.getLogger(__name__)


class PoolClosedError(Exception):
    """The pool has been closed."""

    pass


class ConnectionPool:
    """Thread-safe pool of SQLite connections to one database file.

    Example:
        >>> pool = ConnectionPool("/var/lib/catalogue/catalogue.db", pool_size=4)
        >>> pool.initialize_schema()
        >>> with pool.transaction() as conn:
        ...     conn.execute("UPDATE work SET ... WHERE work_id = ?", (work_id,))
    """

    def __init__(
        self,
        database_path: str,
        pool_size: int = 5,
        timeout_seconds: float = 5.0,
        busy_timeout_ms: int = 5000,
        wal_mode: bool = True,
    ) -> None:
        """Initialize the pool.

        Args:
            database_path: SQLite database file
            pool_size: Maximum concurrently checked-out connections
            timeout_seconds: Maximum wait for a free connection
            busy_timeout_ms: SQLite busy timeout
            wal_mode: Enable SQLite WAL mode
        """
        if pool_size < 1:
            raise ValueError(f"pool_size must be at least 1, got {pool_size}")
        self.database_path = Path(database_path)
        self.pool_size = pool_size
        self.timeout_seconds = timeout_seconds
        self.busy_timeout_ms = busy_timeout_ms
        self.wal_mode = wal_mode
        self._slots = threading.BoundedSemaphore(pool_size)
        self._idle: list[sqlite3.Connection] = []
        self._lock = threading.Lock()
        self._closed = False

    def _connect(self) -> sqlite3.Connection:
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(
            str(self.database_path),
            timeout=self.busy_timeout_ms / 1000.0,
            isolation_level=None,  # Autocommit by default, explicit transactions
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        conn.create_function(CASEFOLD_FUNCTION, 1, casefold, deterministic=True)
        try:
            conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout_ms}")
            if self.wal_mode:
                conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA synchronous = NORMAL")
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error:
            conn.close()
            raise
        logger.debug(f"Opened connection to {self.database_path}")
        return conn

    def acquire(self, timeout: Optional[float] = None) -> sqlite3.Connection:
        """Check out a connection.

        Raises:
            ResourceExhaustedError: If none is free within the timeout
            PoolClosedError: If the pool has been closed
        """
        if self._closed:
            raise PoolClosedError("Connection pool is closed")

        wait = self.timeout_seconds if timeout is None else timeout
        if not self._slots.acquire(timeout=wait):
            logger.warning(
                "Connection pool exhausted",
                extra={"pool_size": self.pool_size, "timeout_seconds": wait},
            )
            raise ResourceExhaustedError(wait)

        with self._lock:
            conn = self._idle.pop() if self._idle else None
        if conn is None:
            try:
                conn = self._connect()
            except BaseException:
                self._slots.release()
                raise
        return conn

    def release(self, conn: sqlite3.Connection) -> None:
        """Return a checked-out connection."""
        try:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
        finally:
            with self._lock:
                if self._closed:
                    conn.close()
                else:
                    self._idle.append(conn)
            self._slots.release()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Check out a connection for the duration of the block."""
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the block in one BEGIN IMMEDIATE transaction."""
        with self.connection() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise

    def initialize_schema(self) -> None:
        """Create tables and indexes if they don't exist."""
        with self.connection() as conn:
            conn.executescript(schema_sql())
        logger.info(f"Initialized catalogue database: {self.database_path}")

    def close(self) -> None:
        """Close idle connections; checked-out ones close on release."""
        with self._lock:
            self._closed = True
            idle, self._idle = self._idle, []
        for conn in idle:
            conn.close()
        logger.info(f"Closed connection pool for {self.database_path}")
