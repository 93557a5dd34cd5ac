"""
SQLite connection pool and database bootstrap.

Repositories borrow a connection for each logical operation and hand it
back when done, so the number of open handles never exceeds the pool
size. The pool itself is blocking; async code reaches it through
``asyncio.to_thread`` so a waiting task suspends instead of stalling the
event loop.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from soundboard import config
from soundboard.errors import PoolTimeoutError, StartupError

logger = logging.getLogger(__name__)


class ConnectionPool:
    """
    Bounded pool of SQLite connections.
    
    Connections are opened lazily up to ``size`` and reused afterwards.
    ``check_same_thread`` is disabled because borrowers run on worker
    threads; a connection is only ever used by one borrower at a time.
    """

    def __init__(self, db_path, size: int = config.DB_POOL_SIZE,
                 timeout: float = config.DB_POOL_TIMEOUT):
        if size < 1:
            raise ValueError("Pool size must be at least 1")
        self.db_path = str(db_path)
        self.size = size
        self.timeout = timeout
        self._slots = threading.BoundedSemaphore(size)
        self._lock = threading.Lock()
        self._idle: List[sqlite3.Connection] = []
        self._in_use = 0
        self._closed = False

    @property
    def in_use(self) -> int:
        """Number of connections currently borrowed."""
        return self._in_use

    @property
    def closed(self) -> bool:
        return self._closed

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, check_same_thread=False, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    def acquire(self) -> sqlite3.Connection:
        """
        Borrow a connection, waiting up to ``timeout`` seconds for a free slot.

        Raises:
            PoolTimeoutError: every connection stayed busy for the whole timeout
            RuntimeError: the pool was closed
        """
        if self._closed:
            raise RuntimeError("Connection pool is closed")
        if not self._slots.acquire(timeout=self.timeout):
            raise PoolTimeoutError(
                f"No database connection free after {self.timeout}s (pool size {self.size})"
            )

        with self._lock:
            conn = self._idle.pop() if self._idle else None
            self._in_use += 1

        if conn is None:
            try:
                conn = self._open()
            except BaseException:
                with self._lock:
                    self._in_use -= 1
                self._slots.release()
                raise
        return conn

    def release(self, conn: sqlite3.Connection) -> None:
        """Return a borrowed connection."""
        with self._lock:
            self._in_use -= 1
            if self._closed:
                conn.close()
            else:
                self._idle.append(conn)
        self._slots.release()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """
        Borrow a connection for one unit of work.

        Commits when the block exits normally and rolls back otherwise.
        """
        conn = self.acquire()
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self.release(conn)

    def close(self) -> None:
        """Close idle connections; borrowed ones are closed when returned."""
        with self._lock:
            self._closed = True
            idle, self._idle = self._idle, []
        for conn in idle:
            conn.close()
        logger.info(f"Connection pool for {self.db_path} closed")


def open_database(db_path, pool_size: int = config.DB_POOL_SIZE,
                  timeout: float = config.DB_POOL_TIMEOUT) -> ConnectionPool:
    """
    Create the connection pool and check that the database is usable.

    Raises:
        StartupError: the file cannot be created or opened
    """
    db_path = Path(db_path)
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StartupError(f"Cannot create database directory {db_path.parent}: {e}") from e

    pool = ConnectionPool(db_path, size=pool_size, timeout=timeout)
    try:
        with pool.connection() as conn:
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("SELECT 1").fetchone()
    except (sqlite3.Error, OSError) as e:
        pool.close()
        raise StartupError(f"Cannot open database {db_path}: {e}") from e

    logger.info(f"Database ready at {db_path} (pool size {pool_size})")
    return pool
