"""
Tests for soundboard/database.py - ConnectionPool and open_database.
"""

import sqlite3
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from soundboard.database import ConnectionPool, open_database
from soundboard.errors import PoolTimeoutError, StartupError


class TestConnectionPool:
    """Tests for the bounded connection pool."""

    def test_checkout_waits_then_times_out(self, tmp_path):
        pool = ConnectionPool(tmp_path / "pool.db", size=1, timeout=0.1)
        conn = pool.acquire()
        try:
            with pytest.raises(PoolTimeoutError):
                pool.acquire()
        finally:
            pool.release(conn)

        again = pool.acquire()
        assert again is conn
        pool.release(again)
        pool.close()

    def test_never_more_connections_than_size(self, tmp_path):
        pool = ConnectionPool(tmp_path / "pool.db", size=2, timeout=5.0)
        peak = 0
        lock = threading.Lock()

        def work(_):
            nonlocal peak
            with pool.connection() as conn:
                with lock:
                    peak = max(peak, pool.in_use)
                conn.execute("SELECT 1").fetchone()
                time.sleep(0.01)

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(work, range(32)))

        assert 1 <= peak <= 2
        assert pool.in_use == 0
        pool.close()

    def test_rolls_back_on_error(self, tmp_path):
        pool = ConnectionPool(tmp_path / "pool.db", size=1)
        with pool.connection() as conn:
            conn.execute("CREATE TABLE t (x INTEGER)")

        with pytest.raises(ValueError):
            with pool.connection() as conn:
                conn.execute("INSERT INTO t VALUES (1)")
                raise ValueError("boom")

        with pool.connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM t").fetchone()[0] == 0
        assert pool.in_use == 0
        pool.close()

    def test_closed_pool_refuses_checkout(self, tmp_path):
        pool = ConnectionPool(tmp_path / "pool.db", size=1)
        pool.close()

        assert pool.closed is True
        with pytest.raises(RuntimeError):
            pool.acquire()

    def test_rejects_empty_pool(self, tmp_path):
        with pytest.raises(ValueError):
            ConnectionPool(tmp_path / "pool.db", size=0)


class TestOpenDatabase:
    """Tests for database bootstrap."""

    def test_creates_file_and_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "bot.db"

        pool = open_database(db_path, pool_size=1)
        try:
            assert db_path.exists()
            with pool.connection() as conn:
                mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
            assert mode.lower() == "wal"
        finally:
            pool.close()

    def test_unopenable_database_is_a_startup_error(self, tmp_path):
        # A directory cannot be opened as a database file
        with pytest.raises(StartupError):
            open_database(tmp_path, pool_size=1)

    def test_startup_error_chains_cause(self, tmp_path):
        with pytest.raises(StartupError) as excinfo:
            open_database(tmp_path, pool_size=1)

        assert isinstance(excinfo.value.__cause__, sqlite3.Error)
