"""
Read-only database handle.

The API never writes to the catalog. Each query opens its own short-lived
read-only SQLite connection so that queries issued concurrently from worker
threads never share a connection object.
"""

import asyncio
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from core.config import DB_PATH, DB_RECONNECT_ATTEMPTS, DB_RECONNECT_DELAY
from db.errors import DatabaseUnavailable, QueryError


def log_query_error(sql, params, error):
    print("[ERROR] Database query failed")
    print(f"[ERROR] SQL: {' '.join(sql.split())}")
    if params:
        print(f"[ERROR] Parameters: {list(params)}")
    print(f"[ERROR] Message: {error}")


class Database:
    """
    Handle for the catalog database.

    The handle is created once by the application and injected into the
    service functions. ``connect()`` probes the file; after that every query
    opens a fresh read-only connection.
    """

    def __init__(self, db_path=DB_PATH):
        self.db_path = Path(db_path)
        self.connected = False

    def _open(self):
        uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as e:
            self.connected = False
            raise DatabaseUnavailable(
                f"Cannot open database at {self.db_path}: {e}"
            ) from e
        conn.row_factory = sqlite3.Row
        return conn

    def connect(self):
        """
        Verify that the database file can be opened and read.

        Raises DatabaseUnavailable if it cannot.
        """
        conn = self._open()
        try:
            conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
        except sqlite3.Error as e:
            self.connected = False
            raise DatabaseUnavailable(
                f"Cannot read database at {self.db_path}: {e}"
            ) from e
        finally:
            conn.close()

        self.connected = True
        print(f"[OK] Connected to SQLite database at {self.db_path}")

    def close(self):
        self.connected = False

    @contextmanager
    def connection(self):
        if not self.connected:
            raise DatabaseUnavailable("Database connection is not available.")

        conn = self._open()
        try:
            yield conn
        finally:
            conn.close()

    def fetch_all(self, sql, params=(), context="run query"):
        """
        Run a SELECT and return every row as a plain dict.
        """
        with self.connection() as conn:
            try:
                rows = conn.execute(sql, tuple(params)).fetchall()
            except (sqlite3.Error, OverflowError) as e:
                log_query_error(sql, params, e)
                raise QueryError(f"Failed to {context}.") from e

        return [dict(row) for row in rows]

    def fetch_one(self, sql, params=(), context="run query"):
        """
        Run a SELECT and return the first row as a dict, or None.
        """
        with self.connection() as conn:
            try:
                row = conn.execute(sql, tuple(params)).fetchone()
            except (sqlite3.Error, OverflowError) as e:
                log_query_error(sql, params, e)
                raise QueryError(f"Failed to {context}.") from e

        return dict(row) if row is not None else None


class ReconnectPolicy:
    """
    Bounded reconnect used by the HTTP middleware.

    Tries ``attempts`` times to reconnect, sleeping ``delay`` seconds between
    attempts, and gives up after that.
    """

    def __init__(self, attempts=DB_RECONNECT_ATTEMPTS, delay=DB_RECONNECT_DELAY):
        self.attempts = max(1, attempts)
        self.delay = delay

    async def ensure_connected(self, database) -> bool:
        if database.connected:
            return True

        for attempt in range(1, self.attempts + 1):
            print(
                f"[WARN] Database not connected. "
                f"Reconnect attempt {attempt}/{self.attempts}"
            )
            try:
                database.connect()
                return True
            except DatabaseUnavailable as e:
                print(f"[ERROR] Reconnection failed: {e}")

            if attempt < self.attempts:
                await asyncio.sleep(self.delay)

        return False
