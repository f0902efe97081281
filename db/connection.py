"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool for efficient connection reuse.

The pool is owned by an explicitly constructed `Database` object that
services receive in their constructor; nothing connects at import time.
"""

import threading
from typing import Callable, Optional

import psycopg2
from psycopg2 import extras, pool

from config import DatabaseSettings
from db.errors import DatabaseNotOpenError, PoolTimeoutError
from db.query_builder import CompiledQuery, QueryBuilder
from db.results import QueryResult, TransactionResult
from utils.logger import get_logger

logger = get_logger(__name__)


def execute_statement(conn, sql: str, params=()) -> list[dict]:
    """
    Run one statement on `conn` and return its rows as dicts.

    Statements without a result set (BEGIN, DDL, UPDATE without
    RETURNING) return an empty list.
    """
    with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
        cur.execute(sql, params or None)
        if cur.description is None:
            return []
        return [dict(row) for row in cur.fetchall()]


def is_disconnect(error: BaseException) -> bool:
    """True if the error means the connection itself can no longer be used."""
    return isinstance(error, (psycopg2.OperationalError, psycopg2.InterfaceError))


class Database:
    """
    Owner of one connection pool.

    Lifecycle:
        db = Database(settings)
        db.open()
        db.health_check()
        ...
        db.close()
    """

    def __init__(self, settings: Optional[DatabaseSettings] = None,
                 pool_factory: Callable = pool.ThreadedConnectionPool):
        self.settings = settings or DatabaseSettings.from_env()
        self._pool_factory = pool_factory
        self._pool = None
        self._slots = threading.BoundedSemaphore(self.settings.pool_max)
        self._lock = threading.Lock()
        self._checked_out = 0

    # ── LIFECYCLE ─────────────────────────────────────────

    def open(self) -> None:
        """
        Initialize the connection pool.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        if self._pool is not None:
            return
        try:
            self._pool = self._pool_factory(
                self.settings.pool_min,
                self.settings.pool_max,
                **self.settings.connect_kwargs(),
            )
            logger.info(f"Database connection pool initialized for {self.settings.describe()}.")
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool for {self.settings.describe()}: {e}")
            raise

    def health_check(self) -> QueryResult:
        """Ping the server; returns the server time on success."""
        result = self.query("SELECT NOW() AS current_time")
        if result.ok:
            logger.info(f"Database reachable, server time: {result.data[0]['current_time']}")
        return result

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    @property
    def max_connections(self) -> int:
        return self.settings.pool_max

    @property
    def available_connections(self) -> int:
        """Connections that can be checked out right now without waiting."""
        with self._lock:
            return self.settings.pool_max - self._checked_out

    # ── CONNECTIONS ───────────────────────────────────────

    def get_connection(self, timeout: Optional[float] = None):
        """
        Check out a connection, waiting until one is free.

        Args:
            timeout: Seconds to wait; defaults to the configured checkout timeout.

        Returns:
            A psycopg2 connection in autocommit mode.

        Raises:
            DatabaseNotOpenError: If the pool has not been opened.
            PoolTimeoutError: If no connection became free in time.
        """
        if self._pool is None:
            raise DatabaseNotOpenError("Database pool not initialized. Call open() first.")

        wait = self.settings.checkout_timeout if timeout is None else timeout
        acquired = self._slots.acquire(timeout=wait) if wait > 0 else self._slots.acquire()
        if not acquired:
            raise PoolTimeoutError(f"No database connection available after {wait:.1f}s")

        try:
            conn = self._pool.getconn()
            conn.autocommit = True
        except Exception:
            self._slots.release()
            raise

        with self._lock:
            self._checked_out += 1
        return conn

    def release_connection(self, conn, discard: bool = False) -> None:
        """
        Return a connection back to the pool.

        Args:
            conn: The psycopg2 connection to release.
            discard: Close the connection instead of reusing it.
        """
        try:
            if self._pool is not None:
                self._pool.putconn(conn, close=discard)
        finally:
            with self._lock:
                self._checked_out -= 1
            self._slots.release()

    # ── QUERIES ───────────────────────────────────────────

    def from_(self, table: str) -> QueryBuilder:
        """Start a query on `table`."""
        return QueryBuilder(table, executor=self)

    def query(self, sql: str, params=()) -> QueryResult:
        """Run a raw parameterized statement (psycopg2 `%s` placeholders)."""
        return self.run(CompiledQuery(sql, tuple(params)))

    def run(self, compiled: CompiledQuery) -> QueryResult:
        """Execute a compiled statement on a pooled connection."""
        try:
            conn = self.get_connection()
        except (DatabaseNotOpenError, PoolTimeoutError, psycopg2.Error) as e:
            logger.error(f"Failed to acquire a connection: {e}")
            return QueryResult.failure(e)

        discard = False
        try:
            rows = execute_statement(conn, compiled.sql, compiled.params)
            return QueryResult.success(rows)
        except psycopg2.Error as e:
            discard = is_disconnect(e)
            logger.error(f"Query failed: {e} | SQL: {compiled.sql}")
            return QueryResult.failure(e)
        finally:
            self.release_connection(conn, discard=discard)

    def transaction(self, unit_of_work: Callable) -> TransactionResult:
        """Run `unit_of_work(handle)` atomically. See `db.transaction.run_transaction`."""
        from db.transaction import run_transaction
        return run_transaction(self, unit_of_work)
