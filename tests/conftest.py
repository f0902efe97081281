"""Shared fixtures: an in-memory stand-in for the psycopg2 pool and its connections."""

import pytest

from config import DatabaseSettings
from db.connection import Database


def default_handler(sql, params):
    return []


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.statements.append((sql, params))
        rows = self.conn.handler(sql, params)
        self.description = None if rows is None else [("column",)]
        self._rows = rows or []

    def fetchall(self):
        return self._rows


class FakeConnection:
    """Records every statement; `handler(sql, params)` returns rows, None, or raises."""

    def __init__(self, handler=None):
        self.handler = handler or default_handler
        self.statements = []
        self.autocommit = False

    def cursor(self, cursor_factory=None):
        return FakeCursor(self)

    @property
    def sql(self):
        return [sql for sql, _ in self.statements]


class FakePool:
    def __init__(self):
        self.handler = default_handler
        self.connections = []
        self.released = []
        self.closed = False
        self.args = None
        self.kwargs = None

    def __call__(self, minconn, maxconn, **kwargs):
        self.args = (minconn, maxconn)
        self.kwargs = kwargs
        return self

    def getconn(self):
        conn = FakeConnection(self.handler)
        self.connections.append(conn)
        return conn

    def putconn(self, conn, close=False):
        self.released.append((conn, close))

    def closeall(self):
        self.closed = True


@pytest.fixture
def fake_pool():
    return FakePool()


@pytest.fixture
def settings():
    return DatabaseSettings(
        host="localhost",
        port=5432,
        database="pizzaria_test",
        user="postgres",
        password="secret",
        ssl=False,
        pool_min=1,
        pool_max=2,
        checkout_timeout=0.05,
        statement_timeout_ms=0,
    )


@pytest.fixture
def database(settings, fake_pool):
    db = Database(settings, pool_factory=fake_pool)
    db.open()
    yield db
    db.close()
