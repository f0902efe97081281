"""Unit tests for the pooled Database resource."""

import psycopg2
import pytest

from config import DatabaseSettings
from db.connection import Database
from db.errors import DatabaseNotOpenError, PoolTimeoutError


class TestLifecycle:
    """open / close / configuration."""

    def test_open_passes_settings_to_pool(self, database, fake_pool):
        assert fake_pool.args == (1, 2)
        assert fake_pool.kwargs == {
            "host": "localhost",
            "port": 5432,
            "dbname": "pizzaria_test",
            "user": "postgres",
            "password": "secret",
            "sslmode": "disable",
        }

    def test_statement_timeout_option(self):
        settings = DatabaseSettings(ssl=True, statement_timeout_ms=5000)

        kwargs = settings.connect_kwargs()

        assert kwargs["sslmode"] == "require"
        assert kwargs["options"] == "-c statement_timeout=5000"

    def test_close_releases_pool(self, settings, fake_pool):
        db = Database(settings, pool_factory=fake_pool)
        db.open()

        db.close()

        assert fake_pool.closed
        assert not db.is_open

    def test_open_failure_propagates(self, settings):
        def unreachable(*args, **kwargs):
            raise psycopg2.OperationalError("could not connect")

        db = Database(settings, pool_factory=unreachable)

        with pytest.raises(psycopg2.OperationalError):
            db.open()

    def test_unopened_database(self, settings, fake_pool):
        """Queries before open() fail with DatabaseNotOpenError."""
        db = Database(settings, pool_factory=fake_pool)

        assert isinstance(db.query("SELECT 1").error, DatabaseNotOpenError)
        assert isinstance(db.transaction(lambda tx: None).error, DatabaseNotOpenError)
        with pytest.raises(DatabaseNotOpenError):
            db.get_connection()


class TestQueries:
    """Statements outside a transaction."""

    def test_query_returns_rows(self, database, fake_pool):
        fake_pool.handler = lambda sql, params: [{"id": "t1", "name": "Table 1"}]

        result = database.from_("tables").eq("id", "t1").execute()

        assert result.ok
        assert result.data == [{"id": "t1", "name": "Table 1"}]
        assert fake_pool.connections[0].statements == [("SELECT * FROM tables WHERE id = %s", ("t1",))]

    def test_connections_are_autocommit(self, database, fake_pool):
        database.query("SELECT 1")

        assert fake_pool.connections[0].autocommit is True

    def test_query_failure_is_returned(self, database, fake_pool):
        """Driver errors come back in the envelope; the connection is reused."""
        def handler(sql, params):
            raise psycopg2.ProgrammingError("syntax error")

        fake_pool.handler = handler

        result = database.query("SELEC 1")

        assert isinstance(result.error, psycopg2.ProgrammingError)
        assert fake_pool.released == [(fake_pool.connections[0], False)]

    def test_broken_connection_is_discarded(self, database, fake_pool):
        def handler(sql, params):
            raise psycopg2.OperationalError("terminating connection")

        fake_pool.handler = handler

        database.query("SELECT 1")

        assert fake_pool.released[0][1] is True
        assert database.available_connections == database.max_connections

    def test_health_check(self, database, fake_pool):
        fake_pool.handler = lambda sql, params: [{"current_time": "2026-01-01 12:00:00"}]

        result = database.health_check()

        assert result.ok
        assert fake_pool.connections[0].sql == ["SELECT NOW() AS current_time"]


class TestCheckout:
    """Bounded checkout with timeout."""

    def test_available_connections_tracks_checkouts(self, database):
        conn = database.get_connection()
        assert database.available_connections == 1

        database.release_connection(conn)
        assert database.available_connections == 2

    def test_checkout_times_out(self, database):
        held = [database.get_connection(), database.get_connection()]

        with pytest.raises(PoolTimeoutError):
            database.get_connection(timeout=0.01)

        for conn in held:
            database.release_connection(conn)
