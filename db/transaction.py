"""
db/transaction.py
-----------------
All-or-nothing execution of a unit of work over one exclusive connection.

    Idle -> ConnectionAcquired -> InTransaction -> Committed | RolledBack
         -> ConnectionReleased

The unit of work receives a `TransactionHandle` and may issue any number
of statements through it. It signals failure either by raising or by
returning a QueryResult whose `error` is set; both roll back.
"""

from enum import Enum
from typing import Any, Callable, Optional

import psycopg2

from db.connection import execute_statement, is_disconnect
from db.errors import DatabaseNotOpenError, PoolTimeoutError, TransactionClosedError
from db.query_builder import CompiledQuery, QueryBuilder
from db.results import QueryResult, TransactionResult
from utils.logger import get_logger

logger = get_logger(__name__)


class TransactionState(str, Enum):
    IDLE = "idle"
    CONNECTION_ACQUIRED = "connection_acquired"
    IN_TRANSACTION = "in_transaction"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    CONNECTION_RELEASED = "connection_released"


class TransactionHandle:
    """
    Executes statements on the single connection held by a transaction.

    The first failing statement is remembered in `error`: PostgreSQL
    aborts the whole transaction at that point, so it can only roll back.
    """

    def __init__(self, conn):
        self._conn = conn
        self.state = TransactionState.CONNECTION_ACQUIRED
        self.history = [TransactionState.IDLE, TransactionState.CONNECTION_ACQUIRED]
        self.error: Optional[BaseException] = None

    def _move(self, state: TransactionState) -> None:
        self.state = state
        self.history.append(state)

    def from_(self, table: str) -> QueryBuilder:
        return QueryBuilder(table, executor=self)

    def query(self, sql: str, params=()) -> QueryResult:
        """Run a raw parameterized statement (psycopg2 `%s` placeholders)."""
        return self.run(CompiledQuery(sql, tuple(params)))

    def run(self, compiled: CompiledQuery) -> QueryResult:
        if self.state is not TransactionState.IN_TRANSACTION:
            return QueryResult.failure(
                TransactionClosedError(f"Transaction is {self.state.value}; statement not executed.")
            )
        try:
            return QueryResult.success(execute_statement(self._conn, compiled.sql, compiled.params))
        except psycopg2.Error as e:
            logger.error(f"Statement failed inside transaction: {e} | SQL: {compiled.sql}")
            if self.error is None:
                self.error = e
            return QueryResult.failure(e)

    # ── CONTROL ───────────────────────────────────────────

    def begin(self) -> None:
        execute_statement(self._conn, "BEGIN")
        self._move(TransactionState.IN_TRANSACTION)

    def commit(self) -> None:
        execute_statement(self._conn, "COMMIT")
        self._move(TransactionState.COMMITTED)

    def rollback(self) -> Optional[BaseException]:
        """
        Roll back; returns the exception if the ROLLBACK itself failed.

        The state becomes ROLLED_BACK either way so no further statements run.
        """
        try:
            execute_statement(self._conn, "ROLLBACK")
            return None
        except psycopg2.Error as e:
            logger.warning(f"ROLLBACK failed: {e}")
            return e
        finally:
            self._move(TransactionState.ROLLED_BACK)


def _outcome_error(outcome: Any) -> Optional[BaseException]:
    if isinstance(outcome, QueryResult):
        return outcome.error
    return None


def _outcome_data(outcome: Any) -> Any:
    if isinstance(outcome, QueryResult):
        return outcome.data
    return outcome


def run_transaction(database, unit_of_work: Callable[[TransactionHandle], Any]) -> TransactionResult:
    """
    Run `unit_of_work` inside BEGIN/COMMIT on one checked-out connection.

    Args:
        database: The Database that owns the pool.
        unit_of_work: Callable receiving a TransactionHandle. Its return
            value (unwrapped if it is a QueryResult) becomes `data`.

    Returns:
        TransactionResult with `data` on commit, or `error` after rollback.
        If the rollback also failed, `rollback_error` carries that failure
        while `error` keeps the original one.
    """
    try:
        conn = database.get_connection()
    except (DatabaseNotOpenError, PoolTimeoutError, psycopg2.Error) as e:
        logger.error(f"Transaction could not acquire a connection: {e}")
        return TransactionResult(error=e)

    handle = TransactionHandle(conn)
    discard = False
    try:
        outcome = None
        try:
            handle.begin()
            outcome = unit_of_work(handle)
            error = handle.error or _outcome_error(outcome)
        except Exception as e:
            error = e

        if error is None:
            try:
                handle.commit()
                return TransactionResult(data=_outcome_data(outcome))
            except psycopg2.Error as e:
                logger.error(f"COMMIT failed: {e}")
                error = e

        logger.error(f"Transaction rolled back: {error}")
        rollback_error = handle.rollback()
        discard = rollback_error is not None or is_disconnect(error)
        return TransactionResult(error=error, rollback_error=rollback_error)
    finally:
        database.release_connection(conn, discard=discard)
        handle._move(TransactionState.CONNECTION_RELEASED)
