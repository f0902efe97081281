"""
db/query_builder.py
-------------------
Chainable, immutable SQL builder.

Every chained call returns a new builder, so a builder can be executed
as many times as needed without its state drifting. Values are always
bound as positional parameters, never interpolated into the SQL text.

Usage:
    rows = db.from_("categories").eq("id", category_id).single().execute()
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Optional, Protocol, Sequence, Union

from db.results import CountResult, QueryResult
from utils.logger import get_logger

logger = get_logger(__name__)

# Placeholder style understood by psycopg2.
DRIVER_PARAMSTYLE = "format"

_DIRECTIONS = ("ASC", "DESC")


class Operator(str, Enum):
    EQ = "="
    NEQ = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    IN = "IN"
    LIKE = "LIKE"
    ILIKE = "ILIKE"


@dataclass(frozen=True)
class Predicate:
    column: str
    operator: Operator
    value: Any


@dataclass(frozen=True)
class Ordering:
    column: str
    direction: str = "ASC"


@dataclass(frozen=True)
class CompiledQuery:
    """SQL text plus the positional parameters it binds, in placeholder order."""
    sql: str
    params: tuple = ()


class StatementExecutor(Protocol):
    def run(self, compiled: CompiledQuery) -> QueryResult: ...


class _Placeholders:
    """Hands out sequential placeholders and collects the bound values."""

    def __init__(self, paramstyle: str):
        if paramstyle not in ("numeric", "format"):
            raise ValueError(f"Unsupported paramstyle: {paramstyle!r}")
        self.paramstyle = paramstyle
        self.params: list = []

    def bind(self, value: Any) -> str:
        self.params.append(value)
        if self.paramstyle == "numeric":
            return f"${len(self.params)}"
        return "%s"


@dataclass(frozen=True)
class QueryBuilder:
    """
    Accumulates table, projection, predicates, ordering and paging.

    Attributes:
        table: Target table name (not validated against the schema).
        executor: Database or TransactionHandle that runs the statement.
        columns: Projection; defaults to all columns.
        predicates: Filters combined with AND, in the order they were added.
        ordering: The single active sort key, if any.
        limit_value / offset_value: Optional paging.
    """
    table: str
    executor: Optional[StatementExecutor] = field(default=None, compare=False, repr=False)
    columns: tuple = ("*",)
    predicates: tuple = ()
    ordering: Optional[Ordering] = None
    limit_value: Optional[int] = None
    offset_value: Optional[int] = None

    # ── CHAIN ─────────────────────────────────────────────

    def select(self, columns: Union[str, Sequence[str]] = "*") -> "QueryBuilder":
        if isinstance(columns, str):
            return replace(self, columns=(columns,))
        return replace(self, columns=tuple(columns) or ("*",))

    def _where(self, column: str, operator: Operator, value: Any) -> "QueryBuilder":
        return replace(self, predicates=self.predicates + (Predicate(column, operator, value),))

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        return self._where(column, Operator.EQ, value)

    def neq(self, column: str, value: Any) -> "QueryBuilder":
        return self._where(column, Operator.NEQ, value)

    def gt(self, column: str, value: Any) -> "QueryBuilder":
        return self._where(column, Operator.GT, value)

    def gte(self, column: str, value: Any) -> "QueryBuilder":
        return self._where(column, Operator.GTE, value)

    def lt(self, column: str, value: Any) -> "QueryBuilder":
        return self._where(column, Operator.LT, value)

    def lte(self, column: str, value: Any) -> "QueryBuilder":
        return self._where(column, Operator.LTE, value)

    def in_(self, column: str, values: Iterable[Any]) -> "QueryBuilder":
        return self._where(column, Operator.IN, tuple(values))

    def like(self, column: str, pattern: str) -> "QueryBuilder":
        return self._where(column, Operator.LIKE, pattern)

    def ilike(self, column: str, pattern: str) -> "QueryBuilder":
        return self._where(column, Operator.ILIKE, pattern)

    def order_by(self, column: str, direction: str = "ASC") -> "QueryBuilder":
        """Sort by one column; a later call replaces the earlier one."""
        normalized = direction.upper()
        if normalized not in _DIRECTIONS:
            raise ValueError(f"Invalid sort direction: {direction!r}")
        return replace(self, ordering=Ordering(column, normalized))

    def limit(self, value: int) -> "QueryBuilder":
        return replace(self, limit_value=_non_negative("limit", value))

    def offset(self, value: int) -> "QueryBuilder":
        return replace(self, offset_value=_non_negative("offset", value))

    def single(self) -> "QueryBuilder":
        """Same as `limit(1)`; the caller still checks whether a row came back."""
        return self.limit(1)

    # ── COMPILE ───────────────────────────────────────────

    def _where_clause(self, placeholders: _Placeholders) -> str:
        if not self.predicates:
            return ""
        conditions = []
        for predicate in self.predicates:
            if predicate.operator is Operator.IN:
                if not predicate.value:
                    # An empty set matches nothing.
                    conditions.append("FALSE")
                    continue
                marks = ", ".join(placeholders.bind(v) for v in predicate.value)
                conditions.append(f"{predicate.column} IN ({marks})")
            else:
                mark = placeholders.bind(predicate.value)
                conditions.append(f"{predicate.column} {predicate.operator.value} {mark}")
        return " WHERE " + " AND ".join(conditions)

    def build(self, paramstyle: str = "numeric") -> CompiledQuery:
        """Compile the SELECT statement."""
        placeholders = _Placeholders(paramstyle)
        sql = f"SELECT {', '.join(self.columns)} FROM {self.table}"
        sql += self._where_clause(placeholders)
        if self.ordering is not None:
            sql += f" ORDER BY {self.ordering.column} {self.ordering.direction}"
        if self.limit_value is not None:
            sql += f" LIMIT {placeholders.bind(self.limit_value)}"
        if self.offset_value is not None:
            sql += f" OFFSET {placeholders.bind(self.offset_value)}"
        return CompiledQuery(sql, tuple(placeholders.params))

    def build_count(self, paramstyle: str = "numeric") -> CompiledQuery:
        """Compile `SELECT COUNT(*)` over the same filters; projection and paging are ignored."""
        placeholders = _Placeholders(paramstyle)
        sql = f"SELECT COUNT(*) AS count FROM {self.table}"
        sql += self._where_clause(placeholders)
        return CompiledQuery(sql, tuple(placeholders.params))

    def build_insert(self, records: Union[dict, Sequence[dict]], paramstyle: str = "numeric") -> CompiledQuery:
        """
        Compile an INSERT for one record or several records with the same keys.

        Column order follows the key order of the first record.

        Raises:
            ValueError: If there are no records, a record is empty,
                or records disagree on their keys.
        """
        rows = [records] if isinstance(records, dict) else list(records)
        if not rows or not rows[0]:
            raise ValueError(f"Nothing to insert into {self.table}")
        columns = list(rows[0].keys())
        placeholders = _Placeholders(paramstyle)
        groups = []
        for row in rows:
            if set(row.keys()) != set(columns):
                raise ValueError(f"All records inserted into {self.table} must share the same columns")
            groups.append("(" + ", ".join(placeholders.bind(row[c]) for c in columns) + ")")
        sql = (
            f"INSERT INTO {self.table} ({', '.join(columns)}) "
            f"VALUES {', '.join(groups)} RETURNING *"
        )
        return CompiledQuery(sql, tuple(placeholders.params))

    def build_update(self, values: dict, paramstyle: str = "numeric") -> CompiledQuery:
        """
        Compile an UPDATE.

        SET placeholders come first ($1..$k); the WHERE placeholders
        continue from $k+1, and the parameters are ordered the same way.
        """
        if not values:
            raise ValueError(f"Nothing to update in {self.table}")
        placeholders = _Placeholders(paramstyle)
        assignments = ", ".join(f"{column} = {placeholders.bind(value)}" for column, value in values.items())
        sql = f"UPDATE {self.table} SET {assignments}"
        sql += self._where_clause(placeholders)
        sql += " RETURNING *"
        return CompiledQuery(sql, tuple(placeholders.params))

    def build_delete(self, paramstyle: str = "numeric") -> CompiledQuery:
        placeholders = _Placeholders(paramstyle)
        sql = f"DELETE FROM {self.table}"
        sql += self._where_clause(placeholders)
        sql += " RETURNING *"
        return CompiledQuery(sql, tuple(placeholders.params))

    # ── EXECUTE ───────────────────────────────────────────

    def _run(self, compile_statement) -> QueryResult:
        if self.executor is None:
            raise RuntimeError(f"Query on {self.table} is not bound to a database.")
        try:
            compiled = compile_statement()
        except ValueError as e:
            logger.error(f"Invalid query on {self.table}: {e}")
            return QueryResult.failure(e)
        return self.executor.run(compiled)

    def execute(self) -> QueryResult:
        """Run the SELECT and return its rows."""
        return self._run(lambda: self.build(DRIVER_PARAMSTYLE))

    def count(self) -> CountResult:
        """Count the rows matching the accumulated filters."""
        result = self._run(lambda: self.build_count(DRIVER_PARAMSTYLE))
        if result.error is not None:
            return CountResult(count=0, error=result.error)
        rows = result.data or []
        return CountResult(count=int(rows[0]["count"]) if rows else 0, error=None)

    def insert(self, records: Union[dict, Sequence[dict]]) -> QueryResult:
        """Insert one or more records and return the inserted rows."""
        return self._run(lambda: self.build_insert(records, DRIVER_PARAMSTYLE))

    def update(self, values: dict) -> QueryResult:
        """Update the rows matching the filters and return them."""
        return self._run(lambda: self.build_update(values, DRIVER_PARAMSTYLE))

    def delete(self) -> QueryResult:
        """Delete the rows matching the filters and return them."""
        return self._run(lambda: self.build_delete(DRIVER_PARAMSTYLE))


def _non_negative(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return value
