"""
db/results.py
-------------
Result envelopes returned by every data-access operation.
Callers check `error` instead of catching exceptions.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class QueryResult:
    """
    Outcome of a read or write.

    Attributes:
        data: Rows (list of dicts), a single value, or None.
        error: The exception that caused the failure, or None.
    """
    data: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Any = None) -> "QueryResult":
        return cls(data=data, error=None)

    @classmethod
    def failure(cls, error: BaseException) -> "QueryResult":
        return cls(data=None, error=error)

    def first(self) -> "QueryResult":
        """Narrow a row list to its first row (None when empty)."""
        if self.error is not None:
            return self
        if isinstance(self.data, list):
            return QueryResult.success(self.data[0] if self.data else None)
        return self

    def map(self, func: Callable[[Any], Any]) -> "QueryResult":
        """Apply `func` to every row (or to the single value); errors pass through."""
        if self.error is not None or self.data is None:
            return self
        if isinstance(self.data, list):
            return QueryResult.success([func(row) for row in self.data])
        return QueryResult.success(func(self.data))


@dataclass(frozen=True)
class CountResult:
    count: int = 0
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class MutationResult:
    """`{success, error}` envelope for operations without a payload."""
    success: bool = False
    error: Optional[BaseException] = None

    @classmethod
    def done(cls) -> "MutationResult":
        return cls(success=True, error=None)

    @classmethod
    def failed(cls, error: BaseException) -> "MutationResult":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class TransactionResult(QueryResult):
    """
    Outcome of a transaction.

    `error` always holds the failure that triggered the rollback;
    `rollback_error` is set only when the ROLLBACK itself failed.
    """
    rollback_error: Optional[BaseException] = None
