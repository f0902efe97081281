"""
db/errors.py
------------
Infrastructure exceptions and the classifier that maps raw driver
errors to user-facing categories.
"""

from enum import Enum
from typing import Optional

import psycopg2
from psycopg2 import errorcodes, errors


class DatabaseNotOpenError(RuntimeError):
    """Raised when the pool is used before `open()` or after `close()`."""


class PoolTimeoutError(Exception):
    """Raised when no pooled connection became free within the checkout timeout."""


class TransactionClosedError(RuntimeError):
    """Raised when a statement is issued on a finished transaction."""


class ErrorKind(str, Enum):
    DUPLICATE_KEY = "duplicate_key"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    NOT_NULL_VIOLATION = "not_null_violation"
    UNDEFINED_TABLE = "undefined_table"
    UNDEFINED_COLUMN = "undefined_column"
    CONNECTION = "connection"
    PERMISSION = "permission"
    UNKNOWN = "unknown"


_KIND_BY_CLASS = (
    (errors.UniqueViolation, ErrorKind.DUPLICATE_KEY),
    (errors.ForeignKeyViolation, ErrorKind.FOREIGN_KEY_VIOLATION),
    (errors.NotNullViolation, ErrorKind.NOT_NULL_VIOLATION),
    (errors.UndefinedTable, ErrorKind.UNDEFINED_TABLE),
    (errors.UndefinedColumn, ErrorKind.UNDEFINED_COLUMN),
    (errors.InsufficientPrivilege, ErrorKind.PERMISSION),
)

_KIND_BY_CODE = {
    errorcodes.UNIQUE_VIOLATION: ErrorKind.DUPLICATE_KEY,
    errorcodes.FOREIGN_KEY_VIOLATION: ErrorKind.FOREIGN_KEY_VIOLATION,
    errorcodes.NOT_NULL_VIOLATION: ErrorKind.NOT_NULL_VIOLATION,
    errorcodes.UNDEFINED_TABLE: ErrorKind.UNDEFINED_TABLE,
    errorcodes.UNDEFINED_COLUMN: ErrorKind.UNDEFINED_COLUMN,
    errorcodes.INSUFFICIENT_PRIVILEGE: ErrorKind.PERMISSION,
}

_MESSAGES = {
    ErrorKind.DUPLICATE_KEY: "Duplicate record",
    ErrorKind.FOREIGN_KEY_VIOLATION: "Foreign key violation",
    ErrorKind.NOT_NULL_VIOLATION: "Value cannot be null",
    ErrorKind.UNDEFINED_TABLE: "Table does not exist",
    ErrorKind.UNDEFINED_COLUMN: "Column does not exist",
    ErrorKind.CONNECTION: "Could not reach the database",
    ErrorKind.PERMISSION: "Operation not permitted by the database policy",
}


def classify_error(error: Optional[BaseException]) -> ErrorKind:
    """
    Map a raw driver error to an ErrorKind.

    Matches psycopg2 exception classes first, then the SQLSTATE in
    `pgcode` so errors built outside the driver classify the same way.
    """
    if error is None:
        return ErrorKind.UNKNOWN

    for error_class, kind in _KIND_BY_CLASS:
        if isinstance(error, error_class):
            return kind

    code = getattr(error, "pgcode", None)
    if code in _KIND_BY_CODE:
        return _KIND_BY_CODE[code]

    if "row-level security" in str(error).lower():
        return ErrorKind.PERMISSION

    if isinstance(error, (psycopg2.OperationalError, psycopg2.InterfaceError, PoolTimeoutError)):
        return ErrorKind.CONNECTION

    return ErrorKind.UNKNOWN


def describe_error(error: Optional[BaseException]) -> str:
    """User-facing message for an error; unknown errors keep the driver message."""
    if error is None:
        return "Unknown error"
    kind = classify_error(error)
    if kind in _MESSAGES:
        return _MESSAGES[kind]
    return str(error) or "Unknown error"
