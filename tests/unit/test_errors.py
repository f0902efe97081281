"""Unit tests for the driver error classifier."""

import psycopg2
import pytest
from psycopg2 import errors

from db.errors import ErrorKind, PoolTimeoutError, classify_error, describe_error


class CodedError(Exception):
    """An error carrying only a SQLSTATE, as raised by other layers."""

    def __init__(self, pgcode, message=""):
        super().__init__(message)
        self.pgcode = pgcode


class TestClassifyError:
    """Mapping raw errors to ErrorKind."""

    @pytest.mark.parametrize("error, kind", [
        (errors.UniqueViolation("dup"), ErrorKind.DUPLICATE_KEY),
        (errors.ForeignKeyViolation("fk"), ErrorKind.FOREIGN_KEY_VIOLATION),
        (errors.NotNullViolation("null"), ErrorKind.NOT_NULL_VIOLATION),
        (errors.UndefinedTable("missing"), ErrorKind.UNDEFINED_TABLE),
        (errors.UndefinedColumn("missing"), ErrorKind.UNDEFINED_COLUMN),
        (errors.InsufficientPrivilege("denied"), ErrorKind.PERMISSION),
    ])
    def test_driver_classes(self, error, kind):
        assert classify_error(error) is kind

    @pytest.mark.parametrize("code, kind", [
        ("23505", ErrorKind.DUPLICATE_KEY),
        ("23503", ErrorKind.FOREIGN_KEY_VIOLATION),
        ("23502", ErrorKind.NOT_NULL_VIOLATION),
        ("42P01", ErrorKind.UNDEFINED_TABLE),
        ("42703", ErrorKind.UNDEFINED_COLUMN),
        ("42501", ErrorKind.PERMISSION),
    ])
    def test_sqlstate_codes(self, code, kind):
        assert classify_error(CodedError(code)) is kind

    def test_row_level_security_message(self):
        error = CodedError(None, 'new row violates row-level security policy for table "orders"')

        assert classify_error(error) is ErrorKind.PERMISSION

    @pytest.mark.parametrize("error", [
        psycopg2.OperationalError("could not connect to server"),
        psycopg2.InterfaceError("connection already closed"),
        PoolTimeoutError("no connection available"),
    ])
    def test_connection_errors(self, error):
        assert classify_error(error) is ErrorKind.CONNECTION

    def test_unknown(self):
        assert classify_error(ValueError("something else")) is ErrorKind.UNKNOWN
        assert classify_error(None) is ErrorKind.UNKNOWN


class TestDescribeError:
    """User-facing messages."""

    def test_known_kind(self):
        assert describe_error(errors.UniqueViolation("dup")) == "Duplicate record"
        assert describe_error(CodedError("42P01")) == "Table does not exist"

    def test_unknown_keeps_message(self):
        assert describe_error(ValueError("price must be positive")) == "price must be positive"

    def test_missing_error(self):
        assert describe_error(None) == "Unknown error"
