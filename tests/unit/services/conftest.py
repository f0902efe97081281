"""Helpers for service tests: a database mock that runs units of work inline."""

from unittest.mock import MagicMock

import pytest

from db.results import QueryResult, TransactionResult


def run_inline(unit):
    """Run `unit` on a mock handle and wrap the outcome the way a transaction would."""
    tx = MagicMock(name="tx")
    tx.query.return_value = QueryResult.success([])
    try:
        outcome = unit(tx)
    except Exception as e:
        return TransactionResult(error=e)
    if isinstance(outcome, QueryResult):
        if outcome.error:
            return TransactionResult(error=outcome.error)
        return TransactionResult(data=outcome.data)
    return TransactionResult(data=outcome)


@pytest.fixture
def db():
    mock = MagicMock(name="db")
    mock.transaction.side_effect = run_inline
    return mock
