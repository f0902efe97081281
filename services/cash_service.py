"""
services/cash_service.py
------------------------
Business logic for the cash register: opening and closing sessions,
manual cash adjustments and the closing reconciliation.
"""

from typing import Optional

from db.results import QueryResult
from models.cash import AdjustmentType, CashRegisterSession, CashSessionStatus
from repositories.cash_repo import CashRepository
from repositories.order_repo import OrderRepository
from services.errors import ConflictError, NotFoundError
from utils.helpers import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)

# Serializes opening, closing and adjusting sessions; plain readers are not blocked.
LOCK_SESSIONS_SQL = "LOCK TABLE cash_register_sessions IN SHARE ROW EXCLUSIVE MODE"


def expected_balance(session: CashRegisterSession, adjustments: list, cash_payments: list[float]) -> float:
    """Opening balance plus adjustments plus cash taken for paid orders."""
    total = session.opening_balance
    total += sum(a.signed_amount for a in adjustments)
    total += sum(cash_payments)
    return round(total, 2)


def _append_note(existing: Optional[str], note: Optional[str]) -> Optional[str]:
    if not note:
        return existing
    if not existing:
        return note
    return f"{existing}\n{note}"


class CashService:
    """Runs the cash drawer lifecycle."""

    def __init__(self, db):
        self.db = db
        self.cash = CashRepository(db)

    # ── SESSIONS ──────────────────────────────────────────

    def list_sessions(self) -> QueryResult:
        result = self.cash.list_sessions()
        if result.error:
            logger.error(f"Failed to fetch cash sessions: {result.error}")
        return result

    def get_active_session(self) -> QueryResult:
        """The open session, or success(None) when the register is closed."""
        result = self.cash.get_open_session()
        if result.error:
            logger.error(f"Failed to fetch the active cash session: {result.error}")
        return result

    def open_register(self, opening_balance: float, notes: str = None) -> QueryResult:
        """
        Open a new cash session.

        Returns:
            QueryResult with the new session; ConflictError if one is already open.
        """
        if opening_balance < 0:
            return QueryResult.failure(ValueError("Opening balance cannot be negative"))

        def unit(tx):
            locked = tx.query(LOCK_SESSIONS_SQL)
            if locked.error:
                return locked
            cash = CashRepository(tx)
            current = cash.get_open_session()
            if current.error:
                return current
            if current.data is not None:
                return QueryResult.failure(
                    ConflictError(f"Cash register is already open (session {current.data.id})")
                )
            return cash.open_session(opening_balance, notes)

        result = self.db.transaction(unit)
        if result.error:
            logger.error(f"Failed to open the cash register: {result.error}")
        else:
            logger.info(f"Cash register opened with {opening_balance:.2f} (session {result.data.id})")
        return result

    def close_register(self, session_id: str, informed_balance: float, notes: str = None) -> QueryResult:
        """
        Close a session and reconcile the drawer.

        closing_balance is the expected amount, closing_balance_informed the
        counted amount and difference = informed - expected.
        """

        def unit(tx):
            locked = tx.query(LOCK_SESSIONS_SQL)
            if locked.error:
                return locked
            cash = CashRepository(tx)
            found = cash.get_session(session_id)
            if found.error:
                return found
            session = found.data
            if session is None:
                return QueryResult.failure(NotFoundError(f"Cash session {session_id} not found"))
            if not session.is_open():
                return QueryResult.failure(ConflictError(f"Cash session {session_id} is already closed"))

            adjustments = cash.list_adjustments(session_id)
            if adjustments.error:
                return adjustments
            payments = OrderRepository(tx).cash_received_since(session.opened_at)
            if payments.error:
                return payments

            expected = expected_balance(session, adjustments.data, payments.data)
            changes = {
                "status": CashSessionStatus.CLOSED.value,
                "closed_at": utc_now(),
                "closing_balance": expected,
                "closing_balance_informed": informed_balance,
                "difference": round(informed_balance - expected, 2),
                "notes": _append_note(session.notes, notes),
            }
            return cash.update_session(session_id, changes)

        result = self.db.transaction(unit)
        if result.error:
            logger.error(f"Failed to close cash session {session_id}: {result.error}")
        else:
            closed = result.data
            logger.info(
                f"Cash session {session_id} closed: expected {closed.closing_balance:.2f}, "
                f"counted {closed.closing_balance_informed:.2f}, difference {closed.difference:.2f}"
            )
        return result

    # ── ADJUSTMENTS ───────────────────────────────────────

    def list_adjustments(self, session_id: str = None) -> QueryResult:
        result = self.cash.list_adjustments(session_id)
        if result.error:
            logger.error(f"Failed to fetch cash adjustments: {result.error}")
        return result

    def add_adjustment(self, session_id: str, adjustment_type: str, amount: float, reason: str = None) -> QueryResult:
        """Record cash added to or removed from an open session's drawer."""
        try:
            adjustment_type = AdjustmentType(adjustment_type).value
        except ValueError:
            return QueryResult.failure(ValueError(f"Adjustment type must be 'add' or 'remove', got {adjustment_type!r}"))
        if amount <= 0:
            return QueryResult.failure(ValueError("Adjustment amount must be positive"))

        def unit(tx):
            locked = tx.query(LOCK_SESSIONS_SQL)
            if locked.error:
                return locked
            cash = CashRepository(tx)
            found = cash.get_session(session_id)
            if found.error:
                return found
            if found.data is None:
                return QueryResult.failure(NotFoundError(f"Cash session {session_id} not found"))
            if not found.data.is_open():
                return QueryResult.failure(ConflictError(f"Cash session {session_id} is closed"))
            return cash.add_adjustment(session_id, adjustment_type, amount, reason)

        result = self.db.transaction(unit)
        if result.error:
            logger.error(f"Failed to add cash adjustment to session {session_id}: {result.error}")
        else:
            logger.info(f"Cash adjustment on session {session_id}: {adjustment_type} {amount:.2f}")
        return result
