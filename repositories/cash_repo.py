"""
repositories/cash_repo.py
--------------------------
Data access layer for cash-register sessions and cash adjustments.
"""

from db.results import QueryResult
from models.cash import CashAdjustment, CashRegisterSession, CashSessionStatus
from utils.helpers import from_row, new_id, utc_now


class CashRepository:
    """Repository for the cash_register_sessions and cash_adjustments tables."""

    def __init__(self, executor):
        self.executor = executor

    def _sessions(self):
        return self.executor.from_("cash_register_sessions")

    def _adjustments(self):
        return self.executor.from_("cash_adjustments")

    # ── SESSIONS ──────────────────────────────────────────

    def open_session(self, opening_balance: float, notes: str = None) -> QueryResult:
        record = {
            "id": new_id(),
            "opening_balance": opening_balance,
            "closing_balance": None,
            "closing_balance_informed": None,
            "opened_at": utc_now(),
            "closed_at": None,
            "status": CashSessionStatus.OPEN.value,
            "notes": notes,
            "difference": None,
        }
        return self._sessions().insert(record).first().map(self._row_to_session)

    def list_sessions(self) -> QueryResult:
        return self._sessions().select().order_by("opened_at", "DESC").execute().map(self._row_to_session)

    def get_session(self, session_id: str) -> QueryResult:
        return self._sessions().eq("id", session_id).single().execute().first().map(self._row_to_session)

    def get_open_session(self) -> QueryResult:
        """The currently open session; data is None when the register is closed."""
        return (
            self._sessions()
            .eq("status", CashSessionStatus.OPEN.value)
            .order_by("opened_at", "DESC")
            .single()
            .execute()
            .first()
            .map(self._row_to_session)
        )

    def update_session(self, session_id: str, changes: dict) -> QueryResult:
        return self._sessions().eq("id", session_id).update(changes).first().map(self._row_to_session)

    # ── ADJUSTMENTS ───────────────────────────────────────

    def add_adjustment(self, session_id: str, adjustment_type: str, amount: float, reason: str) -> QueryResult:
        record = {
            "id": new_id(),
            "session_id": session_id,
            "type": adjustment_type,
            "amount": amount,
            "reason": reason,
            "adjusted_at": utc_now(),
        }
        return self._adjustments().insert(record).first().map(self._row_to_adjustment)

    def list_adjustments(self, session_id: str = None) -> QueryResult:
        """Adjustments, newest first; optionally only those of one session."""
        query = self._adjustments().select()
        if session_id is not None:
            query = query.eq("session_id", session_id)
        return query.order_by("adjusted_at", "DESC").execute().map(self._row_to_adjustment)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_session(row: dict) -> CashRegisterSession:
        return from_row(
            CashRegisterSession,
            row,
            floats=("opening_balance", "closing_balance", "closing_balance_informed", "difference"),
        )

    @staticmethod
    def _row_to_adjustment(row: dict) -> CashAdjustment:
        return from_row(CashAdjustment, row, floats=("amount",))
