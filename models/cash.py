"""
models/cash.py
--------------
Domain models for cash-register sessions and manual cash adjustments.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class CashSessionStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class AdjustmentType(str, Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass
class CashRegisterSession:
    """
    One opening-to-closing period of the cash drawer.

    Attributes:
        opening_balance: Cash in the drawer when the session opened.
        closing_balance: Expected cash computed at closing.
        closing_balance_informed: Cash actually counted at closing.
        difference: informed - expected (negative means cash is missing).
    """
    opening_balance: float
    opened_at: datetime
    status: str = CashSessionStatus.OPEN.value
    closing_balance: Optional[float] = None
    closing_balance_informed: Optional[float] = None
    closed_at: Optional[datetime] = None
    notes: Optional[str] = None
    difference: Optional[float] = None
    id: Optional[str] = None

    def is_open(self) -> bool:
        return self.status == CashSessionStatus.OPEN.value


@dataclass
class CashAdjustment:
    """Cash put into (`add`) or taken out of (`remove`) the drawer."""
    session_id: str
    type: str
    amount: float
    reason: Optional[str]
    adjusted_at: datetime
    id: Optional[str] = None

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type == AdjustmentType.ADD.value else -self.amount
