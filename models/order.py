"""
models/order.py
---------------
Domain models for orders and their line items.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class OrderStatus(str, Enum):
    RECEIVED = "received"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderType(str, Enum):
    TABLE = "table"
    DELIVERY = "delivery"
    PICKUP = "pickup"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


@dataclass
class OrderItem:
    """
    One line of an order.

    Attributes:
        order_id: Owning order.
        menu_item_id: The menu item ordered (None if it was deleted later).
        quantity: Number of units.
        name: Item name at the time of ordering.
        price: Unit price at the time of ordering.
        selected_size_id / selected_crust_id: Chosen options, if any.
        is_half_and_half: Whether two flavors share the item.
        first_half_flavor / second_half_flavor: Flavor details (JSON).
    """
    order_id: str
    menu_item_id: Optional[str]
    quantity: int
    name: str
    price: float
    selected_size_id: Optional[str] = None
    selected_crust_id: Optional[str] = None
    is_half_and_half: bool = False
    first_half_flavor: Optional[Any] = None
    second_half_flavor: Optional[Any] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


@dataclass
class Order:
    """
    A customer order.

    Attributes:
        customer_name: Name shown on the ticket.
        status: One of OrderStatus values.
        total_amount: Order total.
        order_type: One of OrderType values.
        customer_id: Linked profile, if any.
        table_id: Linked dining table, if any.
        payment_status / payment_method / amount_paid: Payment details.
        paid_at: When the payment was registered; drives the cash reconciliation.
        items: Line items (loaded separately).
    """
    customer_name: Optional[str]
    status: str
    total_amount: float
    order_type: str
    customer_id: Optional[str] = None
    table_id: Optional[str] = None
    order_time: Optional[datetime] = None
    payment_status: str = PaymentStatus.PENDING.value
    payment_method: Optional[str] = None
    amount_paid: Optional[float] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None
    auto_progress: bool = True
    current_progress_percent: int = 0
    updated_at: Optional[datetime] = None
    id: Optional[str] = None
    items: list[OrderItem] = field(default_factory=list)

    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value


@dataclass
class NewOrderItem:
    """Line item requested by the caller, before it is persisted."""
    menu_item_id: str
    quantity: int
    name: str
    price: float
    selected_size_id: Optional[str] = None
    selected_crust_id: Optional[str] = None
    is_half_and_half: bool = False
    first_half_flavor: Optional[Any] = None
    second_half_flavor: Optional[Any] = None


@dataclass
class ManualOrder:
    """Order typed in at the counter (delivery, pickup or table)."""
    customer_name: str
    order_type: str
    total_amount: float
    items: list[NewOrderItem] = field(default_factory=list)
    customer_id: Optional[str] = None
    table_id: Optional[str] = None
    notes: Optional[str] = None
