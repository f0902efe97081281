"""
services/order_service.py
-------------------------
Business logic for orders: listing with line items, manual and table
orders, status changes and payments.

Every write runs inside one transaction so an order is never stored
without its items, and a table is never marked occupied for an order
that was rolled back.
"""

from typing import Optional

from db.results import QueryResult
from models.order import ManualOrder, NewOrderItem, Order, OrderStatus, OrderType, PaymentStatus
from models.table import TableStatus
from repositories.order_repo import OrderRepository
from repositories.table_repo import TableRepository
from services.errors import NotFoundError
from utils.helpers import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)

TABLE_CUSTOMER_NAME = "Table"


def _attach_items(orders: list[Order], items: list) -> list[Order]:
    by_order = {}
    for item in items:
        by_order.setdefault(item.order_id, []).append(item)
    for order in orders:
        order.items = by_order.get(order.id, [])
    return orders


def _load_order(tx, order_id: str) -> QueryResult:
    """Read an order and its items on the given executor."""
    orders = OrderRepository(tx)
    found = orders.get_by_id(order_id)
    if found.error:
        return found
    if found.data is None:
        return QueryResult.failure(NotFoundError(f"Order {order_id} not found"))
    items = orders.list_items([order_id])
    if items.error:
        return items
    return QueryResult.success(_attach_items([found.data], items.data)[0])


class OrderService:
    """Creates, lists and progresses orders."""

    def __init__(self, db):
        self.db = db
        self.orders = OrderRepository(db)

    # ── READ ──────────────────────────────────────────────

    def list_orders(self) -> QueryResult:
        """
        All orders, newest first, each with its line items.

        Items are fetched with a single IN query; if that fails the
        orders are still returned, without items.
        """
        result = self.orders.list_all()
        if result.error:
            logger.error(f"Failed to fetch orders: {result.error}")
            return result

        orders = result.data
        if not orders:
            return result

        items = self.orders.list_items([o.id for o in orders])
        if items.error:
            logger.warning(f"Failed to fetch order items, returning orders without items: {items.error}")
            return result
        return QueryResult.success(_attach_items(orders, items.data))

    def get_order(self, order_id: str) -> QueryResult:
        result = _load_order(self.db, order_id)
        if result.error:
            logger.error(f"Failed to fetch order {order_id}: {result.error}")
        return result

    # ── CREATE ────────────────────────────────────────────

    def create_manual_order(self, data: ManualOrder) -> QueryResult:
        """
        Store an order typed in at the counter.

        The order row, its items and the table status change are
        committed together; the full order (with items) is returned.
        """
        try:
            order_type = OrderType(data.order_type).value
        except ValueError as e:
            return QueryResult.failure(e)

        order = Order(
            customer_name=data.customer_name,
            customer_id=data.customer_id,
            status=OrderStatus.RECEIVED.value,
            total_amount=data.total_amount,
            payment_status=PaymentStatus.PENDING.value,
            order_type=order_type,
            table_id=data.table_id,
            notes=data.notes,
        )
        result = self.db.transaction(lambda tx: self._insert_order(tx, order, data.items))
        if result.error:
            logger.error(f"Failed to create order for '{data.customer_name}': {result.error}")
        else:
            logger.info(f"Created {order_type} order {result.data.id} ({len(data.items)} item(s))")
        return result

    def create_table_order(self, table_id: str, items: list[NewOrderItem], customer: Optional[str] = None,
                           customer_id: Optional[str] = None, notes: Optional[str] = None) -> QueryResult:
        """
        Open an order for a dining table; the total is computed from the items.

        Args:
            customer: Name on the ticket, "Table" when omitted.
            customer_id: Profile to link the order to, if the guest has one.
        """
        total = sum(item.price * item.quantity for item in items)
        order = Order(
            customer_name=customer or TABLE_CUSTOMER_NAME,
            customer_id=customer_id,
            status=OrderStatus.RECEIVED.value,
            total_amount=total,
            payment_status=PaymentStatus.PENDING.value,
            order_type=OrderType.TABLE.value,
            table_id=table_id,
            notes=notes,
        )
        result = self.db.transaction(lambda tx: self._insert_order(tx, order, items))
        if result.error:
            logger.error(f"Failed to create order for table {table_id}: {result.error}")
        else:
            logger.info(f"Created table order {result.data.id} for table {table_id} (total {total:.2f})")
        return result

    def _insert_order(self, tx, order: Order, items: list[NewOrderItem]) -> QueryResult:
        orders = OrderRepository(tx)
        created = orders.add(order)
        if created.error:
            return created

        stored = orders.add_items(created.data.id, items)
        if stored.error:
            return stored

        if order.table_id:
            occupied = TableRepository(tx).set_status(order.table_id, TableStatus.OCCUPIED)
            if occupied.error:
                return occupied

        return _load_order(tx, created.data.id)

    # ── UPDATE ────────────────────────────────────────────

    def update_order_status(self, order_id: str, status: str) -> QueryResult:
        """Move an order to `status`; completing it frees its table."""
        try:
            status = OrderStatus(status).value
        except ValueError as e:
            return QueryResult.failure(e)

        def unit(tx):
            updated = OrderRepository(tx).update(order_id, {"status": status})
            if updated.error:
                return updated
            if updated.data is None:
                return QueryResult.failure(NotFoundError(f"Order {order_id} not found"))
            if status == OrderStatus.COMPLETED.value and updated.data.table_id:
                freed = TableRepository(tx).set_status(updated.data.table_id, TableStatus.AVAILABLE)
                if freed.error:
                    return freed
            return _load_order(tx, order_id)

        result = self.db.transaction(unit)
        if result.error:
            logger.error(f"Failed to set order {order_id} to '{status}': {result.error}")
        else:
            logger.info(f"Order {order_id} is now '{status}'")
        return result

    def register_payment(self, order_id: str, method: str, amount: float) -> QueryResult:
        def unit(tx):
            changes = {
                "payment_status": PaymentStatus.PAID.value,
                "payment_method": method,
                "amount_paid": amount,
                "paid_at": utc_now(),
            }
            updated = OrderRepository(tx).update(order_id, changes)
            if updated.error:
                return updated
            if updated.data is None:
                return QueryResult.failure(NotFoundError(f"Order {order_id} not found"))
            return _load_order(tx, order_id)

        result = self.db.transaction(unit)
        if result.error:
            logger.error(f"Failed to register payment for order {order_id}: {result.error}")
        else:
            logger.info(f"Order {order_id} paid: {amount:.2f} ({method})")
        return result
