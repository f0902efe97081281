"""
repositories/order_repo.py
---------------------------
Data access layer for orders and order items.
All queries related to the `orders` and `order_items` tables live here.
"""

from datetime import datetime

from db.results import CountResult, QueryResult
from models.order import NewOrderItem, Order, OrderItem, PaymentStatus
from utils.helpers import from_row, jsonb, new_id, utc_now


class OrderRepository:
    """Repository for orders and their line items."""

    def __init__(self, executor):
        self.executor = executor

    def _orders(self):
        return self.executor.from_("orders")

    def _items(self):
        return self.executor.from_("order_items")

    # ── CREATE ────────────────────────────────────────────

    def add(self, order: Order) -> QueryResult:
        """
        Insert an order row (items are inserted separately).

        Returns:
            QueryResult whose data is the stored Order (without items).
        """
        record = {
            "id": order.id or new_id(),
            "customer_name": order.customer_name,
            "customer_id": order.customer_id,
            "order_time": order.order_time or utc_now(),
            "status": order.status,
            "total_amount": order.total_amount,
            "payment_status": order.payment_status,
            "order_type": order.order_type,
            "table_id": order.table_id,
            "payment_method": order.payment_method,
            "amount_paid": order.amount_paid,
            "paid_at": order.paid_at,
            "notes": order.notes,
            "auto_progress": order.auto_progress,
            "current_progress_percent": order.current_progress_percent,
        }
        return self._orders().insert(record).first().map(self._row_to_order)

    def add_items(self, order_id: str, items: list[NewOrderItem]) -> QueryResult:
        """Insert all line items of an order in one statement."""
        if not items:
            return QueryResult.success([])
        now = utc_now()
        records = [
            {
                "id": new_id(),
                "order_id": order_id,
                "menu_item_id": item.menu_item_id,
                "quantity": item.quantity,
                "name": item.name,
                "price": item.price,
                "selected_size_id": item.selected_size_id,
                "selected_crust_id": item.selected_crust_id,
                "is_half_and_half": item.is_half_and_half,
                "first_half_flavor": jsonb(item.first_half_flavor),
                "second_half_flavor": jsonb(item.second_half_flavor),
                "created_at": now,
            }
            for item in items
        ]
        return self._items().insert(records).map(self._row_to_item)

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> QueryResult:
        """All orders, newest first, without items."""
        return self._orders().select().order_by("order_time", "DESC").execute().map(self._row_to_order)

    def get_by_id(self, order_id: str) -> QueryResult:
        return self._orders().eq("id", order_id).single().execute().first().map(self._row_to_order)

    def list_items(self, order_ids: list[str]) -> QueryResult:
        """Line items belonging to any of the given orders."""
        return self._items().in_("order_id", order_ids).order_by("created_at").execute().map(self._row_to_item)

    def count_by_table(self, table_id: str) -> CountResult:
        return self._orders().eq("table_id", table_id).count()

    def count_by_customer(self, profile_id: str) -> CountResult:
        return self._orders().eq("customer_id", profile_id).count()

    def count_items_by_menu_item(self, menu_item_id: str) -> CountResult:
        return self._items().eq("menu_item_id", menu_item_id).count()

    def cash_received_since(self, since: datetime) -> QueryResult:
        """
        Amounts of orders paid in cash since `since`, whenever they were placed.

        Returns:
            QueryResult whose data is a list of floats.
        """
        return (
            self._orders()
            .select("amount_paid")
            .eq("payment_status", PaymentStatus.PAID.value)
            .eq("payment_method", "cash")
            .gte("paid_at", since)
            .execute()
            .map(lambda row: float(row["amount_paid"] or 0))
        )

    # ── UPDATE ────────────────────────────────────────────

    def update(self, order_id: str, changes: dict) -> QueryResult:
        """Update the given columns; `updated_at` is always refreshed."""
        values = {**changes, "updated_at": utc_now()}
        return self._orders().eq("id", order_id).update(values).first().map(self._row_to_order)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_order(row: dict) -> Order:
        return from_row(Order, row, floats=("total_amount", "amount_paid"))

    @staticmethod
    def _row_to_item(row: dict) -> OrderItem:
        return from_row(OrderItem, row, floats=("price",))
