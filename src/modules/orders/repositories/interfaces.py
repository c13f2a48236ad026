"""Order repository interface.

Extends ``ILockingRepository[Order]`` with the methods the order
transaction engine needs for the Order aggregate and its OrderItem
children: locked reads, item CRUD and the authoritative total.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import ILockingRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem


class IOrderRepository(ILockingRepository["Order"]):
    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items.

        ``data`` holds ``customer_id``, ``total_amount``, optionally
        ``status``, and ``items``: dicts with ``product_id``, ``quantity``
        and ``price_at_order``, persisted in list order.
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its customer and items (with product)."""

    @abstractmethod
    def get_item(self, id: str) -> Optional[OrderItem]:
        """Retrieve an order item with its order and product."""

    @abstractmethod
    def get_item_for_update(self, id: str) -> Optional[OrderItem]:
        """Retrieve an order item with a row-level lock."""

    @abstractmethod
    def add_item(
        self, order: Order, product_id: Any, quantity: int, price_at_order: Decimal
    ) -> OrderItem:
        """Create one item on *order*."""

    @abstractmethod
    def save_item(self, item: OrderItem) -> OrderItem:
        """Persist an item's quantity."""

    @abstractmethod
    def delete_item(self, item: OrderItem) -> None:
        """Remove an item."""

    @abstractmethod
    def list_items(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderItem]:
        """List order items, optionally filtered (e.g. ``order_id``)."""

    @abstractmethod
    def adjust_total(self, order: Order, delta: Decimal) -> Order:
        """Atomically add *delta* to the stored total."""

    @abstractmethod
    def recalculate_total(self, order: Order) -> Order:
        """Set the stored total to the sum over the order's current items."""
