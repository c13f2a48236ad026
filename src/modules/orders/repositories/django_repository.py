"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  The methods
do not open transactions of their own; ``OrderService`` wraps every
operation in one ``transaction.atomic()`` block so that stock movements,
item writes and the total commit or roll back together.

Locked reads (``get_for_update`` / ``get_item_for_update``) lock the bare
row, without joins, so the lock never spreads to the customer or product.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.orders.constants import CENT, OrderStatus
from modules.orders.ledger import order_total
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        order = Order.objects.create(
            customer_id=data["customer_id"],
            status=data.get("status", OrderStatus.PENDING),
            total_amount=data["total_amount"],
        )
        for item_data in data.get("items", []):
            self.add_item(
                order,
                product_id=item_data["product_id"],
                quantity=item_data["quantity"],
                price_at_order=item_data["price_at_order"],
            )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the customer FK (single JOIN) and
        ``prefetch_related`` for items and item -> product (one batched
        query each).  Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("customer")
                .prefetch_related("items__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = Order.objects.select_related("customer").prefetch_related(
            "items__product"
        )
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    def save(self, entity: Order) -> Order:
        entity.save()
        logger.info("order.saved", order_id=str(entity.id))
        return entity

    def delete(self, id: str) -> bool:
        """Hard-delete an order; its items go with it (``CASCADE``)."""
        try:
            deleted, _ = Order.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        return deleted > 0

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def get_item(self, id: str) -> Optional[OrderItem]:
        try:
            return (
                OrderItem.objects.select_related("order", "product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_item_for_update(self, id: str) -> Optional[OrderItem]:
        try:
            return OrderItem.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def add_item(
        self, order: Order, product_id: Any, quantity: int, price_at_order: Decimal
    ) -> OrderItem:
        return OrderItem.objects.create(
            order=order,
            product_id=product_id,
            quantity=quantity,
            price_at_order=price_at_order,
        )

    def save_item(self, item: OrderItem) -> OrderItem:
        item.save(update_fields=["quantity"])
        return item

    def delete_item(self, item: OrderItem) -> None:
        item.delete()

    def list_items(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderItem]:
        queryset = OrderItem.objects.select_related("order", "product")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def adjust_total(self, order: Order, delta: Decimal) -> Order:
        """Add *delta* to the total of an order locked by the caller."""
        order.total_amount = (order.total_amount + delta).quantize(CENT)
        order.save(update_fields=["total_amount"])
        return order

    def recalculate_total(self, order: Order) -> Order:
        order.total_amount = order_total(OrderItem.objects.filter(order_id=order.id))
        order.save(update_fields=["total_amount"])
        return order
