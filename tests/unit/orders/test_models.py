"""Unit tests for Order and OrderItem models.

Covers:
- Defaults: pending status, zero total, UUIDv7 ids.
- Customer FK with PROTECT.
- Items cascade with their order.
- Product FK with SET_NULL: the line survives its product.
- Quantity check constraint.
- ``line_total`` and ``__str__``.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit


@pytest.fixture()
def order(customer):
    return Order.objects.create(customer=customer)


class TestOrder:
    def test_defaults(self, order):
        assert order.status == OrderStatus.PENDING
        assert order.total_amount == Decimal("0.00")
        assert order.id.version == 7

    def test_status_values_are_lowercase(self):
        assert OrderStatus.values == [
            "pending",
            "processing",
            "shipped",
            "delivered",
            "cancelled",
        ]

    def test_customer_is_protected(self, order, customer):
        with pytest.raises(ProtectedError):
            customer.hard_delete()

    def test_delete_cascades_to_items(self, order, product):
        OrderItem.objects.create(
            order=order, product=product, quantity=1, price_at_order=product.price
        )

        order.delete()

        assert OrderItem.objects.count() == 0

    def test_str(self, order):
        assert str(order) == f"Order {order.id} (pending)"


class TestOrderItem:
    def test_line_total(self, order, product):
        item = OrderItem.objects.create(
            order=order, product=product, quantity=3, price_at_order=Decimal("5.00")
        )
        assert item.line_total == Decimal("15.00")

    def test_survives_product_removal(self, order, product):
        item = OrderItem.objects.create(
            order=order, product=product, quantity=2, price_at_order=Decimal("5.00")
        )

        product.hard_delete()

        item.refresh_from_db()
        assert item.product_id is None
        assert item.quantity == 2
        assert item.price_at_order == Decimal("5.00")

    def test_zero_quantity_violates_constraint(self, order, product):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                OrderItem.objects.create(
                    order=order, product=product, quantity=0, price_at_order=Decimal("1")
                )

    def test_reverse_relation(self, order, product):
        OrderItem.objects.create(
            order=order, product=product, quantity=1, price_at_order=Decimal("5.00")
        )
        assert order.items.count() == 1
        assert product.order_items.count() == 1

    def test_str(self, order, product):
        item = OrderItem.objects.create(
            order=order, product=product, quantity=2, price_at_order=Decimal("5.00")
        )
        assert str(item) == f"{product.id} x2 @ 5.00"
