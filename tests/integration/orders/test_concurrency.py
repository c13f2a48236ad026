"""Stock concurrency integration tests.

Prove that the row locks taken by ``OrderService`` serialize concurrent
stock reservations.

Scenario:
- Product "Gamer PC" with **stock = 5**.
- 10 threads attempt to buy 1 unit each simultaneously.
- Stock never goes negative and every unit is either on the shelf or held
  by a live order item.

Uses ``TransactionTestCase`` so each thread sees committed data.
``TestStockConcurrency`` needs row-level locking and runs against MySQL or
PostgreSQL only: there exactly 5 orders succeed.  SQLite locks whole
tables, so a contended write may be rolled back as ``TransactionAborted``;
``TestStockConcurrencyAnyBackend`` accepts that outcome and checks the
stock and total invariants on every backend.
"""

from __future__ import annotations

import logging
import unittest
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal

import django
from django.db import connection
from django.db.models import Sum
from django.test import TransactionTestCase

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    UpdateOrderItemDTO,
)
from modules.orders.exceptions import InsufficientStock, TransactionAborted
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

logger = logging.getLogger(__name__)

INITIAL_STOCK = 5
NUM_WORKERS = 10
OUTCOMES = {"success", "insufficient", "aborted"}


def _service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


def _held(product: Product) -> int:
    """Units of *product* held by live order items."""
    return (
        OrderItem.objects.filter(product_id=product.id).aggregate(
            total=Sum("quantity")
        )["total"]
        or 0
    )


class ConcurrentOrdersMixin:
    """Shared fixtures and thread workers for the concurrency cases."""

    def setUp(self):
        self.customer = Customer.objects.create(
            name="Concurrency Customer", email="concurrency@example.com"
        )
        self.product = Product.objects.create(
            name="Gamer PC",
            price=Decimal("2999.99"),
            stock=INITIAL_STOCK,
        )

    def _create_order_in_thread(self, thread_id: int) -> str:
        """Attempt to create an order.

        Returns 'success', 'insufficient' or 'aborted'.
        """
        try:
            dto = CreateOrderDTO(
                customer_id=self.customer.id,
                items=[CreateOrderItemDTO(product_id=self.product.id, quantity=1)],
            )
            try:
                _service().create_order(dto)
                logger.warning("Thread %d: order created", thread_id)
                return "success"
            except InsufficientStock:
                logger.warning("Thread %d: InsufficientStock (expected)", thread_id)
                return "insufficient"
            except TransactionAborted:
                logger.warning("Thread %d: TransactionAborted (rolled back)", thread_id)
                return "aborted"
        finally:
            django.db.connections.close_all()

    def _run_all(self) -> list[str]:
        results = []
        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            futures = [
                pool.submit(self._create_order_in_thread, i)
                for i in range(NUM_WORKERS)
            ]
            for future in as_completed(futures):
                results.append(future.result())
        return results

    def _two_line_order(self, stock: int):
        other = Product.objects.create(
            name="Mouse", price=Decimal("19.90"), stock=stock
        )
        Product.objects.filter(id=self.product.id).update(stock=stock)
        order = _service().create_order(
            CreateOrderDTO(
                customer_id=self.customer.id,
                items=[
                    CreateOrderItemDTO(product_id=self.product.id, quantity=1),
                    CreateOrderItemDTO(product_id=other.id, quantity=1),
                ],
            )
        )
        return order, other

    def _assert_conserved(self, product: Product, initial: int) -> None:
        product.refresh_from_db()
        self.assertGreaterEqual(product.stock, 0)
        self.assertEqual(product.stock + _held(product), initial)


@unittest.skipIf(connection.vendor == "sqlite", "needs row-level locking")
class TestStockConcurrency(ConcurrentOrdersMixin, TransactionTestCase):
    """Prove atomic stock reservation under concurrent load."""

    def test_concurrent_orders_exhaust_stock(self):
        """10 threads buy 1 unit from stock=5: exactly 5 succeed."""
        results = self._run_all()

        self.assertEqual(results.count("success"), INITIAL_STOCK)
        self.assertEqual(results.count("insufficient"), NUM_WORKERS - INITIAL_STOCK)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 0)
        self.assertEqual(Order.objects.count(), INITIAL_STOCK)

    def test_concurrent_quantity_changes_keep_total_consistent(self):
        """Parallel edits of one order's lines never leave a drifting total."""
        order, other = self._two_line_order(stock=100)
        items = list(order.items.all())

        def bump(index: int) -> None:
            try:
                item = items[index % len(items)]
                _service().update_item_quantity(
                    str(item.id), UpdateOrderItemDTO(quantity=index + 1)
                )
            finally:
                django.db.connections.close_all()

        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            list(pool.map(bump, range(NUM_WORKERS)))

        self.assertEqual(_service().audit_totals(), [])
        sold = {
            item.product_id: item.quantity
            for item in OrderItem.objects.filter(order_id=order.id)
        }
        self.product.refresh_from_db()
        other.refresh_from_db()
        self.assertEqual(self.product.stock + sold[self.product.id], 100)
        self.assertEqual(other.stock + sold[other.id], 100)


class TestStockConcurrencyAnyBackend(ConcurrentOrdersMixin, TransactionTestCase):
    """Invariants that hold under contention on every database backend."""

    def test_concurrent_orders_never_oversell(self):
        results = self._run_all()

        self.assertEqual(len(results), NUM_WORKERS)
        self.assertLessEqual(set(results), OUTCOMES)
        self.assertLessEqual(results.count("success"), INITIAL_STOCK)
        self.assertEqual(Order.objects.count(), results.count("success"))
        self._assert_conserved(self.product, INITIAL_STOCK)
        self.assertEqual(_service().audit_totals(), [])

    def test_concurrent_quantity_changes_conserve_stock(self):
        order, other = self._two_line_order(stock=20)
        items = list(order.items.all())

        def bump(index: int) -> str:
            try:
                item = items[index % len(items)]
                _service().update_item_quantity(
                    str(item.id), UpdateOrderItemDTO(quantity=index + 1)
                )
                return "success"
            except InsufficientStock:
                return "insufficient"
            except TransactionAborted:
                return "aborted"
            finally:
                django.db.connections.close_all()

        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            results = list(pool.map(bump, range(NUM_WORKERS)))

        self.assertLessEqual(set(results), OUTCOMES)
        self.assertEqual(OrderItem.objects.filter(order_id=order.id).count(), 2)
        self._assert_conserved(self.product, 20)
        self._assert_conserved(other, 20)
        self.assertEqual(_service().audit_totals(), [])
