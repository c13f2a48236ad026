"""Order and OrderItem models.

- ``Order.total_amount`` is derived data: it always equals the sum of
  ``quantity * price_at_order`` over the order's current items.  It is only
  written by ``OrderService``.
- ``OrderItem.price_at_order`` is a snapshot of the product price when the
  item was created; it never changes afterwards.
- ``OrderItem.product`` is a weak reference (``SET_NULL``): the item outlives
  its product and keeps its price and quantity.
- Items belong to their order and are removed with it (``CASCADE``).
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import OrderStatus


class Order(BaseModel):
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderItem(BaseModel):
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price_at_order = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(price_at_order__gte=0),
                name="order_items_price_non_negative",
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return (self.price_at_order * self.quantity).quantize(Decimal("0.01"))

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity} @ {self.price_at_order}"
