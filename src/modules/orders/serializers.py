"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.

Input serializers only check shapes and types.  Quantity bounds and
status values are business rules and are reported by the service
(``InvalidQuantity`` / ``InvalidStatus``).
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.serializers import CustomerSummarySerializer
from modules.orders.models import Order, OrderItem
from modules.products.serializers import ProductSummarySerializer

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField()


class CreateOrderSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    items = CreateOrderItemSerializer(many=True, allow_empty=False)


class UpdateOrderSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField(required=False)
    status = serializers.CharField(required=False)


class AddOrderItemSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField()


class UpdateOrderItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Order line as nested inside an order.

    ``product`` is ``null`` once the product row is gone; the line keeps
    its ``product_id`` snapshot only while the row exists.
    """

    product_id = serializers.UUIDField(read_only=True, allow_null=True)
    product = ProductSummarySerializer(read_only=True, allow_null=True)
    line_total = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product",
            "quantity",
            "price_at_order",
            "line_total",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderSummarySerializer(serializers.ModelSerializer):
    customer_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Order
        fields = ["id", "customer_id", "status", "total_amount"]
        read_only_fields = fields


class OrderItemDetailSerializer(OrderItemSerializer):
    """Standalone order line with its owning order attached."""

    order_id = serializers.UUIDField(read_only=True)
    order = OrderSummarySerializer(read_only=True)

    class Meta(OrderItemSerializer.Meta):
        fields = ["id", "order_id", "order"] + OrderItemSerializer.Meta.fields[1:]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with customer and nested items."""

    customer_id = serializers.UUIDField(read_only=True)
    customer = CustomerSummarySerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "customer",
            "status",
            "total_amount",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested items)."""

    customer_id = serializers.UUIDField(read_only=True)
    customer = CustomerSummarySerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "customer",
            "status",
            "total_amount",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
