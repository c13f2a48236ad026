"""Product DRF serializers (read side).

``ProductSummarySerializer`` is the projection nested into order items;
it shows the *current* catalogue price, while the item carries its own
``price_at_order`` snapshot.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock",
            "image_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "price", "stock", "image_url"]
        read_only_fields = fields
