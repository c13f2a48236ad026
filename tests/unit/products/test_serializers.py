from __future__ import annotations

import pytest

from modules.products.serializers import ProductSerializer, ProductSummarySerializer

pytestmark = pytest.mark.unit


class TestProductSerializers:
    def test_full(self, product):
        data = ProductSerializer(product).data
        assert data["stock"] == 10
        assert data["price"] == "5.00"
        assert "deleted_at" not in data

    def test_summary(self, product):
        assert set(ProductSummarySerializer(product).data) == {
            "id",
            "name",
            "price",
            "stock",
            "image_url",
        }
