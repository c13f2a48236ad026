from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.products.dtos import CreateProductDTO, UpdateProductDTO

pytestmark = pytest.mark.unit


class TestCreateProductDTO:
    def test_valid(self):
        dto = CreateProductDTO(name=" Widget ", price="5", stock=4)
        assert dto.name == "Widget"
        assert dto.price == Decimal("5.00")
        assert dto.stock == 4

    def test_stock_defaults_to_zero(self):
        assert CreateProductDTO(name="Widget", price="1.00").stock == 0

    def test_negative_stock(self):
        with pytest.raises(ValidationError, match="Stock cannot be negative"):
            CreateProductDTO(name="Widget", price="1.00", stock=-1)

    def test_negative_price(self):
        with pytest.raises(ValidationError, match="Price cannot be negative"):
            CreateProductDTO(name="Widget", price="-0.01")

    def test_blank_name(self):
        with pytest.raises(ValidationError):
            CreateProductDTO(name="  ", price="1.00")

    def test_is_frozen(self):
        dto = CreateProductDTO(name="Widget", price="1.00")
        with pytest.raises(ValidationError):
            dto.stock = 5


class TestUpdateProductDTO:
    def test_has_no_stock_field(self):
        assert "stock" not in UpdateProductDTO.model_fields

    def test_price_quantized(self):
        assert UpdateProductDTO(price="2.5").price == Decimal("2.50")
