"""Integration tests for order read endpoints (retrieve and list)."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, UpdateOrderDTO

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


@pytest.fixture()
def place_order(order_service, make_product):
    def _place(customer, quantity=1, price="5.00"):
        product = make_product(price=price, stock=100)
        return order_service.create_order(
            CreateOrderDTO(
                customer_id=customer.id,
                items=[CreateOrderItemDTO(product_id=product.id, quantity=quantity)],
            )
        )

    return _place


class TestOrderRetrieve:
    def test_retrieve(self, auth_client, customer, place_order):
        order = place_order(customer, quantity=3)

        response = auth_client.get(f"{URL}{order.id}/")

        assert response.status_code == 200
        assert response.data["id"] == str(order.id)
        assert response.data["total_amount"] == "15.00"
        assert response.data["items"][0]["quantity"] == 3

    def test_retrieve_unknown(self, auth_client):
        response = auth_client.get(f"{URL}{uuid4()}/")
        assert response.status_code == 404
        assert response.data["errors"][0]["code"] == "order_not_found"

    def test_retrieve_malformed_id(self, auth_client):
        assert auth_client.get(f"{URL}not-a-uuid/").status_code == 404

    def test_item_shows_null_product_after_hard_delete(
        self, auth_client, customer, place_order
    ):
        order = place_order(customer)
        order.items.get().product.hard_delete()

        item = auth_client.get(f"{URL}{order.id}/").data["items"][0]

        assert item["product"] is None
        assert item["product_id"] is None
        assert item["price_at_order"] == "5.00"


class TestOrderList:
    def test_list_is_paginated(self, auth_client, customer, place_order):
        for _ in range(3):
            place_order(customer)

        response = auth_client.get(URL, {"page_size": 2})

        assert response.status_code == 200
        assert response.data["count"] == 3
        assert len(response.data["results"]) == 2
        assert response.data["next"] is not None
        assert "items" not in response.data["results"][0]

    def test_newest_first(self, auth_client, customer, place_order):
        first = place_order(customer)
        second = place_order(customer)

        ids = [row["id"] for row in auth_client.get(URL).data["results"]]

        assert ids == [str(second.id), str(first.id)]

    def test_filter_by_customer(
        self, auth_client, customer, other_customer, place_order
    ):
        place_order(customer)
        theirs = place_order(other_customer)

        response = auth_client.get(URL, {"customer": str(other_customer.id)})

        assert [row["id"] for row in response.data["results"]] == [str(theirs.id)]

    def test_filter_by_status(self, auth_client, customer, place_order, order_service):
        place_order(customer)
        shipped = place_order(customer)
        order_service.update_order(
            str(shipped.id), UpdateOrderDTO(status=OrderStatus.SHIPPED)
        )

        response = auth_client.get(URL, {"status": "shipped"})

        assert response.data["count"] == 1
        assert response.data["results"][0]["status"] == "shipped"

    def test_filter_by_total_range(self, auth_client, customer, place_order):
        place_order(customer, quantity=1)
        big = place_order(customer, quantity=10)

        response = auth_client.get(URL, {"min_total": "20"})

        assert [row["id"] for row in response.data["results"]] == [str(big.id)]
        assert Decimal(response.data["results"][0]["total_amount"]) == Decimal("50.00")

    def test_order_by_total(self, auth_client, customer, place_order):
        place_order(customer, quantity=4)
        place_order(customer, quantity=1)

        response = auth_client.get(URL, {"ordering": "total_amount"})

        totals = [row["total_amount"] for row in response.data["results"]]
        assert totals == ["5.00", "20.00"]
