from __future__ import annotations

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def user():
    return get_user_model().objects.create_user(
        username="ledger-user", password="testpass123", email="ledger@example.com"
    )


@pytest.fixture()
def auth_client(user):
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def customer():
    return Customer.objects.create(name="Ada Lovelace", email="ada@example.com")


@pytest.fixture()
def other_customer():
    return Customer.objects.create(name="Grace Hopper", email="grace@example.com")


@pytest.fixture()
def make_product():
    """Factory: ``make_product(stock=10, price="5.00", name=...)``."""
    counter = {"n": 0}

    def _make(stock: int = 10, price: str = "5.00", name: str | None = None):
        counter["n"] += 1
        return Product.objects.create(
            name=name or f"Product {counter['n']}",
            price=Decimal(price),
            stock=stock,
        )

    return _make


@pytest.fixture()
def product(make_product):
    """Scenario product P: stock 10 at 5.00."""
    return make_product(stock=10, price="5.00", name="Widget")


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )
