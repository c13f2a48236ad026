from __future__ import annotations

from uuid import uuid4

import pytest

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.repositories.interfaces import ICustomerRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return CustomerDjangoRepository()


class TestCustomerRepository:
    def test_implements_interface(self, repo):
        assert isinstance(repo, ICustomerRepository)

    def test_save_lowercases_email(self, repo):
        customer = repo.save(Customer(name="Ada", email="Ada@Example.COM"))
        assert Customer.objects.get(id=customer.id).email == "ada@example.com"

    def test_get_by_id(self, repo, customer):
        assert repo.get_by_id(str(customer.id)) == customer

    def test_get_by_id_missing_or_malformed(self, repo):
        assert repo.get_by_id(str(uuid4())) is None
        assert repo.get_by_id("not-a-uuid") is None

    def test_soft_delete_hides_customer(self, repo, customer):
        assert repo.delete(str(customer.id)) is True

        assert repo.get_by_id(str(customer.id)) is None
        assert repo.list() == []
        assert Customer.objects.filter(id=customer.id).exists()

    def test_delete_missing(self, repo):
        assert repo.delete(str(uuid4())) is False

    def test_get_by_email_includes_deleted(self, repo, customer):
        customer.delete()
        assert repo.get_by_email(" ADA@example.com ") == customer

    def test_list_filters(self, repo, customer, other_customer):
        assert repo.list({"name__icontains": "grace"}) == [other_customer]
