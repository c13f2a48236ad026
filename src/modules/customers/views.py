"""Customer API views.

Exposes ``CustomerService`` over HTTP.  Domain exceptions are caught and
translated into status codes; generic exceptions are never swallowed.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import error_response, validation_error_response
from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
from modules.customers.exceptions import CustomerAlreadyExists, CustomerNotFound
from modules.customers.filters import CustomerFilter
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import CustomerSerializer
from modules.customers.services import CustomerService


def _not_found(pk: str | None) -> Response:
    return error_response(
        status.HTTP_404_NOT_FOUND, "customer_not_found", f"Customer {pk} not found."
    )


class CustomerViewSet(ListModelMixin, GenericViewSet):
    """List/retrieve/create/update/delete customers."""

    filterset_class = CustomerFilter
    search_fields = ["name", "email"]
    ordering_fields = ["created_at", "name", "email"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Customer.objects.alive()
    serializer_class = CustomerSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(repository=CustomerDjangoRepository())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        try:
            customer = self._service.get_customer(pk)
        except CustomerNotFound:
            return _not_found(pk)
        return Response(CustomerSerializer(customer).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        data = request.data
        try:
            dto = CreateCustomerDTO(
                name=data.get("name", ""),
                email=data.get("email", ""),
                phone=data.get("phone") or "",
                address=data.get("address") or "",
            )
        except PydanticValidationError as exc:
            return validation_error_response(exc)

        try:
            customer = self._service.create_customer(dto)
        except CustomerAlreadyExists as exc:
            return error_response(
                status.HTTP_409_CONFLICT, "customer_exists", str(exc), attr="email"
            )

        return Response(
            CustomerSerializer(customer).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/customers/{pk}/ (partial semantics for both)."""
        data = request.data
        try:
            dto = UpdateCustomerDTO(
                name=data.get("name"),
                email=data.get("email"),
                phone=data.get("phone"),
                address=data.get("address"),
            )
        except PydanticValidationError as exc:
            return validation_error_response(exc)

        try:
            customer = self._service.update_customer(pk, dto)
        except CustomerNotFound:
            return _not_found(pk)
        except CustomerAlreadyExists as exc:
            return error_response(
                status.HTTP_409_CONFLICT, "customer_exists", str(exc), attr="email"
            )

        return Response(CustomerSerializer(customer).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        try:
            self._service.delete_customer(pk)
        except CustomerNotFound:
            return _not_found(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
