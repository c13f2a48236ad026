"""Product API views.

Exposes ``ProductService`` over HTTP.  ``stock`` is accepted on create
only; any attempt to write it afterwards is rejected with 422 because stock
moves exclusively through order operations.
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
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductNotFound
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService


def _not_found(pk: str | None) -> Response:
    return error_response(
        status.HTTP_404_NOT_FOUND, "product_not_found", f"Product {pk} not found."
    )


class ProductViewSet(ListModelMixin, GenericViewSet):
    filterset_class = ProductFilter
    search_fields = ["name", "description"]
    ordering_fields = ["name", "price", "stock", "created_at"]
    ordering = ["name", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.alive()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return _not_found(pk)
        return Response(ProductSerializer(product).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = request.data
        try:
            dto = CreateProductDTO(
                name=data.get("name", ""),
                price=data.get("price"),
                description=data.get("description") or "",
                stock=data.get("stock", 0),
                image_url=data.get("image_url") or "",
            )
        except PydanticValidationError as exc:
            return validation_error_response(exc)

        product = self._service.create_product(dto)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/"""
        data = request.data
        if "stock" in data:
            return error_response(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                "read_only",
                "Stock can only change through orders.",
                attr="stock",
            )
        try:
            dto = UpdateProductDTO(
                name=data.get("name"),
                price=data.get("price"),
                description=data.get("description"),
                image_url=data.get("image_url"),
            )
        except PydanticValidationError as exc:
            return validation_error_response(exc)

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return _not_found(pk)
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return _not_found(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
