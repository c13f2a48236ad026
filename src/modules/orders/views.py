"""Order API views.

Exposes the order transaction engine (``OrderService``) via HTTP using
DRF ViewSets.  Domain exceptions are caught and translated into the
standard error envelope; the views never swallow generic exceptions.

- ``OrderViewSet``: ``/api/v1/orders/`` (create, read, update fields,
  delete with stock return).
- ``OrderItemViewSet``: ``/api/v1/order-items/`` (add, read, change
  quantity, remove).
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import error_response
from modules.core.pagination import StandardResultsSetPagination
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import (
    AddOrderItemDTO,
    CreateOrderDTO,
    CreateOrderItemDTO,
    UpdateOrderDTO,
    UpdateOrderItemDTO,
)
from modules.orders.exceptions import (
    CustomerNotFound,
    InsufficientStock,
    InvalidQuantity,
    InvalidStatus,
    OrderError,
    OrderItemNotFound,
    OrderNotFound,
    ProductNotFound,
    TransactionAborted,
)
from modules.orders.filters import OrderFilter, OrderItemFilter
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    AddOrderItemSerializer,
    CreateOrderSerializer,
    OrderItemDetailSerializer,
    OrderListSerializer,
    OrderSerializer,
    UpdateOrderItemSerializer,
    UpdateOrderSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

_ERROR_STATUS = {
    CustomerNotFound: status.HTTP_404_NOT_FOUND,
    ProductNotFound: status.HTTP_404_NOT_FOUND,
    OrderNotFound: status.HTTP_404_NOT_FOUND,
    OrderItemNotFound: status.HTTP_404_NOT_FOUND,
    InsufficientStock: status.HTTP_409_CONFLICT,
    InvalidQuantity: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidStatus: status.HTTP_422_UNPROCESSABLE_ENTITY,
    TransactionAborted: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_ERROR_ATTR = {
    InvalidQuantity: "quantity",
    InvalidStatus: "status",
}


def order_error_response(exc: OrderError) -> Response:
    """Translate an engine failure into the standard error envelope."""
    error_class = type(exc)
    return error_response(
        _ERROR_STATUS.get(error_class, status.HTTP_400_BAD_REQUEST),
        exc.code,
        str(exc),
        attr=_ERROR_ATTR.get(error_class),
        **exc.details,
    )


def _build_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


class OrderScopedThrottleMixin:
    """Writes and reads are throttled in separate scopes."""

    def get_throttles(self) -> list[BaseThrottle]:
        if self.action in {"list", "retrieve"}:
            self.throttle_scope = "order_listing"
        else:
            self.throttle_scope = "order_writes"
        return super().get_throttles()


class OrderViewSet(OrderScopedThrottleMixin, GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: every write goes through the
    service so stock and totals stay consistent.
    """

    queryset = Order.objects.select_related("customer")
    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _build_service()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        dto = CreateOrderDTO(
            customer_id=data["customer_id"],
            items=[
                CreateOrderItemDTO(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                )
                for item in data["items"]
            ],
        )

        try:
            order = self._service.create_order(dto)
        except OrderError as exc:
            return order_error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, customer, date range, total range) is handled
        by ``OrderFilter``; ordering by ``OrderingFilter``.  Paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound as exc:
            return order_error_response(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Update customer / status
    # ------------------------------------------------------------------

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/orders/{pk}/

        Only ``customer_id`` and ``status`` can change; items are managed
        through ``/api/v1/order-items/``.
        """
        update_serializer = UpdateOrderSerializer(data=request.data)
        update_serializer.is_valid(raise_exception=True)
        dto = UpdateOrderDTO(**update_serializer.validated_data)

        try:
            order = self._service.update_order(pk, dto)
        except OrderError as exc:
            return order_error_response(exc)
        return Response(OrderSerializer(order).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/

        Returns every item's units to stock before deleting.
        """
        try:
            self._service.delete_order(pk)
        except OrderError as exc:
            return order_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderItemViewSet(OrderScopedThrottleMixin, GenericViewSet):
    queryset = OrderItem.objects.select_related("order", "product")
    serializer_class = OrderItemDetailSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = OrderItemFilter
    ordering_fields = ["created_at", "quantity", "price_at_order"]
    ordering = ["created_at", "id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _build_service()

    def list(self, request: Request) -> Response:
        """GET /api/v1/order-items/?order=<id>&product=<id>"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderItemDetailSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/order-items/{pk}/"""
        try:
            item = self._service.get_item(pk)
        except OrderItemNotFound as exc:
            return order_error_response(exc)
        return Response(OrderItemDetailSerializer(item).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/order-items/"""
        add_serializer = AddOrderItemSerializer(data=request.data)
        add_serializer.is_valid(raise_exception=True)
        dto = AddOrderItemDTO(**add_serializer.validated_data)

        try:
            item = self._service.add_item(dto)
        except OrderError as exc:
            return order_error_response(exc)
        return Response(
            OrderItemDetailSerializer(item).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/order-items/{pk}/

        Only ``quantity`` can change; stock moves by the difference.
        """
        update_serializer = UpdateOrderItemSerializer(data=request.data)
        update_serializer.is_valid(raise_exception=True)
        dto = UpdateOrderItemDTO(**update_serializer.validated_data)

        try:
            item = self._service.update_item_quantity(pk, dto)
        except OrderError as exc:
            return order_error_response(exc)
        return Response(OrderItemDetailSerializer(item).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/order-items/{pk}/"""
        try:
            self._service.remove_item(pk)
        except OrderError as exc:
            return order_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
