"""Order domain exceptions.

Raised by the Service Layer and the stock ledger when a precondition
fails.  The API layer (Views) catches these and translates them into
HTTP responses.  Each exception carries the identifiers needed to build a
structured error body.
"""

from __future__ import annotations

from typing import Any, Optional


class OrderError(Exception):
    """Base class for every order transaction failure."""

    code = "order_error"

    def __init__(self, message: str = "", **details: Any) -> None:
        super().__init__(message)
        self.details = details


class CustomerNotFound(OrderError):
    """The customer referenced by the order does not exist."""

    code = "customer_not_found"


class ProductNotFound(OrderError):
    """A product referenced by an order item does not exist."""

    code = "product_not_found"

    def __init__(self, product_id: Any, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"Product {product_id} not found.",
            product_id=str(product_id),
        )
        self.product_id = product_id


class OrderNotFound(OrderError):
    """The requested order does not exist."""

    code = "order_not_found"


class OrderItemNotFound(OrderError):
    """The requested order item does not exist."""

    code = "order_item_not_found"


class InsufficientStock(OrderError):
    """The product does not hold enough stock for the requested quantity."""

    code = "insufficient_stock"

    def __init__(self, product_id: Any, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}.",
            product_id=str(product_id),
            requested=requested,
            available=available,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidQuantity(OrderError):
    """A quantity is not an integer of at least 1."""

    code = "invalid_quantity"


class InvalidStatus(OrderError):
    """A status value outside ``OrderStatus``."""

    code = "invalid_status"


class TransactionAborted(OrderError):
    """The database rejected the unit of work; nothing was written."""

    code = "transaction_aborted"
