"""Order service layer (Use Cases).

The order transaction engine.  Every command below is one unit of work:
it runs inside ``transaction.atomic()`` and either commits all of its
stock movements, item writes and total changes, or none of them.

Row locks are always taken in the same order: order row, then order item
row, then product rows (through ``StockLedger``).  Two operations touching
the same order therefore serialise on the order row, and two reservations
of the same product serialise on the product row.

Totals policy:
- create / add / remove adjust ``total_amount`` incrementally;
- a quantity update recomputes it from all current items.
``total_drift`` and ``audit_totals`` report orders where the two disagree.
"""

from __future__ import annotations

import functools
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple, TypeVar

import structlog
from django.db import DatabaseError, transaction

from modules.orders.constants import ZERO, OrderStatus
from modules.orders.exceptions import (
    CustomerNotFound,
    InvalidQuantity,
    InvalidStatus,
    OrderItemNotFound,
    OrderNotFound,
    TransactionAborted,
)
from modules.orders.ledger import StockLedger, check_quantity, line_total, total_drift

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.dtos import (
        AddOrderItemDTO,
        CreateOrderDTO,
        UpdateOrderDTO,
        UpdateOrderItemDTO,
    )
    from modules.orders.models import Order, OrderItem
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

CallableT = TypeVar("CallableT", bound=Callable[..., Any])


def atomic_operation(func: CallableT) -> CallableT:
    """Run *func* in one transaction; database failures become
    ``TransactionAborted`` after the rollback."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            with transaction.atomic():
                return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.error(
                "order.transaction_aborted",
                operation=func.__name__,
                error=str(exc),
            )
            raise TransactionAborted(
                f"{func.__name__} was rolled back: {exc}"
            ) from exc

    return wrapper  # type: ignore[return-value]


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._ledger = StockLedger(product_repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @atomic_operation
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a pending order and reserve stock for each of its items.

        Items are processed in input order; a second line for the same
        product sees the stock already reduced by the first.

        Raises:
            CustomerNotFound: customer does not exist.
            InvalidQuantity: no items, or a quantity below 1.
            ProductNotFound: a product does not exist.
            InsufficientStock: a product cannot cover its line.
        """
        log = logger.bind(customer_id=str(dto.customer_id))

        customer = self._customer_repo.get_by_id(str(dto.customer_id))
        if not customer:
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")
        if not dto.items:
            raise InvalidQuantity("Order must have at least one item.")
        for item_dto in dto.items:
            check_quantity(item_dto.quantity)

        total = ZERO
        lines = []
        for item_dto in dto.items:
            product = self._ledger.reserve(item_dto.product_id, item_dto.quantity)
            total += line_total(item_dto.quantity, product.price)
            lines.append(
                {
                    "product_id": product.id,
                    "quantity": item_dto.quantity,
                    "price_at_order": product.price,
                }
            )

        order = self._order_repo.create(
            {
                "customer_id": customer.id,
                "status": OrderStatus.PENDING,
                "total_amount": total,
                "items": lines,
            }
        )
        log.info(
            "order.created",
            order_id=str(order.id),
            item_count=len(lines),
            total_amount=str(total),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @atomic_operation
    def add_item(self, dto: AddOrderItemDTO) -> OrderItem:
        """Add a line to an existing order at the product's current price.

        Raises:
            InvalidQuantity: quantity below 1.
            OrderNotFound: order does not exist.
            ProductNotFound: product does not exist.
            InsufficientStock: product cannot cover the quantity.
        """
        check_quantity(dto.quantity)
        order = self._order_repo.get_for_update(str(dto.order_id))
        if not order:
            raise OrderNotFound(f"Order {dto.order_id} not found.")

        product = self._ledger.reserve(dto.product_id, dto.quantity)
        item = self._order_repo.add_item(
            order,
            product_id=product.id,
            quantity=dto.quantity,
            price_at_order=product.price,
        )
        order = self._order_repo.adjust_total(
            order, line_total(dto.quantity, product.price)
        )
        logger.info(
            "order.item_added",
            order_id=str(order.id),
            item_id=str(item.id),
            product_id=str(product.id),
            quantity=dto.quantity,
            total_amount=str(order.total_amount),
        )
        return self._order_repo.get_item(str(item.id)) or item

    @atomic_operation
    def update_item_quantity(self, item_id: str, dto: UpdateOrderItemDTO) -> OrderItem:
        """Change the quantity of a line and move the difference in stock.

        Growing a line reserves the extra units; shrinking it releases them
        (skipped when the product row is gone).  The order total is then
        recomputed from all current items.

        Raises:
            OrderItemNotFound: item does not exist.
            InvalidQuantity: new quantity below 1.
            ProductNotFound: the line grows but its product is gone.
            InsufficientStock: the product cannot cover the extra units.
        """
        order, item = self._lock_item(item_id)
        check_quantity(dto.quantity)

        log = logger.bind(order_id=str(order.id), item_id=str(item.id))
        delta = dto.quantity - item.quantity
        if delta > 0:
            self._ledger.reserve(item.product_id, delta)
        elif delta < 0:
            self._ledger.release(item.product_id, -delta)

        item.quantity = dto.quantity
        self._order_repo.save_item(item)

        order = self._order_repo.recalculate_total(order)
        log.info(
            "order.total_recalculated",
            quantity=dto.quantity,
            delta=delta,
            total_amount=str(order.total_amount),
        )
        return self._order_repo.get_item(str(item.id)) or item

    @atomic_operation
    def remove_item(self, item_id: str) -> None:
        """Delete a line, returning its units to stock and its amount from
        the order total.

        Raises:
            OrderItemNotFound: item does not exist.
        """
        order, item = self._lock_item(item_id)

        self._ledger.release(item.product_id, item.quantity)
        amount = line_total(item.quantity, item.price_at_order)
        order = self._order_repo.adjust_total(order, -amount)
        self._order_repo.delete_item(item)
        logger.info(
            "order.item_removed",
            order_id=str(order.id),
            item_id=str(item_id),
            amount=str(amount),
            total_amount=str(order.total_amount),
        )

    @atomic_operation
    def delete_order(self, order_id: str) -> None:
        """Return every item's units to stock, then delete the order and its
        items.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        items = self._order_repo.list_items({"order_id": order.id})
        for item in items:
            self._ledger.release(item.product_id, item.quantity)

        self._order_repo.delete(str(order.id))
        logger.info("order.deleted", order_id=str(order_id), item_count=len(items))

    @atomic_operation
    def update_order(self, order_id: str, dto: UpdateOrderDTO) -> Order:
        """Change the customer and/or status of an order.

        Items, stock and the total are never touched here.

        Raises:
            OrderNotFound: order does not exist.
            InvalidStatus: status outside ``OrderStatus``.
            CustomerNotFound: the new customer does not exist.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        if dto.status is not None and dto.status not in OrderStatus.values:
            raise InvalidStatus(
                f"Invalid status {dto.status!r}; expected one of "
                f"{', '.join(OrderStatus.values)}."
            )

        changed = []
        if dto.customer_id is not None:
            customer = self._customer_repo.get_by_id(str(dto.customer_id))
            if not customer:
                raise CustomerNotFound(f"Customer {dto.customer_id} not found.")
            order.customer = customer
            changed.append("customer")
        if dto.status is not None:
            order.status = dto.status
            changed.append("status")

        if changed:
            self._order_repo.save(order)
        logger.info("order.updated", order_id=str(order_id), fields=changed)
        return self._order_repo.get_by_id(str(order_id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        return self._order_repo.list(filters)

    def get_item(self, item_id: str) -> OrderItem:
        item = self._order_repo.get_item(str(item_id))
        if not item:
            raise OrderItemNotFound(f"Order item {item_id} not found.")
        return item

    def list_items(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderItem]:
        return self._order_repo.list_items(filters)

    def audit_totals(self) -> List[Tuple[Order, Decimal]]:
        """Orders whose stored total differs from the sum of their items."""
        return [
            (order, drift)
            for order in self._order_repo.list()
            if (drift := total_drift(order)) != ZERO
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_item(self, item_id: str) -> Tuple[Order, OrderItem]:
        """Lock the item's order, then the item itself.

        The first read is unlocked and only finds the owning order, so the
        order row is always locked before the item row.
        """
        item = self._order_repo.get_item(str(item_id))
        if not item:
            raise OrderItemNotFound(f"Order item {item_id} not found.")

        order = self._order_repo.get_for_update(str(item.order_id))
        locked = self._order_repo.get_item_for_update(str(item_id))
        if not order or not locked:
            raise OrderItemNotFound(f"Order item {item_id} not found.")
        return order, locked
