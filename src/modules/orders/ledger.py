"""Stock ledger.

Every change to ``Product.stock`` goes through ``StockLedger``: a
reservation locks a live product row, checks sufficiency and decrements; a
release locks the row, soft-deleted or not, and increments.  Both run inside the caller's
``transaction.atomic()`` block, so a failure later in the same operation
rolls the movement back.

The module-level helpers do the order-total arithmetic in ``Decimal``
quantized to cents.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, Optional

import structlog

from modules.orders.constants import CENT, ZERO
from modules.orders.exceptions import InsufficientStock, InvalidQuantity, ProductNotFound

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def check_quantity(quantity: Any) -> int:
    """Return *quantity* if it is an integer of at least 1.

    Raises:
        InvalidQuantity: anything else (``bool`` included).
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(f"Quantity must be an integer, got {quantity!r}.")
    if quantity < 1:
        raise InvalidQuantity(f"Quantity must be at least 1, got {quantity}.")
    return quantity


def line_total(quantity: int, price: Decimal) -> Decimal:
    return (Decimal(price) * quantity).quantize(CENT)


def order_total(items: Iterable[OrderItem]) -> Decimal:
    """Sum of ``quantity * price_at_order`` over *items*."""
    return sum(
        (line_total(item.quantity, item.price_at_order) for item in items), ZERO
    ).quantize(CENT)


def total_drift(order: Order) -> Decimal:
    """Stored total minus the total recomputed from the order's items.

    Zero for every order whose total is consistent.
    """
    return (order.total_amount - order_total(order.items.all())).quantize(CENT)


class StockLedger:
    def __init__(self, product_repository: IProductRepository) -> None:
        self._product_repo = product_repository

    def reserve(self, product_id: Any, quantity: int) -> Product:
        """Take *quantity* units out of a product's stock.

        Returns the locked product with its stock already decremented; its
        ``price`` is the price snapshot for the item being created or grown.

        Raises:
            InvalidQuantity: *quantity* is not an integer >= 1.
            ProductNotFound: the product is missing or soft-deleted.
            InsufficientStock: ``stock < quantity``.
        """
        check_quantity(quantity)
        product = self._product_repo.get_for_update(str(product_id))
        if not product:
            raise ProductNotFound(product_id)

        if product.stock < quantity:
            logger.warning(
                "ledger.insufficient_stock",
                product_id=str(product.id),
                requested=quantity,
                available=product.stock,
            )
            raise InsufficientStock(product.id, quantity, product.stock)

        product = self._product_repo.adjust_stock(product, -quantity)
        logger.info(
            "ledger.stock_reserved",
            product_id=str(product.id),
            quantity=quantity,
            remaining=product.stock,
        )
        return product

    def release(self, product_id: Any, quantity: int) -> Optional[Product]:
        """Put *quantity* units back into a product's stock.

        Soft-deleted products still receive their units.  Only a line whose
        product row is gone (a null reference) skips the release, which is
        logged.
        """
        check_quantity(quantity)
        product = (
            self._product_repo.get_for_release(str(product_id))
            if product_id is not None
            else None
        )
        if not product:
            logger.warning(
                "ledger.release_skipped",
                product_id=str(product_id) if product_id is not None else None,
                quantity=quantity,
            )
            return None

        product = self._product_repo.adjust_stock(product, quantity)
        logger.info(
            "ledger.stock_released",
            product_id=str(product.id),
            quantity=quantity,
            restored_stock=product.stock,
        )
        return product
